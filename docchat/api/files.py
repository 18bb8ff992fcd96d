"""Uploaded file metadata endpoints over the document store."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from docchat.api.dependencies import get_document_store
from docchat.models.records import FileCreate, FileMetadata
from docchat.storage import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])

StoreDep = Annotated[DocumentStore, Depends(get_document_store)]


@router.get("", response_model=list[FileMetadata])
async def list_files(
    store: StoreDep,
    user_id: Annotated[str | None, Query()] = None,
) -> list[FileMetadata]:
    """List a user's files, newest upload first."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID is required",
        )
    return list(await store.list_by_user(user_id))


@router.post("", response_model=FileMetadata, status_code=status.HTTP_201_CREATED)
async def register_file(payload: FileCreate, store: StoreDep) -> FileMetadata:
    """Record metadata for a file stored elsewhere."""
    file = await store.create(FileMetadata(**payload.model_dump()))
    logger.info(f"Registered file {file.name} ({file.size} bytes) for user {file.user_id}")
    return file


@router.delete("/{file_id}")
async def delete_file(file_id: str, store: StoreDep) -> dict[str, str]:
    if not await store.delete_by_id(file_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")
    return {"message": "File deleted successfully"}
