"""HTTP helpers the chat page uses to persist chats and register uploads.

Persistence is best effort: a failed save is logged and the conversation
carries on from the in-page state.
"""

import base64
import logging

import httpx

from docchat.models.records import ChatRecord, FileMetadata, Message

logger = logging.getLogger(__name__)

TITLE_LENGTH = 50


def chat_title(prompt: str) -> str:
    """Title a new chat after its first prompt."""
    prompt = prompt.strip()
    if len(prompt) > TITLE_LENGTH:
        return prompt[:TITLE_LENGTH] + "..."
    return prompt


async def load_chats(client: httpx.AsyncClient, user_id: str) -> list[ChatRecord]:
    """Fetch a user's chats, most recently updated first."""
    try:
        response = await client.get("/chats", params={"user_id": user_id})
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to load chats for {user_id}: {e}")
        return []
    return [ChatRecord.model_validate(item) for item in response.json()]


async def save_turn(
    client: httpx.AsyncClient,
    user_id: str,
    chat_id: str | None,
    turn: list[Message],
) -> str | None:
    """Store a finished turn, creating the chat on its first turn.

    Args:
        client: HTTP client pointed at the API.
        user_id: Owner of the chat.
        chat_id: Existing chat, or None to create one.
        turn: Messages of the turn in order (user, then assistant).

    Returns:
        The chat id, or the given one unchanged if saving failed.
    """
    try:
        if chat_id is None:
            first = next((m.content for m in turn if m.role == "user"), "")
            response = await client.post(
                "/chats",
                json={
                    "user_id": user_id,
                    "title": chat_title(first),
                    "messages": [m.model_dump(mode="json") for m in turn],
                },
            )
            response.raise_for_status()
            chat_id = response.json()["id"]
            logger.info(f"Created chat {chat_id}")
            return chat_id

        for message in turn:
            response = await client.post(
                f"/chats/{chat_id}/messages",
                json={"message": message.model_dump(mode="json")},
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to save turn for chat {chat_id}: {e}")
    return chat_id


async def register_file(
    client: httpx.AsyncClient,
    user_id: str,
    name: str,
    content: bytes,
    content_type: str = "application/pdf",
) -> FileMetadata | None:
    """Record an uploaded file with its bytes inlined as a data URL."""
    encoded = base64.b64encode(content).decode("ascii")
    try:
        response = await client.post(
            "/files",
            json={
                "user_id": user_id,
                "name": name,
                "size": len(content),
                "type": content_type,
                "url": f"data:{content_type};base64,{encoded}",
            },
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Failed to register file {name}: {e}")
        return None
    return FileMetadata.model_validate(response.json())
