"""Unit tests for the in-memory chat and file stores."""

from datetime import UTC, datetime, timedelta

import pytest_check as check

from docchat.models.records import ChatRecord, ChatUpdate, FileMetadata, Message
from docchat.storage import InMemoryChatStore, InMemoryDocumentStore


class TestInMemoryChatStore:
    async def test_list_by_user_newest_first(self) -> None:
        store = InMemoryChatStore()
        now = datetime.now(UTC)
        older = ChatRecord(user_id="u1", title="older", updated_at=now - timedelta(hours=1))
        newer = ChatRecord(user_id="u1", title="newer", updated_at=now)
        other = ChatRecord(user_id="u2", title="other")
        for chat in (older, newer, other):
            await store.create(chat)

        chats = await store.list_by_user("u1")

        assert [c.title for c in chats] == ["newer", "older"]

    async def test_append_message(self) -> None:
        store = InMemoryChatStore()
        chat = await store.create(ChatRecord(user_id="u1"))

        updated = await store.append_message(chat.id, Message(role="user", content="hi"))

        check.is_not_none(updated)
        check.equal([m.content for m in updated.messages], ["hi"])
        check.greater_equal(updated.updated_at, chat.updated_at)

    async def test_append_to_missing_chat(self) -> None:
        store = InMemoryChatStore()

        assert await store.append_message("nope", Message(role="user", content="hi")) is None

    async def test_replace_only_given_fields(self) -> None:
        store = InMemoryChatStore()
        chat = await store.create(
            ChatRecord(user_id="u1", messages=[Message(role="user", content="keep me")])
        )

        updated = await store.replace(chat.id, ChatUpdate(title="Renamed"))

        check.equal(updated.title, "Renamed")
        check.equal([m.content for m in updated.messages], ["keep me"])

    async def test_replace_messages(self) -> None:
        store = InMemoryChatStore()
        chat = await store.create(ChatRecord(user_id="u1"))
        messages = [Message(role="user", content="q"), Message(role="assistant", content="a")]

        updated = await store.replace(chat.id, ChatUpdate(messages=messages))

        assert [m.role for m in updated.messages] == ["user", "assistant"]

    async def test_delete(self) -> None:
        store = InMemoryChatStore()
        chat = await store.create(ChatRecord(user_id="u1"))

        check.is_true(await store.delete_by_id(chat.id))
        check.is_false(await store.delete_by_id(chat.id))
        check.is_none(await store.get(chat.id))


class TestInMemoryDocumentStore:
    async def test_create_list_delete(self) -> None:
        store = InMemoryDocumentStore()
        file = await store.create(
            FileMetadata(user_id="u1", name="a.pdf", size=10, type="application/pdf", url="/a")
        )

        check.equal([f.name for f in await store.list_by_user("u1")], ["a.pdf"])
        check.equal(await store.list_by_user("u2"), [])
        check.is_true(await store.delete_by_id(file.id))
        check.equal(await store.list_by_user("u1"), [])
