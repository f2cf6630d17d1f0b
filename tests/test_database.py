"""
Unit tests for the thread document store.
"""

import asyncio
import aiosqlite
import pytest
from datetime import timedelta

from database import DatabaseManager
from exceptions import AuthorizationError, StorageError
from replies import Reply
from threads import Thread
from utils import new_id


def make_thread(board="test", text="T", **kwargs):
    return Thread(new_id(), board, text, "pw", **kwargs)


@pytest.mark.asyncio
async def test_document_round_trip(db):
    thread = make_thread()
    thread.replies.append(Reply(new_id(), "R", "q", reported=True))
    await db.insert_thread(thread)

    stored = await db.get_thread(thread.thread_id)

    assert stored.to_dict() == thread.to_dict()


@pytest.mark.asyncio
async def test_get_missing_thread(db):
    assert await db.get_thread("missing") is None


@pytest.mark.asyncio
async def test_threads_by_board_order_and_limit(db):
    base = make_thread().created_on
    for minutes in (5, 1, 3, 4, 2):
        moment = base + timedelta(minutes=minutes)
        await db.insert_thread(make_thread(text=str(minutes), created_on=moment))
    await db.insert_thread(make_thread(board="other", created_on=base + timedelta(hours=1)))

    threads = await db.get_threads_by_board("test", 3)

    assert [t.text for t in threads] == ["5", "4", "3"]


@pytest.mark.asyncio
async def test_equal_bump_times_list_newest_insert_first(db):
    moment = make_thread().created_on
    first = make_thread(text="first", created_on=moment)
    second = make_thread(text="second", created_on=moment)
    await db.insert_thread(first)
    await db.insert_thread(second)

    threads = await db.get_threads_by_board("test", 10)

    assert [t.text for t in threads] == ["second", "first"]


@pytest.mark.asyncio
async def test_update_thread_writes_bump_column(db):
    old = make_thread(text="old")
    new = make_thread(text="new", created_on=old.created_on + timedelta(seconds=1))
    await db.insert_thread(old)
    await db.insert_thread(new)

    def bump(thread):
        thread.bumped_on = thread.bumped_on + timedelta(minutes=1)

    updated = await db.update_thread(old.thread_id, bump)
    threads = await db.get_threads_by_board("test", 10)

    assert updated.bumped_on > old.bumped_on
    assert [t.text for t in threads] == ["old", "new"]


@pytest.mark.asyncio
async def test_update_missing_thread_returns_none(db):
    assert await db.update_thread("missing", lambda thread: None) is None


@pytest.mark.asyncio
async def test_update_thread_rolls_back_on_error(db):
    thread = make_thread()
    await db.insert_thread(thread)

    def fail(stored):
        stored.text = "changed"
        raise AuthorizationError()

    with pytest.raises(AuthorizationError):
        await db.update_thread(thread.thread_id, fail)

    stored = await db.get_thread(thread.thread_id)
    assert stored.text == "T"


@pytest.mark.asyncio
async def test_delete_thread(db):
    thread = make_thread()
    await db.insert_thread(thread)

    assert await db.delete_thread(thread.thread_id) is True
    assert await db.delete_thread(thread.thread_id) is False
    assert await db.get_thread(thread.thread_id) is None


@pytest.mark.asyncio
async def test_duplicate_id_is_storage_error(db):
    thread = make_thread()
    await db.insert_thread(thread)

    with pytest.raises(StorageError) as exc_info:
        await db.insert_thread(thread)
    assert isinstance(exc_info.value.__cause__, aiosqlite.Error)


@pytest.mark.asyncio
async def test_missing_schema_is_storage_error(tmp_path):
    database = DatabaseManager(str(tmp_path / "uninitialized.db"))

    with pytest.raises(StorageError):
        await database.get_thread("anything")


@pytest.mark.asyncio
async def test_concurrent_replies_are_not_lost(service, db):
    thread = await service.create_thread("test", "T", "p")

    await asyncio.gather(*(
        service.create_reply(thread.thread_id, f"reply {i}", "q") for i in range(20)
    ))

    stored = await db.get_thread(thread.thread_id)
    assert len(stored.replies) == 20
    assert sorted(r.text for r in stored.replies) == sorted(f"reply {i}" for i in range(20))
    assert stored.bumped_on == max(r.created_on for r in stored.replies)


@pytest.mark.asyncio
async def test_concurrent_reports_are_not_lost(service, db):
    thread = await service.create_thread("test", "T", "p")
    for i in range(10):
        updated = await service.create_reply(thread.thread_id, f"reply {i}", "q")

    await asyncio.gather(
        service.report_thread(thread.thread_id),
        *(service.report_reply(thread.thread_id, r.reply_id) for r in updated.replies),
        service.create_reply(thread.thread_id, "late", "q"),
    )

    stored = await db.get_thread(thread.thread_id)
    assert stored.reported is True
    assert len(stored.replies) == 11
    assert all(r.reported for r in stored.replies[:10])
    assert stored.replies[-1].text == "late"
