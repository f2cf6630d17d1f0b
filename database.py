import aiosqlite
import json
import logging
from datetime import datetime
from functools import wraps
from typing import Callable, List, Optional
from exceptions import StorageError
from threads import Thread
from utils import timestamp


logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS threads (
    id TEXT PRIMARY KEY,
    board TEXT NOT NULL,
    bumped_on REAL NOT NULL,
    document TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_threads_board_bumped ON threads (board, bumped_on DESC);
"""


def _encode(value):
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def dump_document(thread: Thread) -> str:
    return json.dumps(thread.to_dict(), default=_encode)


def load_document(document: str) -> Thread:
    return Thread.from_dict(json.loads(document))


def storage_errors(func):
    """Report driver failures as StorageError so callers can tell them apart."""
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except aiosqlite.Error as e:
            logger.exception("Storage failure in %s", func.__name__)
            raise StorageError(f"Storage failure: {e}") from e
    return wrapper


class DatabaseManager:
    """Thread documents, one row each, with their replies embedded in the JSON."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    @storage_errors
    async def init_database(self):
        async with aiosqlite.connect(self.db_path) as conn:
            await conn.executescript(SCHEMA)
            await conn.commit()
        logger.info("Thread store ready at %s", self.db_path)

    async def execute_query(self, query: str, params: tuple = (), fetch_one: bool = False):
        async with aiosqlite.connect(self.db_path) as conn:
            conn.row_factory = aiosqlite.Row
            cursor = await conn.cursor()
            await cursor.execute(query, params)

            if query.strip().upper().startswith(('INSERT', 'UPDATE', 'DELETE')):
                await conn.commit()
                result = cursor.rowcount
            elif fetch_one:
                result = await cursor.fetchone()
            else:
                result = await cursor.fetchall()
            await cursor.close()
            return result

    @storage_errors
    async def insert_thread(self, thread: Thread):
        await self.execute_query(
            "INSERT INTO threads (id, board, bumped_on, document) VALUES (?, ?, ?, ?)",
            (thread.thread_id, thread.board, timestamp(thread.bumped_on), dump_document(thread))
        )

    @storage_errors
    async def get_thread(self, thread_id: str) -> Optional[Thread]:
        row = await self.execute_query(
            "SELECT document FROM threads WHERE id = ?",
            (thread_id,),
            fetch_one=True
        )
        return load_document(row["document"]) if row else None

    @storage_errors
    async def get_threads_by_board(self, board: str, limit: int) -> List[Thread]:
        """Threads of one board, most recently bumped first."""
        rows = await self.execute_query("""
            SELECT document FROM threads
            WHERE board = ?
            ORDER BY bumped_on DESC, rowid DESC
            LIMIT ?
        """, (board, limit))
        return [load_document(row["document"]) for row in rows]

    @storage_errors
    async def update_thread(self, thread_id: str, mutate: Callable[[Thread], None]) -> Optional[Thread]:
        """Read, mutate and write back one thread inside a single write transaction.

        Returns None when the thread does not exist. Anything raised by
        ``mutate`` rolls the transaction back and propagates unchanged.
        """
        async with aiosqlite.connect(self.db_path, isolation_level=None) as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                cursor = await conn.execute("SELECT document FROM threads WHERE id = ?", (thread_id,))
                row = await cursor.fetchone()
                await cursor.close()
                if row is None:
                    await conn.execute("ROLLBACK")
                    return None

                thread = load_document(row[0])
                mutate(thread)
                await conn.execute(
                    "UPDATE threads SET bumped_on = ?, document = ? WHERE id = ?",
                    (timestamp(thread.bumped_on), dump_document(thread), thread_id)
                )
                await conn.execute("COMMIT")
                return thread
            except Exception:
                if conn.in_transaction:
                    await conn.execute("ROLLBACK")
                raise

    @storage_errors
    async def delete_thread(self, thread_id: str) -> bool:
        deleted = await self.execute_query("DELETE FROM threads WHERE id = ?", (thread_id,))
        return deleted > 0
