import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from config import RECENT_THREADS_LIMIT, RECENT_REPLIES_LIMIT, ACK_SUCCESS, ACK_REPORTED
from exceptions import NotFoundError, AuthorizationError
from replies import Reply
from utils import now, new_id, parse_datetime, passwords_match, require_fields


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Thread:
    thread_id: str
    board: str
    text: str
    delete_password: str
    created_on: datetime = field(default_factory=now)
    bumped_on: Optional[datetime] = None
    reported: bool = False
    replies: List[Reply] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.bumped_on is None:
            self.bumped_on = self.created_on

    def get_reply(self, reply_id: str) -> Optional[Reply]:
        for reply in self.replies:
            if reply.reply_id == reply_id:
                return reply
        return None

    def recent_replies(self, limit: int = RECENT_REPLIES_LIMIT) -> List[Reply]:
        """Newest replies first; among equal timestamps the later-appended one wins."""
        ordered = sorted(reversed(self.replies), key=lambda r: r.created_on, reverse=True)
        return ordered[:limit]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.thread_id,
            "board": self.board,
            "text": self.text,
            "created_on": self.created_on,
            "bumped_on": self.bumped_on,
            "delete_password": self.delete_password,
            "reported": self.reported,
            "replies": [reply.to_dict() for reply in self.replies],
        }

    def public_dict(self, replies: Optional[List[Reply]] = None) -> Dict[str, Any]:
        """Read-facing view without delete_password or reported, on the thread and its replies."""
        if replies is None:
            replies = self.replies
        return {
            "_id": self.thread_id,
            "board": self.board,
            "text": self.text,
            "created_on": self.created_on,
            "bumped_on": self.bumped_on,
            "replies": [reply.public_dict() for reply in replies],
        }

    @classmethod
    def from_dict(cls, doc: Dict[str, Any]) -> "Thread":
        return cls(
            thread_id=doc["_id"],
            board=doc["board"],
            text=doc["text"],
            delete_password=doc["delete_password"],
            created_on=parse_datetime(doc["created_on"]),
            bumped_on=parse_datetime(doc["bumped_on"]),
            reported=doc.get("reported", False),
            replies=[Reply.from_dict(reply) for reply in doc.get("replies", [])],
        )


class ThreadManager:
    def __init__(self, db) -> None:
        self.db = db

    async def new_thread(self, board: str, text: str, delete_password: str) -> Thread:
        """Create a thread with no replies.

        The returned thread still carries delete_password so the creator
        gets their own password echoed back.
        """
        require_fields(board, text, delete_password)
        thread = Thread(new_id(), board, text, delete_password)
        await self.db.insert_thread(thread)
        logger.info("Thread %s created on board %s", thread.thread_id, board)
        return thread

    async def list_recent(self, board: str) -> List[Dict[str, Any]]:
        """Most recently bumped threads of a board, each with its newest replies only."""
        threads = await self.db.get_threads_by_board(board, RECENT_THREADS_LIMIT)
        return [thread.public_dict(thread.recent_replies()) for thread in threads]

    async def delete_thread(self, thread_id: str, delete_password: str) -> str:
        """Remove a thread and all of its replies.

        Passwords are stored and compared in plaintext, so this is only as
        strong as the shared secret the poster chose.
        """
        require_fields(thread_id, delete_password)
        thread = await self.db.get_thread(thread_id)
        if thread is None:
            raise NotFoundError("Thread not found")
        if not passwords_match(delete_password, thread.delete_password):
            logger.warning("Incorrect password for thread %s", thread_id)
            raise AuthorizationError()

        if not await self.db.delete_thread(thread_id):
            raise NotFoundError("Thread not found")
        logger.info("Thread %s deleted", thread_id)
        return ACK_SUCCESS

    async def report_thread(self, thread_id: str) -> str:
        require_fields(thread_id)

        def flag(thread: Thread) -> None:
            thread.reported = True

        if await self.db.update_thread(thread_id, flag) is None:
            raise NotFoundError("Thread not found")
        logger.info("Thread %s reported", thread_id)
        return ACK_REPORTED
