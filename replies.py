import logging
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict
from config import REDACTED_TEXT, ACK_SUCCESS, ACK_REPORTED
from exceptions import NotFoundError, AuthorizationError
from utils import now, new_id, parse_datetime, passwords_match, require_fields


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Reply:
    reply_id: str
    text: str
    delete_password: str
    created_on: datetime = field(default_factory=now)
    reported: bool = False
    deleted: bool = False

    def redact(self) -> None:
        self.text = REDACTED_TEXT
        self.deleted = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.reply_id,
            "text": self.text,
            "created_on": self.created_on,
            "delete_password": self.delete_password,
            "reported": self.reported,
            "deleted": self.deleted,
        }

    def public_dict(self) -> Dict[str, Any]:
        """Read-facing view: no delete_password, no reported flag."""
        return {
            "_id": self.reply_id,
            "text": self.text,
            "created_on": self.created_on,
        }

    @classmethod
    def from_dict(cls, doc: Dict[str, Any]) -> "Reply":
        return cls(
            reply_id=doc["_id"],
            text=doc["text"],
            delete_password=doc["delete_password"],
            created_on=parse_datetime(doc["created_on"]),
            reported=doc.get("reported", False),
            deleted=doc.get("deleted", False),
        )


class ReplyManager:
    """Reply operations. Replies only exist inside their parent thread document."""

    def __init__(self, db) -> None:
        self.db = db

    async def create_reply(self, thread_id: str, text: str, delete_password: str):
        """Append a reply and bump the thread; returns the full, unredacted thread."""
        require_fields(thread_id, text, delete_password)

        def append(thread) -> None:
            reply = Reply(new_id(), text, delete_password)
            thread.replies.append(reply)
            thread.bumped_on = reply.created_on

        thread = await self.db.update_thread(thread_id, append)
        if thread is None:
            raise NotFoundError("Thread not found")
        logger.info("Reply %s added to thread %s", thread.replies[-1].reply_id, thread_id)
        return thread

    async def get_thread(self, thread_id: str) -> Dict[str, Any]:
        """Public view of a thread with every reply, untruncated."""
        require_fields(thread_id)
        thread = await self.db.get_thread(thread_id)
        if thread is None:
            raise NotFoundError("Thread not found")
        return thread.public_dict()

    async def delete_reply(self, thread_id: str, reply_id: str, delete_password: str) -> str:
        """Replace the reply's text with the redaction marker; the reply keeps its place."""
        require_fields(thread_id, reply_id, delete_password)

        def redact(thread) -> None:
            reply = self._find_reply(thread, reply_id)
            if not passwords_match(delete_password, reply.delete_password):
                logger.warning("Incorrect password for reply %s in thread %s", reply_id, thread_id)
                raise AuthorizationError()
            reply.redact()

        if await self.db.update_thread(thread_id, redact) is None:
            raise NotFoundError("Thread not found")
        logger.info("Reply %s in thread %s deleted", reply_id, thread_id)
        return ACK_SUCCESS

    async def report_reply(self, thread_id: str, reply_id: str) -> str:
        require_fields(thread_id, reply_id)

        def flag(thread) -> None:
            reply = self._find_reply(thread, reply_id)
            # redaction is terminal
            if not reply.deleted:
                reply.reported = True

        if await self.db.update_thread(thread_id, flag) is None:
            raise NotFoundError("Thread not found")
        logger.info("Reply %s in thread %s reported", reply_id, thread_id)
        return ACK_REPORTED

    @staticmethod
    def _find_reply(thread, reply_id: str) -> Reply:
        reply = thread.get_reply(reply_id)
        if reply is None:
            raise NotFoundError("Reply not found")
        return reply
