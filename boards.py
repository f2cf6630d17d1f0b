from typing import Any, Dict, List
from database import DatabaseManager
from replies import ReplyManager
from threads import ThreadManager, Thread


class BoardService:
    """Entry point for every board operation; one call per request."""

    def __init__(self, database: DatabaseManager) -> None:
        self.thread_manager = ThreadManager(database)
        self.reply_manager = ReplyManager(database)

    # Thread operations
    async def create_thread(self, board: str, text: str, delete_password: str) -> Thread:
        return await self.thread_manager.new_thread(board, text, delete_password)

    async def list_threads(self, board: str) -> List[Dict[str, Any]]:
        return await self.thread_manager.list_recent(board)

    async def delete_thread(self, thread_id: str, delete_password: str) -> str:
        return await self.thread_manager.delete_thread(thread_id, delete_password)

    async def report_thread(self, thread_id: str) -> str:
        return await self.thread_manager.report_thread(thread_id)

    # Reply operations
    async def create_reply(self, thread_id: str, text: str, delete_password: str) -> Thread:
        return await self.reply_manager.create_reply(thread_id, text, delete_password)

    async def get_thread(self, thread_id: str) -> Dict[str, Any]:
        return await self.reply_manager.get_thread(thread_id)

    async def delete_reply(self, thread_id: str, reply_id: str, delete_password: str) -> str:
        return await self.reply_manager.delete_reply(thread_id, reply_id, delete_password)

    async def report_reply(self, thread_id: str, reply_id: str) -> str:
        return await self.reply_manager.report_reply(thread_id, reply_id)
