from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError
from typing import List, Optional, Type
from boards import BoardService
from exceptions import ValidationError
from models import (ThreadCreate, ThreadDelete, ThreadReport, ReplyCreate, ReplyDelete, ReplyReport,
                    ThreadResponse, PublicThreadResponse)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def parse_body(model: Type[BaseModel]):
    """Dependency reading ``model`` from either a JSON or an HTML form body"""
    async def dependency(request: Request) -> BaseModel:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            data = dict(await request.form())
        else:
            try:
                data = await request.json()
            except ValueError:
                raise ValidationError("Invalid request body")
        if not isinstance(data, dict):
            raise ValidationError("Invalid request body")

        try:
            return model.model_validate(data)
        except ModelValidationError:
            raise ValidationError("Invalid request body")
    return dependency


# =============================================================================
# THREAD ENDPOINTS
# =============================================================================

def create_threads_router(service: BoardService) -> APIRouter:
    router = APIRouter(prefix="/api/threads", tags=["threads"])

    @router.post("/{board}", response_model=ThreadResponse)
    async def create_thread(board: str, thread_data: ThreadCreate = Depends(parse_body(ThreadCreate))):
        """Start a thread; the response echoes the delete password back"""
        thread = await service.create_thread(board, thread_data.text, thread_data.delete_password)
        return thread.to_dict()

    @router.get("/{board}", response_model=List[PublicThreadResponse])
    async def list_threads(board: str):
        """10 most recently bumped threads, 3 newest replies each"""
        return await service.list_threads(board)

    @router.delete("/{board}", response_class=PlainTextResponse)
    async def delete_thread(board: str, thread_data: ThreadDelete = Depends(parse_body(ThreadDelete))):
        return await service.delete_thread(thread_data.thread_id, thread_data.delete_password)

    @router.put("/{board}", response_class=PlainTextResponse)
    async def report_thread(board: str, thread_data: ThreadReport = Depends(parse_body(ThreadReport))):
        return await service.report_thread(thread_data.thread_id)

    return router

# =============================================================================
# REPLY ENDPOINTS
# =============================================================================

def create_replies_router(service: BoardService) -> APIRouter:
    # Replies are addressed by thread id; {board} only mirrors the thread routes.
    router = APIRouter(prefix="/api/replies", tags=["replies"])

    @router.post("/{board}", response_model=ThreadResponse)
    async def create_reply(board: str, reply_data: ReplyCreate = Depends(parse_body(ReplyCreate))):
        """Reply to a thread and bump it; returns the whole updated thread"""
        thread = await service.create_reply(reply_data.thread_id, reply_data.text, reply_data.delete_password)
        return thread.to_dict()

    @router.get("/{board}", response_model=PublicThreadResponse)
    async def get_thread(board: str, thread_id: Optional[str] = None):
        """A thread with all of its replies"""
        return await service.get_thread(thread_id)

    @router.delete("/{board}", response_class=PlainTextResponse)
    async def delete_reply(board: str, reply_data: ReplyDelete = Depends(parse_body(ReplyDelete))):
        return await service.delete_reply(reply_data.thread_id, reply_data.reply_id, reply_data.delete_password)

    @router.put("/{board}", response_class=PlainTextResponse)
    async def report_reply(board: str, reply_data: ReplyReport = Depends(parse_body(ReplyReport))):
        return await service.report_reply(reply_data.thread_id, reply_data.reply_id)

    return router
