from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List


# Request bodies. Fields are optional here so that missing values reach the
# board service and come back as a ValidationError rather than a 422.

class ThreadCreate(BaseModel):
    text: Optional[str] = None
    delete_password: Optional[str] = None

class ThreadDelete(BaseModel):
    thread_id: Optional[str] = None
    delete_password: Optional[str] = None

class ThreadReport(BaseModel):
    thread_id: Optional[str] = None

class ReplyCreate(BaseModel):
    thread_id: Optional[str] = None
    text: Optional[str] = None
    delete_password: Optional[str] = None

class ReplyDelete(BaseModel):
    thread_id: Optional[str] = None
    reply_id: Optional[str] = None
    delete_password: Optional[str] = None

class ReplyReport(BaseModel):
    thread_id: Optional[str] = None
    reply_id: Optional[str] = None


# Responses

class PublicReplyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    text: str
    created_on: datetime

class ReplyResponse(PublicReplyResponse):
    delete_password: str
    reported: bool

class PublicThreadResponse(BaseModel):
    """Thread as shown on the board and thread pages."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    board: str
    text: str
    created_on: datetime
    bumped_on: datetime
    replies: List[PublicReplyResponse]

class ThreadResponse(PublicThreadResponse):
    """Thread as returned to whoever just created it or replied to it."""
    delete_password: str
    reported: bool
    replies: List[ReplyResponse]

class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
