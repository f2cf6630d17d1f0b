import hmac
import uuid
from datetime import datetime, timezone
from typing import Optional
from exceptions import ValidationError


def now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp(moment: Optional[datetime] = None) -> float:
    return (moment or now()).timestamp()


def parse_datetime(value) -> datetime:
    """Accept a datetime or the ISO string stored in a document."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def new_id() -> str:
    return uuid.uuid4().hex


def passwords_match(supplied: str, stored: str) -> bool:
    """Exact, case-sensitive comparison of plaintext delete passwords."""
    return hmac.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))


def require_fields(*values) -> None:
    """Raise ValidationError when any required value is missing or empty."""
    if any(value is None or value == "" for value in values):
        raise ValidationError()
