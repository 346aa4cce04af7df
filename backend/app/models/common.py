"""Common types and enums shared across all models."""

from datetime import datetime, timedelta, timezone
from enum import Enum


class Category(str, Enum):
    """Audience a document is analyzed for; selects prompt framing."""

    business = "business"
    citizen = "citizen"
    student = "student"


class RiskLevel(str, Enum):
    """Risk assessment returned by document analysis."""

    low = "low"
    medium = "medium"
    high = "high"


class DocumentStatus(str, Enum):
    """Processing lifecycle of an uploaded document."""

    uploaded = "uploaded"
    processing = "processing"
    completed = "completed"


class MessageRole(str, Enum):
    """Author of a chat message."""

    user = "user"
    assistant = "assistant"


class Theme(str, Enum):
    """UI color theme."""

    light = "light"
    dark = "dark"


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (matches what SQLite hands back)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def next_timestamp(previous: datetime | None, now: datetime | None = None) -> datetime:
    """Return a timestamp strictly after ``previous``.

    Falls back to ``previous`` + 1µs when the clock has not advanced (or went
    backwards), so per-session message order is total.
    """
    if now is None:
        now = utcnow()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now
