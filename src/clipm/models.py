import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from clipm.errors import InvalidInputError


class ContentType(str, Enum):
    TEXT = "text"
    PASSWORD = "password"

    @classmethod
    def parse(cls, value: str) -> "ContentType":
        for member in cls:
            if member.value == value:
                return member
        choices = ", ".join(m.value for m in cls)
        raise InvalidInputError(f"unknown content type '{value}' (expected one of: {choices})")

    def __str__(self) -> str:
        return self.value


def to_timestamp(dt: datetime) -> str:
    """Storage form of a capture time: UTC, fixed microsecond precision.

    A fixed width keeps lexicographic order equal to chronological order,
    which the ``days`` filter relies on.
    """
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")


# Other writers may store nanoseconds or a "Z" suffix; datetime keeps microseconds.
_EXTRA_DIGITS = re.compile(r"(\.\d{6})\d+")


def from_timestamp(text: str) -> datetime:
    text = _EXTRA_DIGITS.sub(r"\1", text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass
class ClipEntry:
    id: int | None
    content: str
    content_type: ContentType
    byte_size: int
    created_at: datetime
    label: str | None = None

    @classmethod
    def capture(
        cls,
        content: str,
        content_type: ContentType = ContentType.TEXT,
        label: str | None = None,
    ) -> "ClipEntry":
        if not content:
            raise InvalidInputError("entry content must not be empty")
        return cls(
            id=None,
            content=content,
            content_type=content_type,
            byte_size=len(content.encode("utf-8")),
            created_at=datetime.now(timezone.utc),
            label=label,
        )

    @property
    def is_password(self) -> bool:
        return self.content_type == ContentType.PASSWORD
