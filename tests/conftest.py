from datetime import datetime, timezone

import pytest

from clipm.models import ClipEntry, ContentType
from clipm.storage import StorageManager


@pytest.fixture
def storage():
    mgr = StorageManager(db_path=":memory:")
    yield mgr
    mgr.close()


@pytest.fixture
def make_entry():
    """Factory fixture to create ClipEntry instances for testing."""

    def _make_entry(
        text: str = "hello world",
        content_type: ContentType = ContentType.TEXT,
        label: str | None = None,
        created_at: datetime | None = None,
    ) -> ClipEntry:
        return ClipEntry(
            id=None,
            content=text,
            content_type=content_type,
            byte_size=len(text.encode("utf-8")),
            created_at=created_at or datetime.now(timezone.utc),
            label=label,
        )

    return _make_entry


class FakeClipboard:
    def __init__(self, text: str = ""):
        self.text = text
        self.writes: list[str] = []

    def read_text(self) -> str:
        return self.text

    def write_text(self, text: str) -> None:
        self.text = text
        self.writes.append(text)


@pytest.fixture
def fake_clipboard():
    return FakeClipboard()
