"""Business rules for each clipm command.

These functions never print; they return what happened and let the CLI
decide how to show it.
"""

import logging
from dataclasses import dataclass

from clipm.clipboard import Clipboard
from clipm.config import PASSWORD_LABEL
from clipm.errors import EmptyClipboardError
from clipm.models import ClipEntry, ContentType
from clipm.storage import StorageManager

logger = logging.getLogger(__name__)


@dataclass
class StoreResult:
    skipped: bool
    entry_id: int | None = None
    byte_size: int = 0
    label: str | None = None


def _parse_type(content_type: str | ContentType | None) -> ContentType | None:
    if content_type is None or isinstance(content_type, ContentType):
        return content_type
    return ContentType.parse(content_type)


def store(
    storage: StorageManager,
    clipboard: Clipboard,
    label: str | None = None,
    content_type: str | ContentType = ContentType.TEXT,
) -> StoreResult:
    ctype = _parse_type(content_type)
    content = clipboard.read_text()
    if not content:
        raise EmptyClipboardError()

    # Passwords bypass duplicate suppression.
    if ctype != ContentType.PASSWORD and storage.is_duplicate(content):
        logger.info("Skipped store: content matches most recent entry")
        return StoreResult(skipped=True)

    if label is None and ctype == ContentType.PASSWORD:
        label = PASSWORD_LABEL

    entry = ClipEntry.capture(content, ctype, label)
    entry_id = storage.insert(entry)
    return StoreResult(skipped=False, entry_id=entry_id, byte_size=entry.byte_size, label=entry.label)


def get(storage: StorageManager, clipboard: Clipboard, entry_id: int | None = None) -> ClipEntry:
    entry = storage.get_by_id(entry_id) if entry_id is not None else storage.get_most_recent()
    clipboard.write_text(entry.content)
    return entry


def list_entries(
    storage: StorageManager,
    limit: int,
    offset: int = 0,
    label: str | None = None,
    days: int | None = None,
    content_type: str | ContentType | None = None,
) -> list[ClipEntry]:
    return storage.list(limit, offset, label=label, days=days, content_type=_parse_type(content_type))


def search(
    storage: StorageManager,
    query: str,
    limit: int,
    days: int | None = None,
    content_type: str | ContentType | None = None,
) -> list[ClipEntry]:
    return storage.search(query, limit, days=days, content_type=_parse_type(content_type))


def label(storage: StorageManager, entry_id: int, new_label: str | None) -> str | None:
    """Set or clear an entry's label; returns the label now in effect."""
    if new_label is not None and not new_label.strip():
        new_label = None
    storage.update_label(entry_id, new_label)
    return new_label


def delete(storage: StorageManager, entry_id: int) -> None:
    storage.delete(entry_id)


def clear(storage: StorageManager) -> int:
    return storage.clear()
