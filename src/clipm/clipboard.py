"""System clipboard access through the macOS general pasteboard."""

import logging
from typing import Protocol

from clipm.errors import ClipboardAccessError

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    def read_text(self) -> str: ...

    def write_text(self, text: str) -> None: ...


def load_appkit():
    try:
        import AppKit
    except ImportError as exc:
        raise ClipboardAccessError("AppKit is unavailable; clipboard access requires macOS with PyObjC") from exc
    return AppKit


class PasteboardClipboard:
    """Plain-text reads and writes on NSPasteboard.generalPasteboard()."""

    def __init__(self, appkit=None):
        self._appkit = appkit
        self._pasteboard = None

    def _board(self):
        if self._appkit is None:
            self._appkit = load_appkit()
        if self._pasteboard is None:
            self._pasteboard = self._appkit.NSPasteboard.generalPasteboard()
        return self._pasteboard

    def read_text(self) -> str:
        """Return the pasteboard's string contents, or "" when it holds no text."""
        pasteboard = self._board()
        try:
            text = pasteboard.stringForType_(self._appkit.NSPasteboardTypeString)
        except Exception as exc:
            raise ClipboardAccessError(str(exc)) from exc
        return str(text) if text is not None else ""

    def write_text(self, text: str) -> None:
        pasteboard = self._board()
        try:
            pasteboard.clearContents()
            ok = pasteboard.setString_forType_(text, self._appkit.NSPasteboardTypeString)
        except Exception as exc:
            raise ClipboardAccessError(str(exc)) from exc
        if not ok:
            raise ClipboardAccessError("pasteboard rejected the text")
        logger.debug("Wrote %d characters to the pasteboard", len(text))
