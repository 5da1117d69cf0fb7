from unittest.mock import MagicMock, patch

import pytest

from clipm.clipboard import PasteboardClipboard, load_appkit
from clipm.errors import ClipboardAccessError


@pytest.fixture
def appkit():
    mock_appkit = MagicMock()
    mock_appkit.NSPasteboardTypeString = "public.utf8-plain-text"
    return mock_appkit


@pytest.fixture
def pasteboard(appkit):
    return appkit.NSPasteboard.generalPasteboard.return_value


class TestReadText:
    def test_reads_string(self, appkit, pasteboard):
        pasteboard.stringForType_.return_value = "hello world"
        assert PasteboardClipboard(appkit).read_text() == "hello world"
        pasteboard.stringForType_.assert_called_once_with("public.utf8-plain-text")

    def test_no_text_returns_empty(self, appkit, pasteboard):
        pasteboard.stringForType_.return_value = None
        assert PasteboardClipboard(appkit).read_text() == ""

    def test_failure_wrapped(self, appkit, pasteboard):
        pasteboard.stringForType_.side_effect = RuntimeError("pasteboard gone")
        with pytest.raises(ClipboardAccessError, match="pasteboard gone"):
            PasteboardClipboard(appkit).read_text()

    def test_pasteboard_fetched_once(self, appkit, pasteboard):
        pasteboard.stringForType_.return_value = "x"
        clipboard = PasteboardClipboard(appkit)
        clipboard.read_text()
        clipboard.read_text()
        appkit.NSPasteboard.generalPasteboard.assert_called_once()


class TestWriteText:
    def test_writes_string(self, appkit, pasteboard):
        pasteboard.setString_forType_.return_value = True
        PasteboardClipboard(appkit).write_text("copied")
        pasteboard.clearContents.assert_called_once()
        pasteboard.setString_forType_.assert_called_once_with("copied", "public.utf8-plain-text")

    def test_rejected_write(self, appkit, pasteboard):
        pasteboard.setString_forType_.return_value = False
        with pytest.raises(ClipboardAccessError):
            PasteboardClipboard(appkit).write_text("copied")

    def test_failure_wrapped(self, appkit, pasteboard):
        pasteboard.clearContents.side_effect = RuntimeError("boom")
        with pytest.raises(ClipboardAccessError):
            PasteboardClipboard(appkit).write_text("copied")


class TestLoadAppKit:
    def test_missing_appkit(self):
        with patch.dict("sys.modules", {"AppKit": None}):
            with pytest.raises(ClipboardAccessError):
                load_appkit()

    def test_lazy_until_used(self):
        with patch("clipm.clipboard.load_appkit") as mock_load:
            clipboard = PasteboardClipboard()
            mock_load.assert_not_called()
            mock_load.return_value.NSPasteboard.generalPasteboard.return_value.stringForType_.return_value = "hi"
            assert clipboard.read_text() == "hi"
            mock_load.assert_called_once()
