"""Error types raised by clipm.

Every failure a command can surface derives from ClipmError, so the CLI only
has one thing to catch. Lower layers raise the specific kind and nothing in
between re-labels it.
"""


class ClipmError(Exception):
    """Base class for all clipm errors."""


class ClipboardAccessError(ClipmError):
    """The system clipboard could not be read or written."""

    def __init__(self, message: str):
        super().__init__(f"Clipboard error: {message}")


class EmptyClipboardError(ClipmError):
    def __init__(self, message: str = "Clipboard is empty"):
        super().__init__(message)


class DatabaseError(ClipmError):
    """Any fault in the underlying SQLite store (I/O, corruption, lock timeout)."""

    def __init__(self, message: str):
        super().__init__(f"Database error: {message}")


class NotFoundError(ClipmError):
    def __init__(self, message: str):
        super().__init__(f"Not found: {message}")


class InvalidInputError(ClipmError):
    def __init__(self, message: str):
        super().__init__(f"Invalid input: {message}")


class FilesystemError(ClipmError):
    """Filesystem access outside the database itself failed."""

    def __init__(self, message: str):
        super().__init__(f"I/O error: {message}")
