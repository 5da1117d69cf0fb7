from rich.table import Table
from rich.text import Text

from clipm.config import PASSWORD_MASK, PREVIEW_LENGTH
from clipm.models import ClipEntry
from clipm.utils import format_size, format_timestamp, truncate_text


def preview(entry: ClipEntry) -> str:
    if entry.is_password:
        return PASSWORD_MASK
    return truncate_text(entry.content, PREVIEW_LENGTH)


def entry_row(entry: ClipEntry) -> tuple[str, str, str, str, str]:
    return (
        str(entry.id),
        preview(entry),
        entry.label or "",
        format_size(entry.byte_size),
        format_timestamp(entry.created_at),
    )


def render_entries(entries: list[ClipEntry]) -> Table:
    table = Table(show_lines=False, highlight=False)
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Preview", overflow="fold")
    table.add_column("Label", style="magenta")
    table.add_column("Size", justify="right")
    table.add_column("Created", no_wrap=True)
    for entry in entries:
        # Text() keeps clipboard content from being read as rich markup.
        table.add_row(*(Text(cell) for cell in entry_row(entry)))
    return table
