from datetime import datetime

from clipm.config import DATA_DIR
from clipm.errors import FilesystemError


def truncate_text(text: str, max_len: int) -> str:
    single_line = text.replace("\n", " ")
    if len(single_line) <= max_len:
        return single_line
    return single_line[: max_len - 1] + "…"


def format_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def format_timestamp(dt: datetime) -> str:
    """Local wall-clock time to the minute."""
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


def ensure_dirs() -> None:
    try:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"cannot create data directory {DATA_DIR}: {exc}") from exc
