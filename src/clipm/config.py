import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "clipm"

DATA_DIR = Path(os.environ.get("CLIPM_DATA_DIR", user_data_dir(APP_NAME, appauthor=False)))
DB_NAME = "history.db"
DB_PATH = DATA_DIR / DB_NAME
LOG_PATH = DATA_DIR / "clipm.log"

PREVIEW_LENGTH = 60  # characters shown in the list/search table
PASSWORD_MASK = "********"
PASSWORD_LABEL = "password"  # assigned to password entries stored without a label


def _parse_busy_timeout() -> float:
    raw = os.environ.get("CLIPM_BUSY_TIMEOUT")
    if raw is None:
        return 5.0
    try:
        value = float(raw)
    except ValueError:
        return 5.0
    return value if value >= 0 else 5.0


def _parse_list_limit() -> int:
    raw = os.environ.get("CLIPM_LIST_LIMIT")
    if raw is None:
        return 20
    try:
        value = int(raw)
    except ValueError:
        return 20
    return max(1, min(500, value))


BUSY_TIMEOUT = _parse_busy_timeout()  # seconds to wait on a locked database
DEFAULT_LIMIT = _parse_list_limit()
