from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from clipm.config import BUSY_TIMEOUT, DB_PATH
from clipm.errors import DatabaseError, InvalidInputError, NotFoundError
from clipm.models import ClipEntry, ContentType, from_timestamp, to_timestamp
from clipm.query import EntryFilter, Predicate, check_paging, fts_match_query, where_clause

logger = logging.getLogger(__name__)

COLUMNS = "c.id, c.content, c.content_type, c.byte_size, c.created_at, c.label"

# Index rows are always derived from the clips table; password content is never indexed.
INDEX_FROM_CLIPS = """
INSERT INTO clips_fts(rowid, content, label)
SELECT id, CASE WHEN content_type = 'password' THEN '' ELSE content END, label
FROM clips
"""

# Earlier releases kept the index in sync with triggers on an external-content
# table; these statements replace both with a self-contained index.
REBUILD_INDEX = (
    "DROP TRIGGER IF EXISTS clips_ai",
    "DROP TRIGGER IF EXISTS clips_ad",
    "DROP TRIGGER IF EXISTS clips_au",
    "DROP TABLE IF EXISTS clips_fts",
    "CREATE VIRTUAL TABLE clips_fts USING fts5(content, label)",
    INDEX_FROM_CLIPS,
)

MIGRATIONS: list[tuple[int, tuple[str, ...]]] = [
    (
        1,
        (
            """CREATE TABLE IF NOT EXISTS clips (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                content      TEXT NOT NULL CHECK(length(content) > 0),
                content_type TEXT NOT NULL DEFAULT 'text' CHECK(content_type IN ('text', 'password')),
                byte_size    INTEGER NOT NULL,
                created_at   TEXT NOT NULL,
                label        TEXT
            )""",
            "CREATE INDEX IF NOT EXISTS idx_clips_label ON clips(label)",
            "CREATE VIRTUAL TABLE IF NOT EXISTS clips_fts USING fts5(content, label)",
        ),
    ),
    (
        2,
        ("CREATE INDEX IF NOT EXISTS idx_clips_content_type ON clips(content_type)", *REBUILD_INDEX),
    ),
    # Trigger-based releases also stamped their files as version 2, so the
    # rebuild runs again for them.
    (3, REBUILD_INDEX),
]

SCHEMA_VERSION = MIGRATIONS[-1][0]


class StorageManager:
    def __init__(self, db_path: str | Path | None = None):
        self._db_path = str(db_path) if db_path else str(DB_PATH)
        try:
            self._conn = sqlite3.connect(self._db_path, timeout=BUSY_TIMEOUT, isolation_level=None)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA synchronous=NORMAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
        except sqlite3.Error as exc:
            raise DatabaseError(f"cannot open {self._db_path}: {exc}") from exc
        self.migrate()

    @contextmanager
    def _guard(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block inside BEGIN IMMEDIATE ... COMMIT, rolling back on any error."""
        with self._guard() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise

    def schema_version(self) -> int:
        with self._guard() as conn:
            return conn.execute("PRAGMA user_version").fetchone()[0]

    def migrate(self) -> None:
        """Apply every migration above the stored schema version, in order."""
        current = self.schema_version()
        for version, statements in MIGRATIONS:
            if version <= current:
                continue
            with self._transaction() as conn:
                for statement in statements:
                    conn.execute(statement)
                conn.execute(f"PRAGMA user_version = {int(version)}")
            logger.debug("Applied schema migration %d to %s", version, self._db_path)

    @staticmethod
    def _reindex(conn: sqlite3.Connection, entry_id: int) -> None:
        conn.execute("DELETE FROM clips_fts WHERE rowid = ?", (entry_id,))
        conn.execute(INDEX_FROM_CLIPS + " WHERE id = ?", (entry_id,))

    def insert(self, entry: ClipEntry) -> int:
        if not entry.content:
            raise InvalidInputError("entry content must not be empty")
        with self._transaction() as conn:
            cursor = conn.execute(
                """INSERT INTO clips (content, content_type, byte_size, created_at, label)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    entry.content,
                    entry.content_type.value,
                    entry.byte_size,
                    to_timestamp(entry.created_at),
                    entry.label,
                ),
            )
            entry_id = cursor.lastrowid
            self._reindex(conn, entry_id)
        logger.info("Stored entry #%d (%s, %d bytes)", entry_id, entry.content_type.value, entry.byte_size)
        return entry_id

    def get_by_id(self, entry_id: int) -> ClipEntry:
        with self._guard() as conn:
            row = conn.execute(f"SELECT {COLUMNS} FROM clips c WHERE c.id = ?", (entry_id,)).fetchone()
        if row is None:
            raise NotFoundError(f"no entry with id {entry_id}")
        return self._row_to_entry(row)

    def get_most_recent(self) -> ClipEntry:
        with self._guard() as conn:
            row = conn.execute(f"SELECT {COLUMNS} FROM clips c ORDER BY c.id DESC LIMIT 1").fetchone()
        if row is None:
            raise NotFoundError("no entries in history")
        return self._row_to_entry(row)

    def is_duplicate(self, content: str) -> bool:
        with self._guard() as conn:
            row = conn.execute(
                "SELECT 1 FROM clips WHERE id = (SELECT MAX(id) FROM clips) AND content = ?",
                (content,),
            ).fetchone()
        return row is not None

    def update_label(self, entry_id: int, label: str | None) -> None:
        with self._transaction() as conn:
            cursor = conn.execute("UPDATE clips SET label = ? WHERE id = ?", (label, entry_id))
            if cursor.rowcount == 0:
                raise NotFoundError(f"no entry with id {entry_id}")
            self._reindex(conn, entry_id)

    def delete(self, entry_id: int) -> None:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM clips WHERE id = ?", (entry_id,))
            if cursor.rowcount == 0:
                raise NotFoundError(f"no entry with id {entry_id}")
            conn.execute("DELETE FROM clips_fts WHERE rowid = ?", (entry_id,))
        logger.info("Deleted entry #%d", entry_id)

    def clear(self) -> int:
        with self._transaction() as conn:
            count = conn.execute("SELECT COUNT(*) FROM clips").fetchone()[0]
            conn.execute("DELETE FROM clips")
            conn.execute("DELETE FROM clips_fts")
        logger.info("Cleared %d entries", count)
        return count

    def count(self) -> int:
        with self._guard() as conn:
            row = conn.execute("SELECT COUNT(*) AS cnt FROM clips").fetchone()
        return row["cnt"]

    def list(
        self,
        limit: int,
        offset: int = 0,
        label: str | None = None,
        days: int | None = None,
        content_type: ContentType | None = None,
    ) -> list[ClipEntry]:
        check_paging(limit, offset)
        flt = EntryFilter(label=label, days=days, content_type=content_type)
        where, params = where_clause(flt.predicates("c"))
        sql = f"SELECT {COLUMNS} FROM clips c{where} ORDER BY c.id DESC LIMIT ? OFFSET ?"
        with self._guard() as conn:
            rows = conn.execute(sql, (*params, limit, offset)).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def search(
        self,
        query: str,
        limit: int,
        days: int | None = None,
        content_type: ContentType | None = None,
    ) -> list[ClipEntry]:
        if not query.strip():
            raise InvalidInputError("empty search query")
        check_paging(limit)
        flt = EntryFilter(days=days, content_type=content_type)
        predicates = [Predicate("clips_fts MATCH ?", (fts_match_query(query),))]
        predicates.extend(flt.predicates("c"))
        where, params = where_clause(predicates)
        sql = (
            f"SELECT {COLUMNS} FROM clips_fts JOIN clips c ON c.id = clips_fts.rowid{where}"
            " ORDER BY bm25(clips_fts), c.id DESC LIMIT ?"
        )
        with self._guard() as conn:
            rows = conn.execute(sql, (*params, limit)).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> ClipEntry:
        # A tag or timestamp we cannot read back means the file is corrupt.
        try:
            content_type = ContentType.parse(row["content_type"])
        except InvalidInputError as exc:
            raise DatabaseError(f"entry #{row['id']} has unrecognized content type {row['content_type']!r}") from exc
        try:
            created_at = from_timestamp(row["created_at"])
        except (TypeError, ValueError) as exc:
            raise DatabaseError(f"entry #{row['id']} has malformed timestamp {row['created_at']!r}") from exc
        return ClipEntry(
            id=row["id"],
            content=row["content"],
            content_type=content_type,
            byte_size=row["byte_size"],
            created_at=created_at,
            label=row["label"],
        )
