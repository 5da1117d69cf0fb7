"""Conjunctive filter building for clip queries.

SQL text here only ever comes from this module; user-supplied values travel
as bound parameters.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from clipm.errors import InvalidInputError
from clipm.models import ContentType, to_timestamp


@dataclass(frozen=True)
class Predicate:
    sql: str
    params: tuple = ()


@dataclass
class EntryFilter:
    """Optional filters over the clips table, combined with AND."""

    label: str | None = None
    days: int | None = None
    content_type: ContentType | None = None
    now: datetime | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.days is not None and self.days < 0:
            raise InvalidInputError("days must not be negative")

    def cutoff(self) -> str | None:
        if self.days is None:
            return None
        now = self.now or datetime.now(timezone.utc)
        return to_timestamp(now - timedelta(days=self.days))

    def predicates(self, alias: str = "c") -> list[Predicate]:
        preds: list[Predicate] = []
        if self.label is not None:
            preds.append(Predicate(f"{alias}.label = ?", (self.label,)))
        cutoff = self.cutoff()
        if cutoff is not None:
            preds.append(Predicate(f"{alias}.created_at >= ?", (cutoff,)))
        if self.content_type is not None:
            preds.append(Predicate(f"{alias}.content_type = ?", (self.content_type.value,)))
        return preds


def where_clause(predicates: list[Predicate]) -> tuple[str, list]:
    if not predicates:
        return "", []
    sql = " WHERE " + " AND ".join(p.sql for p in predicates)
    params: list = []
    for p in predicates:
        params.extend(p.params)
    return sql, params


def fts_match_query(query: str) -> str:
    """Turn free text into an FTS5 MATCH expression of quoted tokens.

    Each whitespace-separated token becomes a string literal, so operators
    (AND, OR, NOT, NEAR), column filters, ``*`` and parentheses are matched
    literally. Tokens are implicitly ANDed.
    """
    tokens = query.split()
    if not tokens:
        raise InvalidInputError("empty search query")
    return " ".join('"' + token.replace('"', '""') + '"' for token in tokens)


def check_paging(limit: int, offset: int = 0) -> None:
    if limit < 0:
        raise InvalidInputError("limit must not be negative")
    if offset < 0:
        raise InvalidInputError("offset must not be negative")
