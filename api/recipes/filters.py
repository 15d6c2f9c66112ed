"""
Search filters.

Raw query strings are parsed into `SearchCriteria`, which becomes a list of
`Predicate` objects holding only the constraints that were actually supplied.
`predicates_to_sql` turns that list into an asyncpg WHERE fragment.

Parsing never raises: a malformed filter value simply drops that constraint.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from .records import INT4_MAX, INT4_MIN

logger = logging.getLogger(__name__)

# Columns a predicate may reference, mapped to their SQL spelling.
FILTER_COLUMNS = {
    "cuisine": "cuisine",
    "title": "title",
    "rating": "rating",
    "total_time": "total_time",
}

OPERATORS = {"eq", "contains_ci", "ge", "le"}


def _parse_float(raw: str) -> float | None:
    try:
        value = float(raw.strip())
    except ValueError:
        logger.debug("filter_parse_failed kind=float value=%r", raw)
        return None
    if not math.isfinite(value):
        return None
    return value


def _parse_int(raw: str) -> int | None:
    try:
        value = int(raw.strip())
    except ValueError:
        logger.debug("filter_parse_failed kind=int value=%r", raw)
        return None
    if not INT4_MIN <= value <= INT4_MAX:
        logger.debug("filter_out_of_range kind=int value=%r", raw)
        return None
    return value


def parse_rating(raw: str | None) -> tuple[float | None, float | None]:
    """
    Returns (min_rating, max_rating) for ">=v", "<=v" or "=v".
    """
    raw = (raw or "").strip()
    if not raw:
        return None, None

    if raw.startswith(">="):
        return _parse_float(raw[2:]), None
    if raw.startswith("<="):
        return None, _parse_float(raw[2:])
    if raw.startswith("="):
        value = _parse_float(raw[1:])
        return value, value

    logger.debug("filter_ignored field=rating value=%r", raw)
    return None, None


def parse_total_time(raw: str | None) -> tuple[int | None, int | None]:
    """
    Returns (min_total_time, max_total_time) for "<=v" or "=v".
    """
    raw = (raw or "").strip()
    if not raw:
        return None, None

    if raw.startswith("<="):
        return None, _parse_int(raw[2:])
    if raw.startswith("="):
        value = _parse_int(raw[1:])
        return value, value

    logger.debug("filter_ignored field=total_time value=%r", raw)
    return None, None


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    # Postgres text cannot hold NUL.
    if "\x00" in value:
        logger.debug("filter_ignored reason=nul_byte")
        return None
    return value


@dataclass(frozen=True)
class SearchCriteria:
    cuisine: str | None = None
    title: str | None = None
    min_rating: float | None = None
    max_rating: float | None = None
    min_total_time: int | None = None
    max_total_time: int | None = None

    @classmethod
    def from_query(
        cls,
        *,
        cuisine: str | None = None,
        title: str | None = None,
        rating: str | None = None,
        total_time: str | None = None,
    ) -> SearchCriteria:
        min_rating, max_rating = parse_rating(rating)
        min_total_time, max_total_time = parse_total_time(total_time)
        return cls(
            cuisine=_blank_to_none(cuisine),
            title=_blank_to_none(title),
            min_rating=min_rating,
            max_rating=max_rating,
            min_total_time=min_total_time,
            max_total_time=max_total_time,
        )


@dataclass(frozen=True)
class Predicate:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.field not in FILTER_COLUMNS:
            raise ValueError(f"Unknown filter field '{self.field}'.")
        if self.op not in OPERATORS:
            raise ValueError(f"Unknown filter operator '{self.op}'.")


def build_predicates(criteria: SearchCriteria) -> list[Predicate]:
    predicates: list[Predicate] = []
    if criteria.cuisine is not None:
        predicates.append(Predicate("cuisine", "eq", criteria.cuisine))
    if criteria.title is not None:
        predicates.append(Predicate("title", "contains_ci", criteria.title))
    if criteria.min_rating is not None:
        predicates.append(Predicate("rating", "ge", criteria.min_rating))
    if criteria.max_rating is not None:
        predicates.append(Predicate("rating", "le", criteria.max_rating))
    if criteria.min_total_time is not None:
        predicates.append(Predicate("total_time", "ge", criteria.min_total_time))
    if criteria.max_total_time is not None:
        predicates.append(Predicate("total_time", "le", criteria.max_total_time))
    return predicates


def escape_like(value: str) -> str:
    """
    Escape LIKE wildcards so the value matches literally (backslash is the
    default escape character in Postgres).
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def predicates_to_sql(predicates: list[Predicate], *, start: int = 1) -> tuple[str, list[Any]]:
    """
    Returns (where_sql, args). `where_sql` is "" when there is nothing to filter,
    otherwise "WHERE ... AND ..." with placeholders numbered from `start`.
    """
    clauses: list[str] = []
    args: list[Any] = []
    for predicate in predicates:
        column = FILTER_COLUMNS[predicate.field]
        n = start + len(args)
        if predicate.op == "eq":
            clauses.append(f"{column} = ${n}")
            args.append(predicate.value)
        elif predicate.op == "contains_ci":
            clauses.append(f"{column} ILIKE ${n}")
            args.append("%" + escape_like(str(predicate.value)) + "%")
        elif predicate.op == "ge":
            clauses.append(f"{column} >= ${n}")
            args.append(predicate.value)
        elif predicate.op == "le":
            clauses.append(f"{column} <= ${n}")
            args.append(predicate.value)

    if not clauses:
        return "", []
    return "WHERE " + " AND ".join(clauses), args
