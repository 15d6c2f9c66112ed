"""
Turn one source JSON member into a `Recipe`.

Field coercion is lenient: a missing, null or unparseable value becomes None.
Only a structural problem (the member is not an object, or a text field holds a
nested object/array) raises `RecordError`, which makes the loader skip that
member.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Column order used for inserts.
RECIPE_FIELDS = (
    "cuisine",
    "title",
    "rating",
    "prep_time",
    "cook_time",
    "total_time",
    "description",
    "nutrients",
    "serves",
)

# Bounds of a Postgres `integer` column.
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1


class RecordError(ValueError):
    pass


@dataclass(frozen=True)
class Recipe:
    cuisine: str | None = None
    title: str | None = None
    rating: float | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    total_time: int | None = None
    description: str | None = None
    # Compact JSON text of the source object.
    nutrients: str | None = None
    serves: str | None = None

    def as_row(self) -> tuple[Any, ...]:
        values = asdict(self)
        return tuple(values[name] for name in RECIPE_FIELDS)


def get_text(node: dict[str, Any], field: str) -> str | None:
    val = node.get(field)
    if val is None:
        return None
    if isinstance(val, str):
        return val
    if isinstance(val, bool):
        return "true" if val else "false"
    if isinstance(val, (int, float)):
        return str(val)
    raise RecordError(f"Field '{field}' must be a scalar, got {type(val).__name__}.")


def get_float_or_none(node: dict[str, Any], field: str) -> float | None:
    val = node.get(field)
    if val is None or isinstance(val, bool):
        return None
    if not isinstance(val, (int, float, str)):
        logger.debug("field_not_numeric field=%s type=%s", field, type(val).__name__)
        return None

    try:
        result = float(val)
    except (TypeError, ValueError, OverflowError):
        logger.debug("field_parse_failed field=%s value=%r", field, val)
        return None

    if not math.isfinite(result):
        logger.debug("field_not_finite field=%s value=%r", field, val)
        return None
    return result


def get_int_or_none(node: dict[str, Any], field: str) -> int | None:
    val = node.get(field)
    if val is None or isinstance(val, bool):
        return None

    try:
        if isinstance(val, (int, float)):
            # Fractional numbers truncate toward zero; NaN/inf raise.
            result = int(val)
        elif isinstance(val, str):
            result = int(val.strip())
        else:
            logger.debug("field_not_numeric field=%s type=%s", field, type(val).__name__)
            return None
    except (ValueError, OverflowError):
        logger.debug("field_parse_failed field=%s value=%r", field, val)
        return None

    if not INT4_MIN <= result <= INT4_MAX:
        logger.debug("field_out_of_range field=%s value=%r", field, val)
        return None
    return result


def get_json_text(node: dict[str, Any], field: str) -> str | None:
    val = node.get(field)
    if val is None:
        return None
    return json.dumps(val, ensure_ascii=False, separators=(",", ":"))


def recipe_from_json(node: Any) -> Recipe:
    """
    Build a `Recipe` from one member value of the source document.
    """
    if not isinstance(node, dict):
        raise RecordError(f"Recipe entry must be an object, got {type(node).__name__}.")

    return Recipe(
        cuisine=get_text(node, "cuisine"),
        title=get_text(node, "title"),
        rating=get_float_or_none(node, "rating"),
        prep_time=get_int_or_none(node, "prep_time"),
        cook_time=get_int_or_none(node, "cook_time"),
        total_time=get_int_or_none(node, "total_time"),
        description=get_text(node, "description"),
        nutrients=get_json_text(node, "nutrients"),
        serves=get_text(node, "serves"),
    )
