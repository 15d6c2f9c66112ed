"""Tests for search filter parsing and predicate translation."""

import pytest

from recipes.filters import (
    Predicate,
    SearchCriteria,
    build_predicates,
    escape_like,
    parse_rating,
    parse_total_time,
    predicates_to_sql,
)


class TestParseRating:
    @pytest.mark.parametrize(
        "raw,expected",
        (
            (">=4.5", (4.5, None)),
            ("<=3", (None, 3.0)),
            ("=4.5", (4.5, 4.5)),
            (" >= 4.5 ", (4.5, None)),
            (">=abc", (None, None)),
            (">=NaN", (None, None)),
            ("4.5", (None, None)),
            (">4", (None, None)),
            ("", (None, None)),
            (None, (None, None)),
        ),
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_rating(raw) == expected


class TestParseTotalTime:
    @pytest.mark.parametrize(
        "raw,expected",
        (
            ("<=30", (None, 30)),
            ("=45", (45, 45)),
            ("<=abc", (None, None)),
            ("<=30.5", (None, None)),
            ("<=3000000000", (None, None)),
            ("=-2147483649", (None, None)),
            ("<=2147483647", (None, 2147483647)),
            (">=30", (None, None)),
            ("   ", (None, None)),
        ),
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_total_time(raw) == expected


class TestBuildPredicates:
    def test_no_filters(self) -> None:
        assert build_predicates(SearchCriteria.from_query()) == []

    def test_blank_strings_are_ignored(self) -> None:
        criteria = SearchCriteria.from_query(cuisine="", title="  ", rating="", total_time="")
        assert build_predicates(criteria) == []

    def test_all_filters(self) -> None:
        criteria = SearchCriteria.from_query(
            cuisine="Soups",
            title="chicken",
            rating="=4.5",
            total_time="<=30",
        )
        assert build_predicates(criteria) == [
            Predicate("cuisine", "eq", "Soups"),
            Predicate("title", "contains_ci", "chicken"),
            Predicate("rating", "ge", 4.5),
            Predicate("rating", "le", 4.5),
            Predicate("total_time", "le", 30),
        ]

    @pytest.mark.parametrize("field", ["cuisine", "title"])
    def test_nul_byte_text_filter_dropped(self, field: str) -> None:
        criteria = SearchCriteria.from_query(**{field: "soup\x00"})
        assert build_predicates(criteria) == []

    def test_malformed_bound_dropped(self) -> None:
        criteria = SearchCriteria.from_query(title="pie", rating=">=abc")
        assert build_predicates(criteria) == [Predicate("title", "contains_ci", "pie")]

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown filter field"):
            Predicate("calories", "le", 300)


class TestPredicatesToSql:
    def test_empty(self) -> None:
        assert predicates_to_sql([]) == ("", [])

    def test_placeholders_and_args(self) -> None:
        where_sql, args = predicates_to_sql(
            [
                Predicate("cuisine", "eq", "Soups"),
                Predicate("title", "contains_ci", "Chicken"),
                Predicate("rating", "ge", 4.5),
                Predicate("total_time", "le", 30),
            ]
        )
        assert where_sql == (
            "WHERE cuisine = $1 AND title ILIKE $2 AND rating >= $3 AND total_time <= $4"
        )
        assert args == ["Soups", "%Chicken%", 4.5, 30]

    def test_start_offset(self) -> None:
        where_sql, _ = predicates_to_sql([Predicate("rating", "le", 3.0)], start=3)
        assert where_sql == "WHERE rating <= $3"

    def test_like_wildcards_escaped(self) -> None:
        _, args = predicates_to_sql([Predicate("title", "contains_ci", "100%_pure")])
        assert args == ["%100\\%\\_pure%"]


def test_escape_like_backslash() -> None:
    assert escape_like("a\\b") == "a\\\\b"
