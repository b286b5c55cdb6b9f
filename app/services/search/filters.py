from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from app.services.search.errors import FilterTypeMismatch, SearchInputError
from app.services.search.field_schema import FieldSchema
from app.services.search.grammar import WILDCARD, parse_category_clause, parse_range_clause

STORE_WILDCARD = "%"

_LOG = logging.getLogger("app.search")


@dataclass(frozen=True)
class CategoryFilter:
    field: str
    exact_value: Optional[str] = None
    like_pattern: Optional[str] = None

    def __post_init__(self):
        if (self.exact_value is None) == (self.like_pattern is None):
            raise ValueError("exactly one of exact_value and like_pattern must be set")


@dataclass(frozen=True)
class RangeFilter:
    field: str
    start_value: Optional[str]
    start_inclusive: bool
    end_value: Optional[str]
    end_inclusive: bool


def parse_category_filter(raw: str, schema: FieldSchema) -> CategoryFilter:
    clause = parse_category_clause(raw)
    # Any known field may be matched categorically; the lookup raises otherwise.
    schema.is_continuous(clause.field)
    if clause.has_wildcard:
        return CategoryFilter(field=clause.field, like_pattern=clause.value.replace(WILDCARD, STORE_WILDCARD))
    return CategoryFilter(field=clause.field, exact_value=clause.value)


def parse_range_filter(raw: str, schema: FieldSchema) -> RangeFilter:
    clause = parse_range_clause(raw)
    if not schema.is_continuous(clause.field):
        raise FilterTypeMismatch(clause.field)
    return RangeFilter(
        field=clause.field,
        start_value=clause.start,
        start_inclusive=clause.start_inclusive,
        end_value=clause.end,
        end_inclusive=clause.end_inclusive,
    )


def parse_filters(
    category_raw: Iterable[str],
    range_raw: Iterable[str],
    schema: FieldSchema,
) -> Tuple[List[CategoryFilter], List[RangeFilter]]:
    """Parse every ``filter`` and ``range_filter`` value of one request.

    The first invalid value aborts the whole request.
    """
    try:
        category_filters = [parse_category_filter(raw, schema) for raw in category_raw]
        range_filters = [parse_range_filter(raw, schema) for raw in range_raw]
    except SearchInputError as exc:
        _LOG.info("rejected search filter: %s", exc)
        raise
    return category_filters, range_filters
