from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from app.services.search.field_schema import FieldSchema
from app.services.search.filters import CategoryFilter, RangeFilter
from app.services.search.pagination import PaginationParams


class Comparator(str, Enum):
    EQ = "="
    LIKE = "LIKE"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="


@dataclass(frozen=True)
class Predicate:
    field: str
    comparator: Comparator
    value: str

    def __str__(self) -> str:
        return f"{self.field} {self.comparator.value} {self.value!r}"


@dataclass(frozen=True)
class CompiledQuery:
    """Conjunction of predicates plus a deterministic order and a page window."""

    predicates: Tuple[Predicate, ...]
    order_by: str
    pagination: PaginationParams

    @property
    def limit(self) -> int:
        return self.pagination.page_size

    @property
    def offset(self) -> int:
        return self.pagination.offset

    def describe(self) -> str:
        where = " AND ".join(str(p) for p in self.predicates) or "TRUE"
        return f"WHERE {where} ORDER BY {self.order_by} LIMIT {self.limit} OFFSET {self.offset}"


def _category_predicate(f: CategoryFilter) -> Predicate:
    if f.like_pattern is not None:
        return Predicate(f.field, Comparator.LIKE, f.like_pattern)
    return Predicate(f.field, Comparator.EQ, f.exact_value)


def _range_predicates(f: RangeFilter) -> List[Predicate]:
    out: List[Predicate] = []
    if f.start_value is not None:
        out.append(Predicate(f.field, Comparator.GTE if f.start_inclusive else Comparator.GT, f.start_value))
    if f.end_value is not None:
        out.append(Predicate(f.field, Comparator.LTE if f.end_inclusive else Comparator.LT, f.end_value))
    return out


def compile_query(
    category_filters: Iterable[CategoryFilter],
    range_filters: Iterable[RangeFilter],
    pagination: PaginationParams,
    schema: FieldSchema,
) -> CompiledQuery:
    predicates: List[Predicate] = [_category_predicate(f) for f in category_filters]
    for f in range_filters:
        predicates.extend(_range_predicates(f))
    return CompiledQuery(predicates=tuple(predicates), order_by=schema.identifier, pagination=pagination)
