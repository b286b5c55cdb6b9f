"""Filter parsing, query compilation and paginated execution for list endpoints."""

from app.services.search.compiler import Comparator, CompiledQuery, Predicate, compile_query
from app.services.search.errors import (
    FilterTypeMismatch,
    InvalidFilterSyntax,
    InvalidFilterValue,
    InvalidPagination,
    SearchError,
    SearchExecutionError,
    SearchInputError,
    UnknownField,
)
from app.services.search.executor import SearchResult, apply_compiled_query, execute_search, run_search
from app.services.search.field_schema import FieldSchema
from app.services.search.filters import (
    CategoryFilter,
    RangeFilter,
    parse_category_filter,
    parse_filters,
    parse_range_filter,
)
from app.services.search.pagination import PaginationParams, resolve_pagination, total_pages

__all__ = [
    "CategoryFilter",
    "Comparator",
    "CompiledQuery",
    "FieldSchema",
    "FilterTypeMismatch",
    "InvalidFilterSyntax",
    "InvalidFilterValue",
    "InvalidPagination",
    "PaginationParams",
    "Predicate",
    "RangeFilter",
    "SearchError",
    "SearchExecutionError",
    "SearchInputError",
    "SearchResult",
    "UnknownField",
    "apply_compiled_query",
    "compile_query",
    "execute_search",
    "parse_category_filter",
    "parse_filters",
    "parse_range_filter",
    "resolve_pagination",
    "run_search",
    "total_pages",
]
