from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Tuple

from sqlalchemy import String, asc, cast
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.services.search.coercion import coerce_filter_value, column_python_type
from app.services.search.compiler import Comparator, CompiledQuery, Predicate
from app.services.search.errors import SearchExecutionError
from app.services.search.pagination import total_pages

_LOG = logging.getLogger("app.search")


@dataclass
class SearchResult:
    items: List[Any] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_count, self.page_size)


def _column(model, name: str):
    col = getattr(model, name, None)
    if col is None:
        # The field schema promised a column the model does not have.
        raise SearchExecutionError(f"search is misconfigured for {model.__name__}")
    return col


def _clause(model, p: Predicate):
    col = _column(model, p.field)
    if p.comparator is Comparator.LIKE:
        target = col if column_python_type(col) is str else cast(col, String)
        return target.like(p.value)
    value = coerce_filter_value(col, p.field, p.value)
    if p.comparator is Comparator.EQ:
        return col == value
    if p.comparator is Comparator.GT:
        return col > value
    if p.comparator is Comparator.GTE:
        return col >= value
    if p.comparator is Comparator.LT:
        return col < value
    return col <= value


def apply_compiled_query(q: Query, model, compiled: CompiledQuery) -> Query:
    """Add the predicates of ``compiled`` to ``q``; order and window are not applied."""
    for p in compiled.predicates:
        q = q.filter(_clause(model, p))
    return q


def execute_search(db: Session, model, compiled: CompiledQuery) -> Tuple[List[Any], int]:
    q = apply_compiled_query(db.query(model), model, compiled)
    order_col = _column(model, compiled.order_by)
    _LOG.debug("searching %s: %s", model.__tablename__, compiled.describe())
    try:
        total = q.count()
        rows = q.order_by(asc(order_col)).offset(compiled.offset).limit(compiled.limit).all()
    except SQLAlchemyError as exc:
        _LOG.exception("search on %s failed", model.__tablename__)
        raise SearchExecutionError("search query failed") from exc
    _LOG.debug("search on %s matched %d rows", model.__tablename__, total)
    return rows, total


def run_search(db: Session, model, compiled: CompiledQuery) -> SearchResult:
    rows, total = execute_search(db, model, compiled)
    return SearchResult(
        items=rows,
        total_count=total,
        page=compiled.pagination.page,
        page_size=compiled.pagination.page_size,
    )
