from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from app.services.search.errors import InvalidPagination

PAGE_PARAM = "page"
PAGE_SIZE_PARAM = "page_size"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
# LIMIT and OFFSET are bound as signed 64-bit integers by the store.
MAX_STORE_INT = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class PaginationParams:
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def _parse_positive(param: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    text = str(raw)
    if not _INT_RE.fullmatch(text):
        raise InvalidPagination(param, raw)
    value = int(text)
    # Zero or negative values would yield a negative offset or a zero divisor.
    if value < 1:
        raise InvalidPagination(param, raw)
    return value


def resolve_pagination(
    raw_page: Optional[str] = None,
    raw_page_size: Optional[str] = None,
    max_page_size: Optional[int] = None,
) -> PaginationParams:
    page = _parse_positive(PAGE_PARAM, raw_page, DEFAULT_PAGE)
    page_size = _parse_positive(PAGE_SIZE_PARAM, raw_page_size, DEFAULT_PAGE_SIZE)
    if page_size > MAX_STORE_INT or (max_page_size is not None and page_size > max_page_size):
        raise InvalidPagination(PAGE_SIZE_PARAM, raw_page_size)
    params = PaginationParams(page=page, page_size=page_size)
    if params.offset > MAX_STORE_INT:
        raise InvalidPagination(PAGE_PARAM, raw_page)
    return params


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` rows, ``ceil(total / size)``."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    return -(-total_count // page_size)
