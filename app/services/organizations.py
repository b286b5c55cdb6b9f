from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.organization import Organization
from app.schemas.organization import OrganizationCreate
from app.services.search import (
    FieldSchema,
    SearchResult,
    compile_query,
    parse_filters,
    resolve_pagination,
    run_search,
)

_LOG = logging.getLogger("app.organizations")

# Field name -> whether it is continuous (accepts range filters).
ORGANIZATION_FIELD_SCHEMA = FieldSchema(
    {
        "name": False,
        "creation_date": True,
        "employee_count": True,
        "is_public": False,
    },
    identifier="id",
)


class OrganizationIdSupplied(Exception):
    def __init__(self):
        super().__init__("invalid request body: organization id is assigned by the server")


class OrganizationSaveError(Exception):
    pass


def create_organization(db: Session, payload: OrganizationCreate) -> Organization:
    if payload.id is not None:
        _LOG.info("organization create request already contained an id")
        raise OrganizationIdSupplied()
    org = Organization(**payload.model_dump(exclude={"id"}))
    try:
        db.add(org)
        db.commit()
        db.refresh(org)
    except SQLAlchemyError as exc:
        db.rollback()
        _LOG.exception("error saving new organization")
        raise OrganizationSaveError("could not save organization") from exc
    return org


def search_organizations(
    db: Session,
    category_filters: Iterable[str] = (),
    range_filters: Iterable[str] = (),
    page: Optional[str] = None,
    page_size: Optional[str] = None,
    schema: FieldSchema = ORGANIZATION_FIELD_SCHEMA,
) -> SearchResult:
    """Parse raw query parameters, then run the paginated organization search.

    Raises ``SearchInputError`` subclasses for bad parameters, before the
    database is touched, and ``SearchExecutionError`` when the database fails.
    """
    pagination = resolve_pagination(page, page_size, max_page_size=settings.SEARCH_MAX_PAGE_SIZE)
    categories, ranges = parse_filters(category_filters, range_filters, schema)
    compiled = compile_query(categories, ranges, pagination, schema)
    return run_search(db, Organization, compiled)
