from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.organization import OrganizationCreate, OrganizationRead, PaginatedOrganizations
from app.services.organizations import (
    OrganizationIdSupplied,
    OrganizationSaveError,
    create_organization,
    search_organizations,
)
from app.services.search import SearchExecutionError, SearchInputError

router = APIRouter()

@router.post("", status_code=201, response_model=OrganizationRead)
def post_organization(payload: OrganizationCreate, db: Session = Depends(get_db)):
    try:
        return create_organization(db, payload)
    except OrganizationIdSupplied as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except OrganizationSaveError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

@router.get("", response_model=PaginatedOrganizations)
def get_organizations(
    filters: List[str] = Query(default=[], alias="filter"),
    range_filters: List[str] = Query(default=[], alias="range_filter"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    try:
        result = search_organizations(db, filters, range_filters, page, page_size)
    except SearchInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except SearchExecutionError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    if not result.items:
        raise HTTPException(status_code=404, detail="No organizations found")
    return PaginatedOrganizations(
        organizations=[OrganizationRead.model_validate(r) for r in result.items],
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        total_count=result.total_count,
    )
