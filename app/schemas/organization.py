from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class OrganizationCreate(BaseModel):
    # ``id`` is accepted only so a client-supplied value can be rejected explicitly.
    id: Optional[UUID] = None
    name: str
    creation_date: datetime
    employee_count: int = 0
    is_public: bool = False


class OrganizationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    creation_date: datetime
    employee_count: int
    is_public: bool


class PaginatedOrganizations(BaseModel):
    organizations: List[OrganizationRead]
    page: int
    page_size: int
    total_pages: int
    total_count: int
