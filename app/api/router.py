from fastapi import APIRouter
from app.api import organizations

router = APIRouter()
router.include_router(organizations.router, prefix="/organizations", tags=["Organizations"])
