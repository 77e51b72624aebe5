from typing import Any, List
from fastapi import APIRouter, Depends
from app.db.repository import Repository, get_repository
from app.models.service import ServiceCategory

router = APIRouter()


@router.get("/", response_model=List[ServiceCategory])
async def read_service_categories(
    repo: Repository = Depends(get_repository),
) -> Any:
    """Retrieve service categories (occupations workers can offer)."""
    return await repo.list_services()
