import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.api import deps
from app.db.db_models import utcnow
from app.db.repository import Repository, get_repository
from app.models.user import UserInDB, UserRole
from app.models.worker import (
    RatingCreate, WorkerProfile, WorkerReview, WorkerUpdate, WorkerVerify,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def apply_rating(worker: WorkerProfile, user_id: str, rating: int, review: Optional[str]) -> WorkerProfile:
    """Fold one rating into the running average and append the review."""
    total_ratings = worker.total_ratings + 1
    new_rating = (worker.rating * worker.total_ratings + rating) / total_ratings
    return worker.model_copy(update={
        "rating": new_rating,
        "total_ratings": total_ratings,
        "reviews": worker.reviews + [
            WorkerReview(user_id=user_id, rating=rating, review=review, created_at=utcnow())
        ],
    })


async def _get_worker_or_404(repo: Repository, worker_id: str) -> WorkerProfile:
    worker = await repo.get_worker(worker_id)
    if not worker:
        raise HTTPException(status_code=404, detail="Worker not found")
    return worker


@router.get("/", response_model=List[WorkerProfile])
async def read_workers(
    service_type: Optional[str] = None,
    occupation: Optional[str] = Query(default=None, description="Alias of service_type"),
    current_user: Optional[UserInDB] = Depends(deps.get_optional_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Workers offering a service; the unfiltered listing is admin only."""
    service_type = service_type or occupation
    if service_type:
        return await repo.list_workers_by_service(service_type)

    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The user does not have enough privileges",
        )
    return await repo.list_workers()


@router.get("/service/{service_type}", response_model=List[WorkerProfile])
async def read_workers_by_service(
    service_type: str,
    repo: Repository = Depends(get_repository),
) -> Any:
    """Workers offering the given service type."""
    return await repo.list_workers_by_service(service_type)


@router.put("/me", response_model=WorkerProfile)
async def update_worker_me(
    worker_update: WorkerUpdate,
    current_user: UserInDB = Depends(deps.get_current_worker),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Worker updates their own rates, availability and portfolio."""
    worker = await _get_worker_or_404(repo, current_user.id)
    update_data = worker_update.model_dump(exclude_unset=True, exclude_none=True)
    if "service_types" in update_data and not update_data["service_types"]:
        raise HTTPException(status_code=400, detail="Workers must offer at least one service.")

    worker = worker.model_copy(update=update_data)
    return await repo.save_worker(worker)


@router.get("/{worker_id}", response_model=WorkerProfile)
async def read_worker(
    worker_id: str,
    repo: Repository = Depends(get_repository),
) -> Any:
    """Public worker profile."""
    return await _get_worker_or_404(repo, worker_id)


@router.put("/{worker_id}/verify", response_model=WorkerProfile)
async def verify_worker(
    worker_id: str,
    data: WorkerVerify,
    current_user: UserInDB = Depends(deps.get_current_admin),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Mark a worker as verified (or revoke it). Admin only."""
    worker = await _get_worker_or_404(repo, worker_id)
    worker = worker.model_copy(update={"verified": data.verified})
    logger.info(f"Admin {current_user.email} set verified={data.verified} on worker {worker_id}")
    return await repo.save_worker(worker)


@router.post("/{worker_id}/rating", response_model=WorkerProfile)
async def rate_worker(
    worker_id: str,
    rating_in: RatingCreate,
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Add a 1-5 rating with an optional review to a worker."""
    worker = await _get_worker_or_404(repo, worker_id)
    if worker.id == current_user.id:
        raise HTTPException(status_code=400, detail="Workers cannot rate themselves")

    worker = apply_rating(worker, current_user.id, rating_in.rating, rating_in.review)
    logger.info(f"Worker {worker_id} rated {rating_in.rating} by {current_user.id}")
    return await repo.save_worker(worker)
