from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from app.api import deps
from app.db.repository import Repository, get_repository
from app.models.user import UserInDB, UserResponse, UserRole, UserUpdate
from app.models.worker import WorkerProfile

router = APIRouter()


class ProfileResponse(BaseModel):
    profile: UserResponse
    worker_profile: Optional[WorkerProfile] = None


@router.get("/me", response_model=ProfileResponse)
async def read_users_me(
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Get current user, plus the worker profile for workers."""
    worker_profile = None
    if current_user.role == UserRole.WORKER:
        worker_profile = await repo.get_worker(current_user.id)
    return ProfileResponse(
        profile=UserResponse.model_validate(current_user.model_dump()),
        worker_profile=worker_profile,
    )


@router.put("/me", response_model=UserResponse)
async def update_user_me(
    user_update: UserUpdate,
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Update current user profile."""
    update_data = user_update.model_dump(exclude_unset=True, exclude_none=True)
    user = current_user.model_copy(update=update_data)
    await repo.update_user(user)

    # Keep the denormalised contact details on the worker profile in sync
    if user.role == UserRole.WORKER and ({"name", "phone"} & update_data.keys()):
        worker = await repo.get_worker(user.id)
        if worker:
            await repo.save_worker(worker.model_copy(update={"name": user.name, "phone": user.phone}))
    return user


@router.get("/", response_model=List[UserResponse])
async def read_users(
    role: Optional[UserRole] = None,
    current_user: UserInDB = Depends(deps.get_current_admin),
    repo: Repository = Depends(get_repository),
) -> Any:
    """List all users (admin only), optionally filtered by role."""
    users = await repo.list_users()
    if role:
        users = [u for u in users if u.role == role]
    return users


@router.get("/{user_id}", response_model=UserResponse)
async def read_user(
    user_id: str,
    current_user: UserInDB = Depends(deps.get_current_admin),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Get any user's account (admin only)."""
    user = await repo.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
