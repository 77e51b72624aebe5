from typing import Any
from fastapi import APIRouter, Depends
from app.api import deps
from app.db.repository import Repository, get_repository
from app.models.dashboard import (
    AdminDashboard, AdminStats, Dashboard, UserDashboard, WorkerDashboard,
)
from app.models.user import UserInDB, UserResponse, UserRole
from app.services.dashboard_service import (
    compute_admin_stats, count_groups, group_by_status, worker_earnings,
)

router = APIRouter()

RECENT_REQUESTS_LIMIT = 10


@router.get("/", response_model=Dashboard)
async def read_dashboard(
    current_user: UserInDB = Depends(deps.get_current_active_user),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Role-specific dashboard view for the current user."""
    profile = UserResponse.model_validate(current_user.model_dump())

    if current_user.role == UserRole.ADMIN:
        requests = await repo.list_all_requests()
        stats = compute_admin_stats(await repo.list_users(), requests)
        return AdminDashboard(
            profile=profile,
            stats=stats,
            recent_requests=requests[:RECENT_REQUESTS_LIMIT],
        )

    if current_user.role == UserRole.WORKER:
        requests = await repo.list_requests_for_worker(current_user.id)
        groups = group_by_status(requests)
        return WorkerDashboard(
            profile=profile,
            worker_profile=await repo.get_worker(current_user.id),
            counts=count_groups(groups),
            requests=groups,
            earnings=worker_earnings(requests),
        )

    groups = group_by_status(await repo.list_requests_for_user(current_user.id))
    return UserDashboard(profile=profile, counts=count_groups(groups), requests=groups)


@router.get("/admin/stats", response_model=AdminStats)
async def read_admin_stats(
    current_user: UserInDB = Depends(deps.get_current_admin),
    repo: Repository = Depends(get_repository),
) -> Any:
    """Platform-wide user and request totals (admin only)."""
    return compute_admin_stats(await repo.list_users(), await repo.list_all_requests())
