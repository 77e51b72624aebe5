"""Aggregations behind the role-specific dashboard views."""
from typing import Dict, List
from app.models.dashboard import AdminStats
from app.models.request import RequestStatus, ServiceRequest
from app.models.user import UserInDB, UserRole

# Dashboard tab names; accepted requests are shown as "active"
STATUS_TABS = {
    RequestStatus.PENDING: "pending",
    RequestStatus.ACCEPTED: "active",
    RequestStatus.COMPLETED: "completed",
    RequestStatus.REJECTED: "rejected",
}


def group_by_status(requests: List[ServiceRequest]) -> Dict[str, List[ServiceRequest]]:
    groups: Dict[str, List[ServiceRequest]] = {tab: [] for tab in STATUS_TABS.values()}
    for request in requests:
        groups[STATUS_TABS[request.status]].append(request)
    return groups


def count_groups(groups: Dict[str, List[ServiceRequest]]) -> Dict[str, int]:
    return {tab: len(items) for tab, items in groups.items()}


def worker_earnings(requests: List[ServiceRequest]) -> float:
    return sum(r.total_amount for r in requests if r.status == RequestStatus.COMPLETED)


def compute_admin_stats(users: List[UserInDB], requests: List[ServiceRequest]) -> AdminStats:
    """Platform totals. Revenue is the advance collected on completed jobs."""
    by_role = {role: 0 for role in UserRole}
    for user in users:
        by_role[user.role] += 1

    counts = count_groups(group_by_status(requests))
    revenue = sum(r.advance_amount for r in requests if r.status == RequestStatus.COMPLETED)

    return AdminStats(
        total_users=len(users),
        regular_users=by_role[UserRole.USER],
        workers=by_role[UserRole.WORKER],
        admins=by_role[UserRole.ADMIN],
        total_requests=len(requests),
        pending_requests=counts["pending"],
        active_requests=counts["active"],
        completed_requests=counts["completed"],
        rejected_requests=counts["rejected"],
        total_revenue=revenue,
    )
