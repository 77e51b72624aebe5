from pydantic import BaseModel, Field
from typing import Annotated, Dict, List, Literal, Optional, Union
from app.models.request import ServiceRequest
from app.models.user import UserResponse
from app.models.worker import WorkerProfile


class AdminStats(BaseModel):
    total_users: int
    regular_users: int
    workers: int
    admins: int
    total_requests: int
    pending_requests: int
    active_requests: int
    completed_requests: int
    rejected_requests: int
    total_revenue: float


class UserDashboard(BaseModel):
    role: Literal["user"] = "user"
    profile: UserResponse
    counts: Dict[str, int]
    requests: Dict[str, List[ServiceRequest]]


class WorkerDashboard(BaseModel):
    role: Literal["worker"] = "worker"
    profile: UserResponse
    worker_profile: Optional[WorkerProfile] = None
    counts: Dict[str, int]
    requests: Dict[str, List[ServiceRequest]]
    earnings: float


class AdminDashboard(BaseModel):
    role: Literal["admin"] = "admin"
    profile: UserResponse
    stats: AdminStats
    recent_requests: List[ServiceRequest]


Dashboard = Annotated[
    Union[AdminDashboard, WorkerDashboard, UserDashboard],
    Field(discriminator="role"),
]
