"""Storage interface shared by the document and key/value backends.

Endpoints only talk to :class:`Repository`; which implementation they get is
decided per request by ``settings.STORAGE_BACKEND``. Write methods commit
before returning.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.models.request import ServiceRequest
from app.models.service import ServiceCategory
from app.models.user import UserInDB
from app.models.worker import WorkerProfile


DEFAULT_SERVICES = [
    {"id": "plumber", "name": "Plumber", "icon": "wrench", "description": "Pipe repairs, leaks, installations"},
    {"id": "electrician", "name": "Electrician", "icon": "zap", "description": "Electrical repairs and installations"},
    {"id": "ac-repair", "name": "AC Repair", "icon": "wind", "description": "Air conditioning repair and maintenance"},
    {"id": "carpenter", "name": "Carpenter", "icon": "hammer", "description": "Furniture and wood work"},
    {"id": "gardener", "name": "Gardener", "icon": "leaf", "description": "Garden maintenance and landscaping"},
    {"id": "gas-repair", "name": "Gas Repair", "icon": "flame", "description": "Gas line repairs and installations"},
    {"id": "painter", "name": "Painter", "icon": "paintbrush", "description": "Interior and exterior painting"},
    {"id": "cleaner", "name": "House Cleaning", "icon": "sparkles", "description": "Deep cleaning services"},
    {"id": "pest-control", "name": "Pest Control", "icon": "bug", "description": "Pest elimination services"},
    {"id": "appliance-repair", "name": "Appliance Repair", "icon": "settings", "description": "Home appliance repairs"},
]


class Repository(ABC):

    # ─── Users ───────────────────────────────────────────────────────

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[UserInDB]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[UserInDB]: ...

    @abstractmethod
    async def create_user(self, user: UserInDB, worker: Optional[WorkerProfile] = None) -> UserInDB:
        """Store a user and, for workers, their profile in one go."""

    @abstractmethod
    async def update_user(self, user: UserInDB) -> UserInDB: ...

    @abstractmethod
    async def list_users(self) -> List[UserInDB]: ...

    # ─── Workers ─────────────────────────────────────────────────────

    @abstractmethod
    async def get_worker(self, worker_id: str) -> Optional[WorkerProfile]: ...

    @abstractmethod
    async def list_workers(self) -> List[WorkerProfile]: ...

    @abstractmethod
    async def list_workers_by_service(self, service_type: str) -> List[WorkerProfile]: ...

    @abstractmethod
    async def save_worker(self, worker: WorkerProfile) -> WorkerProfile: ...

    # ─── Service catalogue ───────────────────────────────────────────

    @abstractmethod
    async def get_services(self) -> List[ServiceCategory]:
        """Stored categories, possibly empty."""

    @abstractmethod
    async def save_services(self, services: List[ServiceCategory]) -> None: ...

    async def list_services(self) -> List[ServiceCategory]:
        """Stored categories, initialising the default catalogue on first use."""
        services = await self.get_services()
        if not services:
            services = [ServiceCategory(**s) for s in DEFAULT_SERVICES]
            await self.save_services(services)
        return services

    # ─── Requests ────────────────────────────────────────────────────

    @abstractmethod
    async def create_request(self, request: ServiceRequest) -> ServiceRequest: ...

    @abstractmethod
    async def get_request(self, request_id: str) -> Optional[ServiceRequest]: ...

    @abstractmethod
    async def save_request(self, request: ServiceRequest) -> ServiceRequest: ...

    @abstractmethod
    async def list_requests_for_user(self, user_id: str) -> List[ServiceRequest]: ...

    @abstractmethod
    async def list_requests_for_worker(self, worker_id: str) -> List[ServiceRequest]: ...

    @abstractmethod
    async def list_all_requests(self) -> List[ServiceRequest]: ...


def build_repository(db: AsyncSession, backend: Optional[str] = None) -> Repository:
    backend = backend or settings.STORAGE_BACKEND
    if backend == "kv":
        from app.db.kv_repository import KVRepository
        return KVRepository(db)
    from app.db.document_repository import DocumentRepository
    return DocumentRepository(db)


async def get_repository(db: AsyncSession = Depends(get_db)) -> Repository:
    """FastAPI dependency that provides the configured storage backend."""
    return build_repository(db)
