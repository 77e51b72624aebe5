"""Repository that emulates collections and indexes on top of :class:`KVStore`.

Key layout::

    user:{id}                 user document (includes password hash)
    user:email:{email}        user id, unique email lookup
    users:index               list of user ids, registration order
    worker:{id}               worker profile
    workers:index             list of worker ids
    request:{id}              service request
    user:{id}:requests        request ids created by a user
    worker:{id}:requests      request ids assigned to a worker
    services:categories       list of service categories

Worker search is a linear scan over ``workers:index``; the admin view of all
requests is a prefix scan over ``request:``.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.kv_store import KVStore
from app.db.repository import Repository
from app.models.request import ServiceRequest
from app.models.service import ServiceCategory
from app.models.user import UserInDB
from app.models.worker import WorkerProfile

logger = logging.getLogger(__name__)

USERS_INDEX = "users:index"
WORKERS_INDEX = "workers:index"
SERVICES_KEY = "services:categories"
REQUEST_PREFIX = "request:"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def email_key(email: str) -> str:
    return f"user:email:{email.lower()}"


def worker_key(worker_id: str) -> str:
    return f"worker:{worker_id}"


def request_key(request_id: str) -> str:
    return f"{REQUEST_PREFIX}{request_id}"


def user_requests_key(user_id: str) -> str:
    return f"user:{user_id}:requests"


def worker_requests_key(worker_id: str) -> str:
    return f"worker:{worker_id}:requests"


def _newest_first(requests: List[ServiceRequest]) -> List[ServiceRequest]:
    return sorted(requests, key=lambda r: r.created_at, reverse=True)


class KVRepository(Repository):
    def __init__(self, db: AsyncSession):
        self.kv = KVStore(db)

    async def _append_to_index(self, key: str, item_id: str) -> None:
        ids = await self.kv.get(key) or []
        ids.append(item_id)
        await self.kv.set(key, ids)

    # ─── Users ───────────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        data = await self.kv.get(user_key(user_id))
        return UserInDB.model_validate(data) if data else None

    async def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        user_id = await self.kv.get(email_key(email))
        if user_id is None:
            return None
        return await self.get_user(user_id)

    async def create_user(self, user: UserInDB, worker: Optional[WorkerProfile] = None) -> UserInDB:
        await self.kv.mset({
            user_key(user.id): user.model_dump(mode="json"),
            email_key(user.email): user.id,
        })
        if worker is not None:
            await self.kv.set(worker_key(worker.id), worker.model_dump(mode="json"))
            await self._append_to_index(WORKERS_INDEX, worker.id)
        await self._append_to_index(USERS_INDEX, user.id)
        await self.kv.commit()
        return user

    async def update_user(self, user: UserInDB) -> UserInDB:
        await self.kv.set(user_key(user.id), user.model_dump(mode="json"))
        await self.kv.commit()
        return user

    async def list_users(self) -> List[UserInDB]:
        ids = await self.kv.get(USERS_INDEX) or []
        docs = await self.kv.mget(user_key(i) for i in ids)
        return [UserInDB.model_validate(d) for d in docs]

    # ─── Workers ─────────────────────────────────────────────────────

    async def get_worker(self, worker_id: str) -> Optional[WorkerProfile]:
        data = await self.kv.get(worker_key(worker_id))
        return WorkerProfile.model_validate(data) if data else None

    async def list_workers(self) -> List[WorkerProfile]:
        ids = await self.kv.get(WORKERS_INDEX) or []
        docs = await self.kv.mget(worker_key(i) for i in ids)
        return [WorkerProfile.model_validate(d) for d in docs]

    async def list_workers_by_service(self, service_type: str) -> List[WorkerProfile]:
        return [w for w in await self.list_workers() if w.offers(service_type)]

    async def save_worker(self, worker: WorkerProfile) -> WorkerProfile:
        await self.kv.set(worker_key(worker.id), worker.model_dump(mode="json"))
        await self.kv.commit()
        return worker

    # ─── Service catalogue ───────────────────────────────────────────

    async def get_services(self) -> List[ServiceCategory]:
        docs = await self.kv.get(SERVICES_KEY) or []
        return [ServiceCategory.model_validate(d) for d in docs]

    async def save_services(self, services: List[ServiceCategory]) -> None:
        await self.kv.set(SERVICES_KEY, [s.model_dump(mode="json") for s in services])
        await self.kv.commit()

    # ─── Requests ────────────────────────────────────────────────────

    async def create_request(self, request: ServiceRequest) -> ServiceRequest:
        await self.kv.set(request_key(request.id), request.model_dump(mode="json"))
        await self._append_to_index(user_requests_key(request.user_id), request.id)
        await self._append_to_index(worker_requests_key(request.worker_id), request.id)
        await self.kv.commit()
        return request

    async def get_request(self, request_id: str) -> Optional[ServiceRequest]:
        data = await self.kv.get(request_key(request_id))
        return ServiceRequest.model_validate(data) if data else None

    async def save_request(self, request: ServiceRequest) -> ServiceRequest:
        await self.kv.set(request_key(request.id), request.model_dump(mode="json"))
        await self.kv.commit()
        return request

    async def _requests_in_index(self, index_key: str) -> List[ServiceRequest]:
        ids = await self.kv.get(index_key) or []
        docs = await self.kv.mget(request_key(i) for i in ids)
        return _newest_first([ServiceRequest.model_validate(d) for d in docs])

    async def list_requests_for_user(self, user_id: str) -> List[ServiceRequest]:
        return await self._requests_in_index(user_requests_key(user_id))

    async def list_requests_for_worker(self, worker_id: str) -> List[ServiceRequest]:
        return await self._requests_in_index(worker_requests_key(worker_id))

    async def list_all_requests(self) -> List[ServiceRequest]:
        docs = await self.kv.get_by_prefix(REQUEST_PREFIX)
        logger.debug(f"Loaded {len(docs)} requests by prefix scan")
        return _newest_first([ServiceRequest.model_validate(d) for d in docs])
