"""Repository backed by one table per collection (users, workers, requests)."""
from enum import Enum
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import db_models
from app.db.repository import Repository
from app.models.request import ServiceRequest
from app.models.service import ServiceCategory
from app.models.user import UserInDB
from app.models.worker import WorkerProfile, WorkerReview


def _request_columns(request: ServiceRequest) -> dict:
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in request.model_dump().items()
    }


def _to_worker(row: db_models.WorkerProfile) -> WorkerProfile:
    return WorkerProfile(
        id=row.id,
        user_id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone,
        service_types=[s.service_type for s in row.services],
        rating=row.rating or 0.0,
        total_ratings=row.total_ratings or 0,
        hourly_rate=row.hourly_rate,
        advance_payment=row.advance_payment,
        available_times=row.available_times,
        previous_works=list(row.previous_works or []),
        bio=row.bio,
        experience=row.experience,
        location=row.location,
        verified=row.verified,
        reviews=[
            WorkerReview(user_id=r.user_id, rating=r.rating, review=r.review, created_at=r.created_at)
            for r in row.reviews
        ],
        created_at=row.created_at,
    )


class DocumentRepository(Repository):
    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Users ───────────────────────────────────────────────────────

    async def get_user(self, user_id: str) -> Optional[UserInDB]:
        row = await self.db.get(db_models.User, user_id)
        return UserInDB.model_validate(row) if row else None

    async def get_user_by_email(self, email: str) -> Optional[UserInDB]:
        result = await self.db.execute(select(db_models.User).where(db_models.User.email == email.lower()))
        row = result.scalar_one_or_none()
        return UserInDB.model_validate(row) if row else None

    async def create_user(self, user: UserInDB, worker: Optional[WorkerProfile] = None) -> UserInDB:
        self.db.add(db_models.User(
            id=user.id,
            email=user.email,
            password_hash=user.password_hash,
            name=user.name,
            role=user.role.value,
            phone=user.phone,
            address=user.address,
            occupation=user.occupation,
            is_active=user.is_active,
            created_at=user.created_at,
        ))
        if worker is not None:
            self.db.add(db_models.WorkerProfile(
                id=worker.id,
                name=worker.name,
                email=worker.email,
                phone=worker.phone,
                rating=worker.rating,
                total_ratings=worker.total_ratings,
                hourly_rate=worker.hourly_rate,
                advance_payment=worker.advance_payment,
                available_times=worker.available_times,
                previous_works=list(worker.previous_works),
                bio=worker.bio,
                experience=worker.experience,
                location=worker.location,
                verified=worker.verified,
                created_at=worker.created_at,
                services=[
                    db_models.WorkerService(service_type=s, position=i)
                    for i, s in enumerate(worker.service_types)
                ],
            ))
        await self.db.commit()
        return user

    async def update_user(self, user: UserInDB) -> UserInDB:
        row = await self.db.get(db_models.User, user.id)
        row.name = user.name
        row.phone = user.phone
        row.address = user.address
        row.occupation = user.occupation
        row.is_active = user.is_active
        await self.db.commit()
        return user

    async def list_users(self) -> List[UserInDB]:
        result = await self.db.execute(select(db_models.User).order_by(db_models.User.created_at))
        return [UserInDB.model_validate(row) for row in result.scalars().all()]

    # ─── Workers ─────────────────────────────────────────────────────

    async def get_worker(self, worker_id: str) -> Optional[WorkerProfile]:
        row = await self.db.get(db_models.WorkerProfile, worker_id)
        return _to_worker(row) if row else None

    async def list_workers(self) -> List[WorkerProfile]:
        result = await self.db.execute(
            select(db_models.WorkerProfile).order_by(db_models.WorkerProfile.created_at)
        )
        return [_to_worker(row) for row in result.scalars().all()]

    async def list_workers_by_service(self, service_type: str) -> List[WorkerProfile]:
        result = await self.db.execute(
            select(db_models.WorkerProfile)
            .join(db_models.WorkerProfile.services)
            .where(db_models.WorkerService.service_type == service_type)
            .order_by(db_models.WorkerProfile.created_at)
        )
        return [_to_worker(row) for row in result.scalars().unique().all()]

    async def save_worker(self, worker: WorkerProfile) -> WorkerProfile:
        row = await self.db.get(db_models.WorkerProfile, worker.id)
        row.name = worker.name
        row.phone = worker.phone
        row.rating = worker.rating
        row.total_ratings = worker.total_ratings
        row.hourly_rate = worker.hourly_rate
        row.advance_payment = worker.advance_payment
        row.available_times = worker.available_times
        row.previous_works = list(worker.previous_works)
        row.bio = worker.bio
        row.experience = worker.experience
        row.location = worker.location
        row.verified = worker.verified

        current = [s.service_type for s in row.services]
        if current != worker.service_types:
            row.services = [
                db_models.WorkerService(service_type=s, position=i)
                for i, s in enumerate(worker.service_types)
            ]
        # Reviews are append-only
        for review in worker.reviews[len(row.reviews):]:
            row.reviews.append(db_models.WorkerReview(
                user_id=review.user_id,
                rating=review.rating,
                review=review.review,
                created_at=review.created_at,
            ))
        await self.db.commit()
        return worker

    # ─── Service catalogue ───────────────────────────────────────────

    async def get_services(self) -> List[ServiceCategory]:
        result = await self.db.execute(
            select(db_models.ServiceCategory).order_by(db_models.ServiceCategory.position)
        )
        return [ServiceCategory.model_validate(row) for row in result.scalars().all()]

    async def save_services(self, services: List[ServiceCategory]) -> None:
        for position, service in enumerate(services):
            await self.db.merge(db_models.ServiceCategory(position=position, **service.model_dump()))
        await self.db.commit()

    # ─── Requests ────────────────────────────────────────────────────

    async def create_request(self, request: ServiceRequest) -> ServiceRequest:
        self.db.add(db_models.ServiceRequest(**_request_columns(request)))
        await self.db.commit()
        return request

    async def get_request(self, request_id: str) -> Optional[ServiceRequest]:
        row = await self.db.get(db_models.ServiceRequest, request_id)
        return ServiceRequest.model_validate(row) if row else None

    async def save_request(self, request: ServiceRequest) -> ServiceRequest:
        await self.db.merge(db_models.ServiceRequest(**_request_columns(request)))
        await self.db.commit()
        return request

    async def _list_requests(self, *criteria) -> List[ServiceRequest]:
        result = await self.db.execute(
            select(db_models.ServiceRequest)
            .where(*criteria)
            .order_by(db_models.ServiceRequest.created_at.desc())
        )
        return [ServiceRequest.model_validate(row) for row in result.scalars().all()]

    async def list_requests_for_user(self, user_id: str) -> List[ServiceRequest]:
        return await self._list_requests(db_models.ServiceRequest.user_id == user_id)

    async def list_requests_for_worker(self, worker_id: str) -> List[ServiceRequest]:
        return await self._list_requests(db_models.ServiceRequest.worker_id == worker_id)

    async def list_all_requests(self) -> List[ServiceRequest]:
        return await self._list_requests()
