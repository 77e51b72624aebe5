"""Account creation and credential checks shared by the API and the seeder."""
import logging
from typing import Optional
from fastapi import HTTPException
from app.core import security
from app.core.config import settings
from app.db.db_models import generate_uuid, utcnow
from app.db.repository import Repository
from app.models.user import UserCreate, UserInDB, UserRole
from app.models.worker import WorkerProfile

logger = logging.getLogger(__name__)


def build_worker_profile(user: UserInDB, user_in: UserCreate) -> WorkerProfile:
    """Initial worker profile; the occupation is always one of the service types."""
    service_types = list(user_in.service_types)
    if user_in.occupation and user_in.occupation not in service_types:
        service_types.insert(0, user_in.occupation)

    return WorkerProfile(
        id=user.id,
        user_id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        service_types=service_types,
        hourly_rate=user_in.hourly_rate if user_in.hourly_rate is not None else settings.DEFAULT_HOURLY_RATE,
        advance_payment=(
            user_in.advance_payment if user_in.advance_payment is not None
            else settings.DEFAULT_ADVANCE_PAYMENT
        ),
        available_times=user_in.available_times or settings.DEFAULT_AVAILABLE_TIMES,
        bio=user_in.bio,
        experience=user_in.experience,
        location=user_in.location,
        created_at=user.created_at,
    )


async def register_user(repo: Repository, user_in: UserCreate) -> UserInDB:
    """Create a user, plus a worker profile for workers."""
    email = user_in.email.lower()
    if await repo.get_user_by_email(email):
        raise HTTPException(status_code=400, detail="The user with this email already exists.")

    is_worker = user_in.role == UserRole.WORKER
    if is_worker and not (user_in.occupation or user_in.service_types):
        raise HTTPException(status_code=400, detail="Workers must specify an occupation.")

    occupation = (user_in.occupation or user_in.service_types[0]) if is_worker else ""
    user = UserInDB(
        id=generate_uuid(),
        email=email,
        name=user_in.name,
        role=user_in.role,
        phone=user_in.phone,
        address=user_in.address,
        occupation=occupation,
        password_hash=security.get_password_hash(user_in.password),
        created_at=utcnow(),
    )
    worker = build_worker_profile(user, user_in) if is_worker else None
    await repo.create_user(user, worker)
    logger.info(f"Registered {user.role.value} {user.email} ({user.id})")
    return user


async def authenticate(repo: Repository, email: str, password: str) -> Optional[UserInDB]:
    user = await repo.get_user_by_email(email.lower())
    if not user or not security.verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for {email}")
        return None
    return user
