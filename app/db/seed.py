"""Seed the store with the service catalogue, an admin and demo workers."""
import logging
from app.core.config import settings
from app.db.repository import Repository
from app.models.user import UserCreate, UserRole
from app.services.account_service import register_user

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

WORKERS = [
    {
        "name": "Ravi Kumar",
        "email": "ravi.plumber@example.com",
        "phone": "9876543210",
        "occupation": "plumber",
        "bio": "Certified plumber specializing in leak repairs and pipe fitting.",
        "experience": "8 years",
        "location": "Hyderabad",
    },
    {
        "name": "Sita Rao",
        "email": "sita.electrician@example.com",
        "phone": "9876543211",
        "occupation": "electrician",
        "bio": "Residential wiring, fan and light installations, MCB repairs.",
        "experience": "6 years",
        "location": "Hyderabad",
    },
    {
        "name": "Amit Sharma",
        "email": "amit.carpenter@example.com",
        "phone": "9876543212",
        "occupation": "carpenter",
        "bio": "Furniture repair, assembly, and custom woodwork.",
        "experience": "10 years",
        "location": "Secunderabad",
    },
]


async def seed_data(repo: Repository):
    """Seed the store. Safe to run on every startup."""
    logger.info("Starting database seed...")

    # 1. Service catalogue
    services = await repo.list_services()
    logger.info(f"Service catalogue has {len(services)} categories.")

    # 2. Admin account
    if not await repo.get_user_by_email(settings.ADMIN_EMAIL.lower()):
        await register_user(repo, UserCreate(
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            name="Admin User",
            role=UserRole.ADMIN,
            phone="+1234567890",
        ))
        logger.info(f"Seeded admin: {settings.ADMIN_EMAIL}")

    # 3. Demo workers
    for worker_data in WORKERS:
        if await repo.get_user_by_email(worker_data["email"]):
            continue
        await register_user(repo, UserCreate(
            password=DEMO_PASSWORD,
            role=UserRole.WORKER,
            **worker_data,
        ))
        logger.info(f"Seeded worker: {worker_data['name']}")

    logger.info("Database seeding completed.")
