import asyncio
from app.core.config import settings
from app.db.database import AsyncSessionLocal
from app.db.repository import build_repository


async def check_users():
    async with AsyncSessionLocal() as db:
        repo = build_repository(db)
        users = await repo.list_users()
        print(f"{len(users)} users in '{settings.STORAGE_BACKEND}' store")
        for u in users:
            print(f"Email: {u.email}, Role: {u.role.value}, Active: {u.is_active}")

if __name__ == '__main__':
    asyncio.run(check_users())
