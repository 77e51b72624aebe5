import asyncio
import sys
import os

# Add parent dir to path to import app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from app.db.database import engine
from app.db.db_models import Base


async def reset_db():
    """Drop and recreate every table, including the key/value store."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    print("Dropping and recreating all tables...")
    asyncio.run(reset_db())
    print("Database reset complete.")
