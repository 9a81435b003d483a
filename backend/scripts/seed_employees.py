"""
Seed portal employees for development.
Run: python -m scripts.seed_employees  (from backend/)
"""

import asyncio

from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.db.session import async_session, create_schema, get_engine
from app.repositories.employees import ensure_employee

logger = get_logger("scripts.seed_employees")

SEED_EMPLOYEES = [
    {
        "username": settings.SEED_ADMIN_USERNAME,
        "password": settings.SEED_ADMIN_PASSWORD,  # Change in production!
        "full_name": settings.SEED_ADMIN_FULL_NAME,
    },
]


async def seed() -> int:
    """Insert seed employees that do not exist yet. Returns how many were created."""
    if settings.AUTO_CREATE_SCHEMA:
        await create_schema(get_engine())

    created_count = 0
    async with async_session() as session:
        for data in SEED_EMPLOYEES:
            employee, created = await ensure_employee(session, **data)
            if created:
                created_count += 1
                logger.info("Created employee", username=employee.username)
            else:
                logger.info("Employee already present", username=employee.username)
        await session.commit()
    await get_engine().dispose()
    return created_count


if __name__ == "__main__":
    setup_logging("INFO")
    count = asyncio.run(seed())
    print(f"Seeded {count} employee(s).")
