"""Seed script: populates the user directory and request-type catalog with demo data.

Run with ``python -m approvaldesk.seed``. Existing usernames and type names are
left untouched, so it is safe to run repeatedly.
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from approvaldesk.core.config import settings
from approvaldesk.core.database import AsyncSessionLocal, engine
from approvaldesk.models.base import Base
from approvaldesk.schemas.directory import RequestTypeCreate, UserCreate
from approvaldesk.services import directory_service
from approvaldesk.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

DEMO_USERS = [
    UserCreate(username="john.doe", full_name="John Doe", email="john.doe@example.com"),
    UserCreate(username="jane.smith", full_name="Jane Smith", email="jane.smith@example.com"),
    UserCreate(username="carlos.ruiz", full_name="Carlos Ruiz", email="carlos.ruiz@example.com"),
    UserCreate(username="ana.gomez", full_name="Ana Gomez", email=None),
]

DEMO_REQUEST_TYPES = [
    RequestTypeCreate(name="DEPLOYMENT", description="Deployment of a service to a shared environment"),
    RequestTypeCreate(name="ACCESS", description="Access to a system, repository or dataset"),
    RequestTypeCreate(name="PURCHASE", description="Hardware or software purchase"),
    RequestTypeCreate(name="TIME_OFF", description="Vacation or leave request"),
]


async def seed_directory(db: AsyncSession) -> dict[str, int]:
    """Insert missing demo users and request types. Returns counts of rows created."""
    counts = {"users": 0, "request_types": 0}

    for data in DEMO_USERS:
        if await directory_service.get_user_by_username(db, data.username) is None:
            await directory_service.create_user(db, data)
            counts["users"] += 1

    for data in DEMO_REQUEST_TYPES:
        if await directory_service.get_request_type_by_name(db, data.name) is None:
            await directory_service.create_request_type(db, data)
            counts["request_types"] += 1

    return counts


async def main() -> None:
    configure_logging(settings.log_level, settings.log_format)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as db:
        async with db.begin():
            counts = await seed_directory(db)
    logger.info("Seeded %d users and %d request types", counts["users"], counts["request_types"])
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
