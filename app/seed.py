import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import Role, User
from app.services.auth_service import hash_password

logger = logging.getLogger(__name__)


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(User).limit(1))
    if result.scalars().first() is not None:
        return

    session.add(User(
        email=settings.seed_admin_email,
        full_name=settings.seed_admin_name,
        password_hash=hash_password(settings.seed_admin_password),
        role=Role.ADMIN.value,
    ))
    await session.commit()
    logger.info("Seeded admin user %s", settings.seed_admin_email)
