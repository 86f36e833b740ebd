from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.utils.dates import utcnow


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict) -> User:
        user = User(**data)
        self.db.add(user)
        await self.db.flush()
        return user

    async def get_live(self, user_id: str) -> User | None:
        user = await self.db.get(User, user_id)
        if user is None or user.deleted_at is not None:
            return None
        return user

    async def find_live_by_email(self, email: str, exclude_id: str | None = None) -> User | None:
        stmt = select(User).where(User.email == email, User.deleted_at.is_(None))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()

    async def find_many(self) -> list[User]:
        stmt = select(User).where(User.deleted_at.is_(None)).order_by(User.created_at)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def update(self, user: User, changes: dict) -> User:
        for field, value in changes.items():
            setattr(user, field, value)
        await self.db.flush()
        return user

    async def soft_delete(self, user: User) -> User:
        user.deleted_at = utcnow()
        await self.db.flush()
        return user
