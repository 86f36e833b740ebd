from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.utils.dates import utcnow


class ClientRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict) -> Client:
        client = Client(**data)
        self.db.add(client)
        await self.db.flush()
        return client

    async def get(self, client_id: str) -> Client | None:
        return await self.db.get(Client, client_id)

    async def find_by_cpf_or_email(self, cpf: str | None, email: str | None, exclude_id: str | None = None) -> Client | None:
        """Any client, soft-deleted ones included, already using ``cpf`` or ``email``."""
        conditions = []
        if cpf:
            conditions.append(Client.cpf == cpf)
        if email:
            conditions.append(Client.email == email)
        if not conditions:
            return None
        stmt = select(Client).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(Client.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()

    async def find_many(self, name: str | None = None, include_deleted: bool = False) -> list[Client]:
        stmt = select(Client)
        if not include_deleted:
            stmt = stmt.where(Client.deleted_at.is_(None))
        if name:
            stmt = stmt.where(Client.full_name.icontains(name, autoescape=True))
        result = await self.db.execute(stmt.order_by(Client.created_at))
        return list(result.scalars().all())

    async def update(self, client: Client, changes: dict) -> Client:
        for field, value in changes.items():
            setattr(client, field, value)
        await self.db.flush()
        return client

    async def soft_delete(self, client: Client) -> Client:
        client.deleted_at = utcnow()
        await self.db.flush()
        return client
