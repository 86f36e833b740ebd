from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.models.order import Order, OrderStatus


@dataclass
class OrderFilters:
    status: str | None = None
    client_cpf: str | None = None
    start: datetime | None = None
    end: datetime | None = None


class OrderRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict) -> Order:
        order = Order(**data)
        self.db.add(order)
        await self.db.flush()
        return order

    async def get(self, order_id: str) -> Order | None:
        return await self.db.get(Order, order_id)

    async def has_open_for_car(self, car_id: str) -> bool:
        stmt = select(Order.id).where(Order.car_id == car_id, Order.status == OrderStatus.OPEN.value)
        return (await self.db.execute(stmt.limit(1))).first() is not None

    async def has_open_for_client(self, client_id: str) -> bool:
        stmt = select(Order.id).where(Order.client_id == client_id, Order.status == OrderStatus.OPEN.value)
        return (await self.db.execute(stmt.limit(1))).first() is not None

    def _filtered(self, stmt: Select, filters: OrderFilters) -> Select:
        if filters.status:
            stmt = stmt.where(Order.status == filters.status)
        if filters.client_cpf:
            stmt = stmt.join(Client, Client.id == Order.client_id).where(Client.cpf == filters.client_cpf)
        if filters.start is not None:
            stmt = stmt.where(Order.created_at >= filters.start)
        if filters.end is not None:
            stmt = stmt.where(Order.created_at <= filters.end)
        return stmt

    async def find_many(
        self,
        filters: OrderFilters,
        sort_attribute: str,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[Order]:
        column = getattr(Order, sort_attribute)
        stmt = self._filtered(select(Order), filters)
        stmt = stmt.order_by(column.desc() if descending else column.asc(), Order.id)
        result = await self.db.execute(stmt.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def update(self, order: Order, changes: dict) -> Order:
        for field, value in changes.items():
            setattr(order, field, value)
        await self.db.flush()
        return order
