from dataclasses import dataclass

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.car import Car, CarStatus, Item


@dataclass
class CarFilters:
    brand: str | None = None
    min_year: int | None = None
    max_year: int | None = None
    min_price: float | None = None
    max_price: float | None = None
    status: str | None = None


class CarRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: dict, item_names: list[str]) -> Car:
        car = Car(**data)
        car.items = [Item(name=name, position=index) for index, name in enumerate(item_names)]
        self.db.add(car)
        await self.db.flush()
        return car

    async def get(self, car_id: str) -> Car | None:
        return await self.db.get(Car, car_id)

    async def find_live_by_plate(self, plate: str, exclude_id: str | None = None) -> Car | None:
        """Non-deleted car holding ``plate``, other than ``exclude_id``."""
        stmt = select(Car).where(Car.plate == plate, Car.status != CarStatus.DELETED.value)
        if exclude_id is not None:
            stmt = stmt.where(Car.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalars().first()

    def _filtered(self, stmt: Select, filters: CarFilters) -> Select:
        if filters.status:
            stmt = stmt.where(Car.status == filters.status)
        else:
            stmt = stmt.where(Car.status != CarStatus.DELETED.value)
        if filters.brand:
            stmt = stmt.where(Car.brand.icontains(filters.brand, autoescape=True))
        if filters.min_year is not None:
            stmt = stmt.where(Car.year >= filters.min_year)
        if filters.max_year is not None:
            stmt = stmt.where(Car.year <= filters.max_year)
        if filters.min_price is not None:
            stmt = stmt.where(Car.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Car.price <= filters.max_price)
        return stmt

    async def find_many(
        self,
        filters: CarFilters,
        sort_attribute: str,
        descending: bool,
        offset: int,
        limit: int,
    ) -> list[Car]:
        column = getattr(Car, sort_attribute)
        stmt = self._filtered(select(Car), filters)
        stmt = stmt.order_by(column.desc() if descending else column.asc(), Car.id)
        result = await self.db.execute(stmt.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def count(self, filters: CarFilters) -> int:
        stmt = self._filtered(select(func.count()).select_from(Car), filters)
        return (await self.db.execute(stmt)).scalar_one()

    async def update(self, car: Car, changes: dict) -> Car:
        for field, value in changes.items():
            setattr(car, field, value)
        await self.db.flush()
        return car

    async def soft_delete(self, car: Car) -> Car:
        car.status = CarStatus.DELETED.value
        await self.db.flush()
        return car

    async def replace_items(self, car: Car, names: list[str]) -> None:
        """Drop every item of ``car`` and recreate ``names`` in order.

        Runs inside the caller's transaction.
        """
        car.items.clear()
        await self.db.flush()
        car.items.extend(Item(name=name, position=index) for index, name in enumerate(names))
        await self.db.flush()
