import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import is_unique_violation
from app.models.car import Car, CarStatus
from app.repositories.cars import CarFilters, CarRepository
from app.repositories.orders import OrderRepository
from app.schemas.car import CarCreate, CarListQuery, CarUpdate
from app.services import lifecycle
from app.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DUPLICATE_PLATE_MESSAGE = "Já existe um carro com esta placa com status ativo ou inativo."


async def has_open_orders(db: AsyncSession, car_id: str) -> bool:
    return await OrderRepository(db).has_open_for_car(car_id)


@asynccontextmanager
async def _plate_guard(db: AsyncSession):
    """Commit on exit; a store-level plate collision becomes a conflict."""
    try:
        yield
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if not is_unique_violation(exc):
            raise
        # Lost a race against the partial unique index on live plates
        raise ConflictError(DUPLICATE_PLATE_MESSAGE) from exc


async def create_car(db: AsyncSession, payload: CarCreate) -> Car:
    repo = CarRepository(db)
    if payload.status != CarStatus.DELETED.value and await repo.find_live_by_plate(payload.plate):
        raise ConflictError(DUPLICATE_PLATE_MESSAGE)

    async with _plate_guard(db):
        car = await repo.create(payload.model_dump(exclude={"items"}), payload.items)
    logger.info("Car %s created with plate %s", car.id, car.plate)
    return car


@dataclass
class CarPage:
    cars: list[Car]
    total: int
    page: int
    page_size: int


async def list_cars(db: AsyncSession, query: CarListQuery) -> CarPage:
    sort_attribute, descending = lifecycle.parse_sort_key(
        query.order_by, lifecycle.CAR_SORT_FIELDS, default="createdAt_desc"
    )
    offset, limit = lifecycle.page_window(
        query.page, query.page_size or settings.default_page_size, settings.max_page_size
    )
    filters = CarFilters(
        brand=query.brand,
        min_year=query.min_year,
        max_year=query.max_year,
        min_price=query.min_price,
        max_price=query.max_price,
        status=query.status,
    )
    repo = CarRepository(db)
    cars = await repo.find_many(filters, sort_attribute, descending, offset, limit)
    if not cars:
        raise NotFoundError("Nenhum carro encontrado.")
    return CarPage(cars=cars, total=await repo.count(filters), page=query.page, page_size=limit)


async def get_car_by_id(db: AsyncSession, car_id: str) -> Car:
    car = await CarRepository(db).get(car_id)
    if car is None:
        raise NotFoundError("Carro não encontrado")
    return car


async def update_car(db: AsyncSession, car_id: str, payload: CarUpdate) -> Car:
    repo = CarRepository(db)
    car = await get_car_by_id(db, car_id)
    lifecycle.ensure_car_updatable(car.status)

    changes = payload.model_dump(exclude_unset=True, exclude={"items"})
    if "status" in changes:
        target = changes["status"]
        open_orders = lifecycle.leaves_service(car.status, target) and await has_open_orders(db, car.id)
        lifecycle.ensure_car_status_transition(car.status, target, open_orders)

    plate = changes.get("plate", car.plate)
    status = changes.get("status", car.status)
    if status != CarStatus.DELETED.value and await repo.find_live_by_plate(plate, exclude_id=car.id):
        raise ConflictError(DUPLICATE_PLATE_MESSAGE)

    async with _plate_guard(db):
        await repo.update(car, changes)
        if payload.items is not None:
            await repo.replace_items(car, payload.items)
    return car


async def delete_car(db: AsyncSession, car_id: str) -> Car:
    repo = CarRepository(db)
    car = await repo.get(car_id)
    if car is None:
        raise NotFoundError("Carro inexistente")

    open_orders = car.status != CarStatus.DELETED.value and await has_open_orders(db, car.id)
    lifecycle.ensure_car_deletable(car.status, open_orders)

    await repo.soft_delete(car)
    await db.commit()
    logger.info("Car %s marked as DELETED", car.id)
    return car
