import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.car import Car
from app.models.client import Client
from app.models.order import Order, OrderStatus
from app.repositories.cars import CarRepository
from app.repositories.clients import ClientRepository
from app.repositories.orders import OrderFilters, OrderRepository
from app.schemas.order import OrderCreate, OrderListQuery, OrderUpdate
from app.services import lifecycle
from app.utils.dates import end_of_day, start_of_day
from app.utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND_MESSAGE = "Pedido não encontrado"


async def _orderable_car_and_client(db: AsyncSession, car_id: str, client_id: str) -> tuple[Car, Client]:
    """Both ends of an OPEN order: an ACTIVED car and a live client."""
    car = await CarRepository(db).get(car_id)
    lifecycle.ensure_car_orderable(car.status if car is not None else None)

    client = await ClientRepository(db).get(client_id)
    if client is None or client.deleted_at is not None:
        raise NotFoundError("Cliente não encontrado")
    return car, client


async def create_order(db: AsyncSession, payload: OrderCreate) -> Order:
    car, _ = await _orderable_car_and_client(db, payload.car_id, payload.client_id)

    data = payload.model_dump()
    if data["total_value"] is None:
        data["total_value"] = car.price
    order = await OrderRepository(db).create({**data, "status": OrderStatus.OPEN.value})
    await db.commit()
    logger.info("Order %s opened for car %s", order.id, car.id)
    return order


async def list_orders(db: AsyncSession, query: OrderListQuery) -> list[Order]:
    sort_attribute, _ = lifecycle.parse_sort_key(query.sort, lifecycle.ORDER_SORT_FIELDS, default="createdAt")
    descending = lifecycle.parse_direction(query.order)
    offset, limit = lifecycle.page_window(query.page, query.limit, settings.max_page_size)
    if query.start_date and query.end_date and query.start_date > query.end_date:
        raise ValidationError("A data inicial deve ser anterior à data final.")

    filters = OrderFilters(
        status=query.status,
        client_cpf=query.client_cpf,
        start=start_of_day(query.start_date) if query.start_date else None,
        end=end_of_day(query.end_date) if query.end_date else None,
    )
    return await OrderRepository(db).find_many(filters, sort_attribute, descending, offset, limit)


async def get_order_by_id(db: AsyncSession, order_id: str) -> Order:
    order = await OrderRepository(db).get(order_id)
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND_MESSAGE)
    return order


async def update_order(db: AsyncSession, order_id: str, payload: OrderUpdate) -> Order:
    order = await get_order_by_id(db, order_id)
    lifecycle.ensure_order_updatable(order.status)

    changes = payload.model_dump(exclude_unset=True)
    if lifecycle.reopens_order(order.status, changes.get("status")):
        await _orderable_car_and_client(db, order.car_id, order.client_id)

    await OrderRepository(db).update(order, changes)
    await db.commit()
    return order


async def delete_order(db: AsyncSession, order_id: str) -> Order:
    """Cancel the order; rows are never removed."""
    order = await get_order_by_id(db, order_id)
    lifecycle.ensure_order_cancelable(order.status)

    await OrderRepository(db).update(order, {"status": OrderStatus.CANCELED.value})
    await db.commit()
    logger.info("Order %s canceled", order.id)
    return order
