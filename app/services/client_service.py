import logging
from contextlib import asynccontextmanager
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import is_unique_violation
from app.models.client import Client
from app.repositories.clients import ClientRepository
from app.repositories.orders import OrderRepository
from app.schemas.client import ClientCreate, ClientUpdate
from app.services import lifecycle
from app.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DUPLICATE_CLIENT_MESSAGE = "Client already exist"


@asynccontextmanager
async def _unique_guard(db: AsyncSession):
    try:
        yield
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if not is_unique_violation(exc):
            raise
        raise ConflictError(DUPLICATE_CLIENT_MESSAGE) from exc


async def create_client(db: AsyncSession, payload: ClientCreate) -> Client:
    repo = ClientRepository(db)
    # Uniqueness is checked against every client, soft-deleted ones included
    if await repo.find_by_cpf_or_email(payload.cpf, payload.email):
        raise ConflictError(DUPLICATE_CLIENT_MESSAGE)

    async with _unique_guard(db):
        client = await repo.create(payload.model_dump())
    logger.info("Client %s created", client.id)
    return client


async def list_clients(
    db: AsyncSession,
    name: str | None = None,
    order_by: str | Sequence[str] | None = None,
) -> list[Client]:
    keys = lifecycle.parse_client_order(order_by)
    include_deleted = lifecycle.DELETED_FIRST in keys
    clients = await ClientRepository(db).find_many(name=name, include_deleted=include_deleted)
    return lifecycle.sort_clients(clients, keys)


async def show_client(db: AsyncSession, client_id: str) -> Client:
    client = await ClientRepository(db).get(client_id)
    if client is None:
        raise NotFoundError("Client Not Found")
    return client


async def update_client(db: AsyncSession, client_id: str, payload: ClientUpdate) -> Client:
    repo = ClientRepository(db)
    client = await repo.get(client_id)
    if client is None:
        raise NotFoundError("Client not found")

    changes = payload.model_dump(exclude_unset=True)
    if ("cpf" in changes or "email" in changes) and await repo.find_by_cpf_or_email(
        changes.get("cpf"), changes.get("email"), exclude_id=client.id
    ):
        raise ConflictError(DUPLICATE_CLIENT_MESSAGE)

    async with _unique_guard(db):
        await repo.update(client, changes)
    return client


async def delete_client(db: AsyncSession, client_id: str) -> Client:
    repo = ClientRepository(db)
    client = await repo.get(client_id)
    if client is None:
        raise NotFoundError("Client Not Found")

    deleted = client.deleted_at is not None
    open_orders = not deleted and await OrderRepository(db).has_open_for_client(client.id)
    lifecycle.ensure_client_deletable(deleted, open_orders)

    await repo.soft_delete(client)
    await db.commit()
    logger.info("Client %s soft-deleted", client.id)
    return client
