import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.client import EMPTY_BODY_MESSAGE, ClientCreate, ClientResponse, ClientUpdate
from app.services import client_service
from app.utils.exceptions import AppException
from app.utils.response import error_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])

UNEXPECTED_MESSAGE = "An unexpected error occurred."


@router.post("", status_code=201)
async def create_client(payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    if not payload:
        return error_response(EMPTY_BODY_MESSAGE, 400)
    try:
        client = await client_service.create_client(db, ClientCreate.from_payload(payload))
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    except Exception:
        logger.exception("Failed to create client")
        return error_response(UNEXPECTED_MESSAGE, 500, key="message")
    return success_response(ClientResponse.model_validate(client).to_json(), status_code=201)


@router.get("")
async def list_clients(
    nome: str | None = None,
    order_by: list[str] | None = Query(default=None, alias="orderBy"),
    db: AsyncSession = Depends(get_db),
):
    try:
        clients = await client_service.list_clients(db, name=nome, order_by=order_by)
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    except Exception:
        logger.exception("Failed to list clients")
        return error_response(UNEXPECTED_MESSAGE, 500, key="message")
    return success_response([ClientResponse.model_validate(c).to_json() for c in clients])


@router.get("/{client_id}")
async def show_client(client_id: str, db: AsyncSession = Depends(get_db)):
    try:
        client = await client_service.show_client(db, client_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to fetch client %s", client_id)
        return error_response(UNEXPECTED_MESSAGE, 500, key="message")
    return success_response(ClientResponse.model_validate(client).to_json())


@router.put("/{client_id}")
async def update_client(client_id: str, payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    if not payload:
        return error_response(EMPTY_BODY_MESSAGE, 400)
    try:
        client = await client_service.update_client(db, client_id, ClientUpdate.from_payload(payload))
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    except Exception:
        logger.exception("Failed to update client %s", client_id)
        return error_response(UNEXPECTED_MESSAGE, 500, key="message")
    return success_response(ClientResponse.model_validate(client).to_json())


@router.delete("/{client_id}")
async def delete_client(client_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await client_service.delete_client(db, client_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to delete client %s", client_id)
        return error_response(UNEXPECTED_MESSAGE, 500, key="message")
    return success_response({"message": "Client deleted successfully"})
