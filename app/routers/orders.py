import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.order import OrderCreate, OrderListQuery, OrderResponse, OrderUpdate
from app.services import order_service
from app.utils.exceptions import AppException, ValidationError
from app.utils.response import error_response, success_response, validation_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
async def create_order(payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        order = await order_service.create_order(db, OrderCreate.from_payload(payload))
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to create order")
        return error_response("Erro ao criar pedido", 500, key="message")
    return success_response(OrderResponse.model_validate(order).to_json(), status_code=201)


@router.get("")
async def list_orders(
    status: str | None = None,
    client_cpf: str | None = Query(default=None, alias="clientCpf"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    sort: str | None = None,
    order: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    db: AsyncSession = Depends(get_db),
):
    try:
        params = {
            "status": status,
            "client_cpf": client_cpf,
            "start_date": start_date,
            "end_date": end_date,
            "sort": sort,
            "order": order,
            "page": page,
            "limit": limit,
        }
        query = OrderListQuery.from_payload({k: v for k, v in params.items() if v is not None})
        orders = await order_service.list_orders(db, query)
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    except Exception:
        logger.exception("Failed to list orders")
        return error_response("Erro ao listar pedidos", 500, key="message")
    return success_response([OrderResponse.model_validate(o).to_json() for o in orders])


@router.get("/{order_id}")
async def get_order(order_id: str, db: AsyncSession = Depends(get_db)):
    try:
        order = await order_service.get_order_by_id(db, order_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to fetch order %s", order_id)
        return error_response("Erro ao buscar pedido", 500, key="message")
    return success_response(OrderResponse.model_validate(order).to_json())


@router.put("/{order_id}")
async def update_order(order_id: str, payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        changes = OrderUpdate.from_payload(payload)
    except ValidationError as exc:
        return validation_error_response(exc.errors)
    try:
        order = await order_service.update_order(db, order_id, changes)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to update order %s", order_id)
        return error_response("Erro ao atualizar pedido", 500, key="message")
    return success_response(OrderResponse.model_validate(order).to_json())


@router.delete("/{order_id}")
async def delete_order(order_id: str, db: AsyncSession = Depends(get_db)):
    try:
        order = await order_service.delete_order(db, order_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to cancel order %s", order_id)
        return error_response("Erro ao cancelar pedido", 500, key="message")
    return success_response(OrderResponse.model_validate(order).to_json())
