import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.car import CarCreate, CarListQuery, CarResponse, CarUpdate
from app.services import car_service
from app.utils.exceptions import AppException
from app.utils.response import error_response, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cars", tags=["cars"])


@router.post("", status_code=201)
async def create_car(payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        car = await car_service.create_car(db, CarCreate.from_payload(payload))
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception as exc:
        logger.exception("Failed to create car")
        return error_response("Erro ao criar carro", 500, key="message", details=str(exc))
    return success_response(CarResponse.model_validate(car).to_json(), status_code=201)


@router.get("")
async def list_cars(
    brand: str | None = None,
    min_year: str | None = Query(default=None, alias="minYear"),
    max_year: str | None = Query(default=None, alias="maxYear"),
    min_price: str | None = Query(default=None, alias="minPrice"),
    max_price: str | None = Query(default=None, alias="maxPrice"),
    status: str | None = None,
    order_by: str | None = Query(default=None, alias="orderBy"),
    page: str | None = None,
    page_size: str | None = Query(default=None, alias="pageSize"),
    db: AsyncSession = Depends(get_db),
):
    try:
        params = {
            "brand": brand,
            "min_year": min_year,
            "max_year": max_year,
            "min_price": min_price,
            "max_price": max_price,
            "status": status,
            "order_by": order_by,
            "page": page,
            "page_size": page_size,
        }
        query = CarListQuery.from_payload({k: v for k, v in params.items() if v is not None})
        result = await car_service.list_cars(db, query)
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    except Exception as exc:
        logger.exception("Failed to list cars")
        return error_response("Erro ao listar carros", 500, key="message", details=str(exc))
    return success_response({
        "cars": [CarResponse.model_validate(car).to_json() for car in result.cars],
        "total": result.total,
        "page": result.page,
        "pageSize": result.page_size,
    })


@router.get("/{car_id}")
async def get_car(car_id: str, db: AsyncSession = Depends(get_db)):
    try:
        car = await car_service.get_car_by_id(db, car_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception as exc:
        logger.exception("Failed to fetch car %s", car_id)
        return error_response("Erro ao buscar carro", 500, key="message", details=str(exc))
    return success_response(CarResponse.model_validate(car).to_json())


@router.put("/{car_id}")
async def update_car(car_id: str, payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        car = await car_service.update_car(db, car_id, CarUpdate.from_payload(payload))
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to update car %s", car_id)
        return error_response("Erro interno.", 500)
    return success_response(CarResponse.model_validate(car).to_json())


@router.delete("/{car_id}")
async def delete_car(car_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await car_service.delete_car(db, car_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    except Exception as exc:
        logger.exception("Failed to delete car %s", car_id)
        return error_response("Erro ao excluir o carro", 500, key="message", details=str(exc))
    return success_response({"message": "Carro marcado como 'DELETED' com sucesso"})
