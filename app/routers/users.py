import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services import user_service
from app.utils.exceptions import AppException, ValidationError
from app.utils.response import error_response, success_response, validation_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

INTERNAL_ERROR = "Erro interno."


@router.post("/create", status_code=201)
async def create_user(payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        user = await user_service.create_user(db, UserCreate.from_payload(payload))
    except ValidationError as exc:
        return validation_error_response(exc.errors)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to create user")
        return error_response(INTERNAL_ERROR, 500)
    return success_response(UserResponse.model_validate(user).to_json(), status_code=201)


@router.get("/")
async def list_users(db: AsyncSession = Depends(get_db)):
    try:
        users = await user_service.list_users(db)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to list users")
        return error_response(INTERNAL_ERROR, 500)
    return success_response([UserResponse.model_validate(u).to_json() for u in users])


@router.get("/{user_id}")
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    try:
        user = await user_service.get_user_by_id(db, user_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to fetch user %s", user_id)
        return error_response(INTERNAL_ERROR, 500)
    return success_response(UserResponse.model_validate(user).to_json())


@router.patch("/update/{user_id}")
async def update_user(user_id: str, payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        user = await user_service.update_user(db, user_id, UserUpdate.from_payload(payload))
    except ValidationError as exc:
        return validation_error_response(exc.errors)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to update user %s", user_id)
        return error_response(INTERNAL_ERROR, 500)
    return success_response({"updatedUser": UserResponse.model_validate(user).to_json()})


@router.delete("/delete/{user_id}", status_code=204)
async def delete_user(user_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await user_service.delete_user(db, user_id)
    except AppException as exc:
        return error_response(exc.message, exc.status_code)
    except Exception:
        logger.exception("Failed to delete user %s", user_id)
        return error_response(INTERNAL_ERROR, 500)
    return Response(status_code=204)
