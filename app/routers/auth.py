from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.auth_service import authenticate_user
from app.utils.exceptions import AppException
from app.utils.response import error_response, success_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(payload: Any = Body(default=None), db: AsyncSession = Depends(get_db)):
    try:
        credentials = LoginRequest.from_payload(payload)
        token = await authenticate_user(db, credentials.email, credentials.password)
    except AppException as exc:
        return error_response(exc.message, exc.status_code, key="message")
    return success_response(LoginResponse(token=token).model_dump())
