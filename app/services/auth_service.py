import logging
from datetime import timedelta

import bcrypt
import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.auth import TokenIdentity
from app.utils.dates import utcnow
from app.utils.exceptions import AuthError

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def create_access_token(user: User) -> str:
    payload = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "exp": utcnow() + timedelta(minutes=settings.jwt_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenIdentity:
    """Verify signature and expiry. Raises ``AuthError`` (403) on any failure."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return TokenIdentity.model_validate(payload)
    except (jwt.PyJWTError, ValueError) as exc:
        raise AuthError("Invalid token.", status_code=403) from exc


async def authenticate_user(db: AsyncSession, email: str, password: str) -> str:
    user = await UserRepository(db).find_live_by_email(email)
    if user is None:
        logger.warning("Login rejected for unknown email %s", email)
        raise AuthError("User does not exist")
    if not verify_password(password, user.password_hash):
        logger.warning("Login rejected for %s: wrong password", email)
        raise AuthError("Invalid password")
    return create_access_token(user)
