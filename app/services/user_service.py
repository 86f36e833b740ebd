import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import is_unique_violation
from app.models.user import User
from app.repositories.users import UserRepository
from app.schemas.user import UserCreate, UserUpdate
from app.services.auth_service import hash_password
from app.utils.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

EMAIL_IN_USE_MESSAGE = "E-mail já está em uso."
EMAIL_TAKEN_MESSAGE = "Email já está sendo utilizado"


async def create_user(db: AsyncSession, payload: UserCreate) -> User:
    repo = UserRepository(db)
    if await repo.find_live_by_email(payload.email):
        raise ConflictError(EMAIL_IN_USE_MESSAGE)

    data = payload.model_dump(exclude={"password"})
    data["password_hash"] = hash_password(payload.password)
    try:
        user = await repo.create(data)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if not is_unique_violation(exc):
            raise
        raise ConflictError(EMAIL_IN_USE_MESSAGE) from exc
    logger.info("User %s created", user.id)
    return user


async def list_users(db: AsyncSession) -> list[User]:
    users = await UserRepository(db).find_many()
    if not users:
        raise NotFoundError("Usuários não encontrados.")
    return users


async def get_user_by_id(db: AsyncSession, user_id: str) -> User:
    user = await UserRepository(db).get_live(user_id)
    if user is None:
        raise NotFoundError("Usuário não encontrado")
    return user


async def update_user(db: AsyncSession, user_id: str, payload: UserUpdate) -> User:
    repo = UserRepository(db)
    user = await repo.get_live(user_id)
    if user is None:
        raise NotFoundError("Usuário não encontrado.")

    changes = payload.model_dump(exclude_unset=True)
    if "email" in changes and await repo.find_live_by_email(changes["email"], exclude_id=user.id):
        raise ConflictError(EMAIL_TAKEN_MESSAGE)
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))

    try:
        await repo.update(user, changes)
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if not is_unique_violation(exc):
            raise
        raise ConflictError(EMAIL_TAKEN_MESSAGE) from exc
    return user


async def delete_user(db: AsyncSession, user_id: str) -> None:
    repo = UserRepository(db)
    user = await repo.get_live(user_id)
    if user is None:
        raise NotFoundError("Usuário não encontrado")

    await repo.soft_delete(user)
    await db.commit()
    logger.info("User %s soft-deleted", user.id)
