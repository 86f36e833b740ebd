from datetime import datetime
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.user import Role
from app.schemas import RULE_ERROR, PayloadModel, ResponseModel
from app.services.lifecycle import is_valid_email

NAME_EMPTY = "O nome não pode ser vazio."
NAME_NOT_STRING = "O nome deve ser uma string."
EMAIL_INVALID = "O email deve ser válido."
PASSWORD_TOO_SHORT = "A senha deve ter pelo menos 6 caracteres."

_USER_MESSAGES = {
    "fullName.missing": "O nome é obrigatório.",
    "email.missing": "O email é obrigatório.",
    "password.missing": "A senha é obrigatória.",
    "role.enum": "O perfil deve ser USER ou ADMIN.",
}


class _UserFields(PayloadModel):
    error_messages: ClassVar[dict[str, str]] = _USER_MESSAGES

    @field_validator("full_name", mode="before", check_fields=False)
    @classmethod
    def name_rules(cls, value):
        if value is None:
            raise PydanticCustomError(RULE_ERROR, NAME_EMPTY)
        if not isinstance(value, str):
            raise PydanticCustomError(RULE_ERROR, NAME_NOT_STRING)
        if not value.strip():
            raise PydanticCustomError(RULE_ERROR, NAME_EMPTY)
        return value.strip()

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def email_rules(cls, value):
        if not is_valid_email(value):
            raise PydanticCustomError(RULE_ERROR, EMAIL_INVALID)
        return value.strip()

    @field_validator("password", mode="before", check_fields=False)
    @classmethod
    def password_rules(cls, value):
        if not isinstance(value, str) or len(value) < 6:
            raise PydanticCustomError(RULE_ERROR, PASSWORD_TOO_SHORT)
        return value


class UserCreate(_UserFields):
    full_name: str
    email: str
    password: str
    role: Role = Field(default=Role.USER, validate_default=True)


class UserUpdate(_UserFields):
    full_name: str | None = None
    email: str | None = None
    password: str | None = None


class UserResponse(ResponseModel):
    id: str
    email: str
    full_name: str
    role: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
