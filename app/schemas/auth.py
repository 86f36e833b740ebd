from typing import ClassVar

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from app.schemas import RULE_ERROR, PayloadModel
from app.services.lifecycle import is_valid_email


class LoginRequest(PayloadModel):
    email: str
    password: str

    error_messages: ClassVar[dict[str, str]] = {
        "email.missing": "O email é obrigatório.",
        "password.missing": "A senha é obrigatória.",
        "password": "A senha é obrigatória.",
    }

    @field_validator("email", mode="before")
    @classmethod
    def email_rules(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError(RULE_ERROR, "O email é obrigatório.")
        if not is_valid_email(value):
            raise PydanticCustomError(RULE_ERROR, "Invalid email format")
        return value.strip()

    @field_validator("password", mode="before")
    @classmethod
    def password_rules(cls, value):
        if not isinstance(value, str) or not value:
            raise PydanticCustomError(RULE_ERROR, "A senha é obrigatória.")
        return value


class LoginResponse(BaseModel):
    token: str


class TokenIdentity(BaseModel):
    id: str
    email: str
    role: str
