from datetime import date, datetime
from typing import ClassVar

from pydantic import field_validator
from pydantic_core import PydanticCustomError

from app.schemas import RULE_ERROR, PayloadModel, ResponseModel
from app.services.lifecycle import is_valid_cpf, is_valid_email

EMPTY_BODY_MESSAGE = "Corpo da requisição não está definido."

_CLIENT_MESSAGES = {
    "fullName.missing": "O nome é obrigatório.",
    "email.missing": "Invalid email format",
    "cpf.missing": "Invalid cpf format",
    "phone.missing": "O telefone é obrigatório.",
    "birthDate.missing": "A data de nascimento é obrigatória.",
    "birthDate.null": "A data de nascimento é obrigatória.",
    "fullName": "O nome deve ser um texto não vazio.",
    "email": "Invalid email format",
    "cpf": "Invalid cpf format",
    "phone": "O telefone deve ser um texto não vazio.",
    "birthDate": "A data de nascimento deve estar no formato AAAA-MM-DD.",
}


class _ClientFields(PayloadModel):
    error_messages: ClassVar[dict[str, str]] = _CLIENT_MESSAGES

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def email_format(cls, value):
        if not is_valid_email(value):
            raise PydanticCustomError(RULE_ERROR, "Invalid email format")
        return value.strip()

    @field_validator("cpf", mode="before", check_fields=False)
    @classmethod
    def cpf_format(cls, value):
        if not is_valid_cpf(value):
            raise PydanticCustomError(RULE_ERROR, "Invalid cpf format")
        return value

    @field_validator("full_name", "phone", mode="before", check_fields=False)
    @classmethod
    def not_blank(cls, value):
        if isinstance(value, str):
            value = value.strip()
        if not value:
            raise PydanticCustomError("blank", "vazio")
        return value

    @field_validator("birth_date", mode="before", check_fields=False)
    @classmethod
    def date_only(cls, value):
        # Accept full ISO timestamps sent by clients that serialize Date objects
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class ClientCreate(_ClientFields):
    full_name: str
    email: str
    cpf: str
    phone: str
    birth_date: date


class ClientUpdate(_ClientFields):
    full_name: str | None = None
    email: str | None = None
    cpf: str | None = None
    phone: str | None = None
    birth_date: date | None = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def birth_date_not_null(cls, value):
        if value is None:
            raise PydanticCustomError("null", "nulo")
        return value


class ClientResponse(ResponseModel):
    id: str
    full_name: str
    email: str
    cpf: str
    phone: str
    birth_date: date
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
