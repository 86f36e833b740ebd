from datetime import datetime
from typing import Any, ClassVar

from pydantic import AliasChoices, Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.car import CarStatus
from app.schemas import RULE_ERROR, PayloadModel, ResponseModel
from app.services.lifecycle import CAR_STATUS_MESSAGE

_EMPTY_MESSAGES = {
    "plate": "A placa não pode estar vazia.",
    "brand": "A marca não pode estar vazia.",
    "model": "O modelo não pode estar vazio.",
}

_CAR_MESSAGES = {
    "plate.missing": "A placa é obrigatória.",
    "brand.missing": "A marca é obrigatória.",
    "model.missing": "O modelo é obrigatório.",
    "plate.string_type": "A placa deve ser um texto.",
    "brand.string_type": "A marca deve ser um texto.",
    "model.string_type": "O modelo deve ser um texto.",
    "status.enum": CAR_STATUS_MESSAGE,
    "km": "A quilometragem deve ser um número inteiro não negativo.",
    "year": "O ano deve ser um número inteiro válido.",
    "price": "O preço deve ser um número não negativo.",
    "items": "Os itens devem ser uma lista de nomes.",
    "Items": "Os itens devem ser uma lista de nomes.",
}


def _require_text(value: Any, field: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError(RULE_ERROR, _EMPTY_MESSAGES[field])
    return value.strip() if isinstance(value, str) else value


def _clean_items(names: list[str] | None) -> list[str] | None:
    if names is None:
        return None
    cleaned = [name.strip() for name in names]
    if any(not name for name in cleaned):
        raise PydanticCustomError(RULE_ERROR, "O nome do item não pode estar vazio.")
    return cleaned


class CarCreate(PayloadModel):
    plate: str
    brand: str
    model: str
    km: int = Field(default=0, ge=0)
    year: int | None = Field(default=None, ge=1886, le=2100)
    price: float = Field(default=0.0, ge=0)
    status: CarStatus = Field(default=CarStatus.ACTIVED, validate_default=True)
    items: list[str] = Field(default_factory=list, validation_alias=AliasChoices("items", "Items"))

    error_messages: ClassVar[dict[str, str]] = _CAR_MESSAGES

    @field_validator("plate", "brand", "model", mode="before")
    @classmethod
    def not_empty(cls, value, info):
        return _require_text(value, info.field_name)

    @field_validator("items")
    @classmethod
    def item_names(cls, value):
        return _clean_items(value)


class CarUpdate(PayloadModel):
    plate: str | None = None
    brand: str | None = None
    model: str | None = None
    km: int | None = Field(default=None, ge=0)
    year: int | None = Field(default=None, ge=1886, le=2100)
    price: float | None = Field(default=None, ge=0)
    status: CarStatus | None = None
    items: list[str] | None = Field(default=None, validation_alias=AliasChoices("items", "Items"))

    error_messages: ClassVar[dict[str, str]] = _CAR_MESSAGES

    @field_validator("plate", "brand", "model", mode="before")
    @classmethod
    def not_empty(cls, value, info):
        return _require_text(value, info.field_name)

    @field_validator("status", mode="before")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise PydanticCustomError(RULE_ERROR, CAR_STATUS_MESSAGE)
        return value

    @field_validator("km", "price", mode="before")
    @classmethod
    def number_not_null(cls, value):
        # Absent means unchanged; an explicit null would clear a NOT NULL column
        if value is None:
            raise PydanticCustomError("null", "nulo")
        return value

    @field_validator("items")
    @classmethod
    def item_names(cls, value):
        return _clean_items(value)


class CarListQuery(PayloadModel):
    brand: str | None = None
    min_year: int | None = None
    max_year: int | None = None
    min_price: float | None = None
    max_price: float | None = None
    status: CarStatus | None = None
    order_by: str | None = None
    page: int = 1
    page_size: int | None = None


class ItemResponse(ResponseModel):
    id: str
    name: str


class CarResponse(ResponseModel):
    id: str
    plate: str
    brand: str
    model: str
    km: int
    year: int | None = None
    price: float
    status: str
    items: list[ItemResponse] = []
    created_at: datetime
    updated_at: datetime
