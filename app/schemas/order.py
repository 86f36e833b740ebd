from datetime import date, datetime
from typing import ClassVar

from pydantic import ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.order import OrderStatus
from app.schemas import RULE_ERROR, PayloadModel, ResponseModel

_ORDER_MESSAGES = {
    "carId.missing": "O carro é obrigatório.",
    "clientId.missing": "O cliente é obrigatório.",
    "carId": "O identificador do carro deve ser um texto.",
    "clientId": "O identificador do cliente deve ser um texto.",
    "status.enum": "Status deve ser OPEN, APPROVED, CLOSED ou CANCELED.",
    "zipcode": "O CEP deve ser um texto.",
    "city": "A cidade deve ser um texto.",
    "state": "O estado deve ser um texto.",
    "totalValue": "O valor total deve ser um número não negativo.",
}


class OrderCreate(PayloadModel):
    car_id: str
    client_id: str
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    total_value: float | None = Field(default=None, ge=0)

    error_messages: ClassVar[dict[str, str]] = _ORDER_MESSAGES


class OrderUpdate(PayloadModel):
    model_config = ConfigDict(extra="forbid")

    status: OrderStatus | None = None
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    total_value: float | None = Field(default=None, ge=0)

    error_messages: ClassVar[dict[str, str]] = _ORDER_MESSAGES

    @classmethod
    def _message_for(cls, err: dict) -> str:
        if err["type"] == "extra_forbidden":
            return f"O campo {err['loc'][0]} não é permitido."
        return super()._message_for(err)

    @field_validator("status", "total_value", mode="before")
    @classmethod
    def not_null(cls, value, info):
        if value is None:
            raise PydanticCustomError(RULE_ERROR, f"O campo {info.field_name} não pode ser nulo.")
        return value


class OrderListQuery(PayloadModel):
    status: OrderStatus | None = None
    client_cpf: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    sort: str = "createdAt"
    order: str = "desc"
    page: int = 1
    limit: int = 10


class OrderResponse(ResponseModel):
    id: str
    car_id: str
    client_id: str
    status: str
    zipcode: str | None = None
    city: str | None = None
    state: str | None = None
    total_value: float
    created_at: datetime
    updated_at: datetime
