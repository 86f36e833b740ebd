"""Entity lifecycle rules.

Pure decisions over entity state: no database access happens here. Services
fetch the state, ask these functions whether a mutation is allowed and then
persist the outcome.
"""
import re
from collections.abc import Iterable, Sequence
from typing import Any

from email_validator import EmailNotValidError, validate_email

from app.models.car import CarStatus
from app.models.order import OrderStatus
from app.utils.exceptions import BlockedTransitionError, NotFoundError, ValidationError

CAR_STATUS_MESSAGE = "Status deve ser ACTIVED, INACTIVED ou DELETED."
OPEN_ORDERS_MESSAGE = "Não é possível excluir o carro. Há pedidos em aberto."
DEACTIVATE_OPEN_ORDERS_MESSAGE = "Não é possível desativar o carro. Há pedidos em aberto."
DELETED_CAR_UPDATE_MESSAGE = "Carros com status excluído não podem ser atualizados"
CAR_ALREADY_DELETED_MESSAGE = "Este carro já está excluído."
CLIENT_OPEN_ORDERS_MESSAGE = "Não é possível excluir o cliente. Há pedidos em aberto."

# Public sort keys mapped to model attribute names
CAR_SORT_FIELDS = {
    "plate": "plate",
    "brand": "brand",
    "model": "model",
    "km": "km",
    "year": "year",
    "price": "price",
    "status": "status",
    "createdAt": "created_at",
}
ORDER_SORT_FIELDS = {
    "createdAt": "created_at",
    "totalValue": "total_value",
    "status": "status",
    "city": "city",
    "state": "state",
}
CLIENT_SORT_FIELDS = {
    "fullName": "full_name",
    "email": "email",
    "cpf": "cpf",
    "phone": "phone",
    "birthDate": "birth_date",
    "createdAt": "created_at",
}
DELETED_FIRST = "excluido"

_CPF_PATTERN = re.compile(r"^\d{11}$")


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_cpf(value: Any) -> bool:
    """Eleven digits that are not all the same digit."""
    if not isinstance(value, str) or not _CPF_PATTERN.match(value):
        return False
    return len(set(value)) > 1


def is_valid_car_status(value: Any) -> bool:
    return value in {status.value for status in CarStatus}


# -- cars ---------------------------------------------------------------------

def ensure_car_updatable(current_status: str) -> None:
    if current_status == CarStatus.DELETED.value:
        raise BlockedTransitionError(DELETED_CAR_UPDATE_MESSAGE)


def ensure_car_deletable(current_status: str, has_open_orders: bool) -> None:
    if current_status == CarStatus.DELETED.value:
        raise NotFoundError(CAR_ALREADY_DELETED_MESSAGE)
    if has_open_orders:
        raise BlockedTransitionError(OPEN_ORDERS_MESSAGE)


def leaves_service(current_status: str, target_status: str) -> bool:
    """True when the car stops taking orders: moving to INACTIVED or DELETED."""
    return target_status != current_status and target_status in (
        CarStatus.INACTIVED.value,
        CarStatus.DELETED.value,
    )


def ensure_car_status_transition(current_status: str, target_status: str, has_open_orders: bool) -> None:
    """DELETED is terminal. Deactivating or deleting needs no open orders."""
    if not is_valid_car_status(target_status):
        raise ValidationError(CAR_STATUS_MESSAGE)
    ensure_car_updatable(current_status)
    if has_open_orders and leaves_service(current_status, target_status):
        if target_status == CarStatus.DELETED.value:
            raise BlockedTransitionError(OPEN_ORDERS_MESSAGE)
        raise BlockedTransitionError(DEACTIVATE_OPEN_ORDERS_MESSAGE)


# -- orders -------------------------------------------------------------------

def ensure_order_updatable(current_status: str) -> None:
    if current_status == OrderStatus.CANCELED.value:
        raise BlockedTransitionError("Pedidos cancelados não podem ser atualizados.")


def reopens_order(current_status: str, target_status: str | None) -> bool:
    return target_status == OrderStatus.OPEN.value and current_status != OrderStatus.OPEN.value


def ensure_car_orderable(car_status: str | None) -> None:
    """An order may only point at an existing ACTIVED car. ``None`` means no such car."""
    if car_status is None or car_status == CarStatus.DELETED.value:
        raise NotFoundError("Carro não encontrado")
    if car_status != CarStatus.ACTIVED.value:
        raise BlockedTransitionError("Carro indisponível para pedidos.")


def ensure_order_cancelable(current_status: str) -> None:
    if current_status == OrderStatus.CANCELED.value:
        raise BlockedTransitionError("Pedido já está cancelado.")


# -- clients ------------------------------------------------------------------

def ensure_client_deletable(deleted: bool, has_open_orders: bool) -> None:
    if deleted:
        raise NotFoundError("Client Not Found")
    if has_open_orders:
        raise BlockedTransitionError(CLIENT_OPEN_ORDERS_MESSAGE)


def parse_client_order(order_by: str | Sequence[str] | None) -> list[str]:
    """Normalize ``orderBy`` given as one key, a comma list or repeated values."""
    if not order_by:
        return []
    raw = [order_by] if isinstance(order_by, str) else list(order_by)
    keys = [part.strip() for chunk in raw for part in chunk.split(",") if part.strip()]
    for key in keys:
        if key != DELETED_FIRST and key not in CLIENT_SORT_FIELDS:
            raise ValidationError(f"Campo de ordenação inválido: {key}")
    return keys


def sort_clients(clients: Iterable[Any], keys: Sequence[str]) -> list[Any]:
    """Stable multi-key sort; ``excluido`` puts soft-deleted clients first, then by name."""
    result = list(clients)
    for key in reversed(keys):
        if key == DELETED_FIRST:
            result.sort(key=lambda c: (c.deleted_at is None, _sortable(c.full_name)))
        else:
            attribute = CLIENT_SORT_FIELDS[key]
            result.sort(key=lambda c, attr=attribute: _sortable(getattr(c, attr)))
    return result


def _sortable(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


# -- listing ------------------------------------------------------------------

def parse_sort_key(raw: str | None, allowed: dict[str, str], default: str) -> tuple[str, bool]:
    """Turn ``"brand_desc"`` into ``("brand", True)``.

    A bare field sorts ascending. Returns the model attribute name and whether
    the order is descending.
    """
    value = (raw or default).strip()
    field, descending = value, False
    head, _, suffix = value.rpartition("_")
    if head and suffix.lower() in ("asc", "desc"):
        field, descending = head, suffix.lower() == "desc"
    if field not in allowed:
        raise ValidationError(f"Campo de ordenação inválido: {field}")
    return allowed[field], descending


def parse_direction(raw: str | None, default: str = "desc") -> bool:
    value = (raw or default).lower()
    if value not in ("asc", "desc"):
        raise ValidationError("A direção da ordenação deve ser asc ou desc.")
    return value == "desc"


def page_window(page: int, page_size: int, max_page_size: int) -> tuple[int, int]:
    """Offset and limit for a 1-indexed page."""
    if page < 1:
        raise ValidationError("A página deve ser maior ou igual a 1.")
    if page_size < 1:
        raise ValidationError("O tamanho da página deve ser maior ou igual a 1.")
    limit = min(page_size, max_page_size)
    return (page - 1) * limit, limit
