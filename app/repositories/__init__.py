"""Persistence gateway: one repository per entity over an injected AsyncSession."""
from app.repositories.cars import CarFilters, CarRepository
from app.repositories.clients import ClientRepository
from app.repositories.orders import OrderFilters, OrderRepository
from app.repositories.users import UserRepository

__all__ = [
    "CarFilters",
    "CarRepository",
    "ClientRepository",
    "OrderFilters",
    "OrderRepository",
    "UserRepository",
]
