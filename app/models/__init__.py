from app.models.car import Car, CarStatus, Item
from app.models.client import Client
from app.models.order import Order, OrderStatus
from app.models.user import Role, User

__all__ = ["Car", "CarStatus", "Item", "Client", "Order", "OrderStatus", "Role", "User"]
