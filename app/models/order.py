import enum
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, String

from app.database import Base
from app.utils.dates import utcnow


class OrderStatus(str, enum.Enum):
    OPEN = "OPEN"
    APPROVED = "APPROVED"
    CLOSED = "CLOSED"
    CANCELED = "CANCELED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    car_id = Column(String, ForeignKey("cars.id"), nullable=False, index=True)
    client_id = Column(String, ForeignKey("clients.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default=OrderStatus.OPEN.value)
    zipcode = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    total_value = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
