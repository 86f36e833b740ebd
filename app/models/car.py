import enum
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.dates import utcnow


class CarStatus(str, enum.Enum):
    ACTIVED = "ACTIVED"
    INACTIVED = "INACTIVED"
    DELETED = "DELETED"


class Car(Base):
    __tablename__ = "cars"
    __table_args__ = (
        # A plate can be reused once the previous car holding it was deleted
        Index(
            "uq_cars_plate_live",
            "plate",
            unique=True,
            sqlite_where=text("status != 'DELETED'"),
            postgresql_where=text("status != 'DELETED'"),
        ),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    plate = Column(String, nullable=False)
    brand = Column(String, nullable=False)
    model = Column(String, nullable=False)
    km = Column(Integer, nullable=False, default=0)
    year = Column(Integer, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    status = Column(String, nullable=False, default=CarStatus.ACTIVED.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "Item",
        back_populates="car",
        order_by="Item.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class Item(Base):
    __tablename__ = "items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    car_id = Column(String, ForeignKey("cars.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    car = relationship("Car", back_populates="items")
