import enum
import uuid
from datetime import datetime
from sqlalchemy import String, Enum, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from foodable.core.database import Base


class OrderStatus(str, enum.Enum):
    RESERVED = "reserved"


class Order(Base):
    """Одна забронированная единица одного предложения. Не изменяется после создания."""
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    # Без внешнего ключа: заказ сохраняет offer_id и после удаления предложения
    offer_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus), default=OrderStatus.RESERVED, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
