"""Предложение ресторана: ограниченное количество, окно самовывоза, цена в центах."""
import enum
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Enum, Integer, Float, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodable.core.database import Base


class OfferCategory(str, enum.Enum):
    DISCOUNT = "discount"
    MYSTERY = "mystery"
    DONATION = "donation"


class Offer(Base):
    """Остаток quantity уменьшается только условным UPDATE из services.offer_store."""
    __tablename__ = "offers"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_offers_quantity_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    restaurant_id: Mapped[str] = mapped_column(
        ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[OfferCategory] = mapped_column(
        Enum(OfferCategory), default=OfferCategory.DISCOUNT, nullable=False
    )
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    original_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    pickup_start: Mapped[str] = mapped_column(String(5), default="17:00", nullable=False)
    pickup_end: Mapped[str] = mapped_column(String(5), default="19:00", nullable=False)
    photo_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    distance_km: Mapped[float] = mapped_column(Float, default=1.0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    restaurant = relationship("Restaurant", back_populates="offers")
