from decimal import Decimal
from typing import Optional

from pydantic import Field

from foodable.models import OfferCategory
from foodable.schemas.base import CamelModel

TIME_OF_DAY = r"^([01]\d|2[0-3]):[0-5]\d$"


class PickupWindow(CamelModel):
    start: str
    end: str


class RestaurantRef(CamelModel):
    id: str
    name: str


class OfferResponse(CamelModel):
    id: str
    title: str
    type: OfferCategory
    price_cents: int
    original_price_cents: int
    distance_km: float
    pickup: PickupWindow
    qty: int
    photo_url: Optional[str] = None
    restaurant_id: str
    restaurant: Optional[RestaurantRef] = None


class OfferCreate(CamelModel):
    """Цены в валюте (например 8.50), хранятся в центах."""
    title: str = Field(..., min_length=1)
    type: OfferCategory = OfferCategory.DISCOUNT
    price: Decimal = Field(..., gt=0)
    original_price: Decimal = Field(..., gt=0)
    qty: int = 0
    pickup_start: str = Field("17:00", pattern=TIME_OF_DAY)
    pickup_end: str = Field("19:00", pattern=TIME_OF_DAY)
    photo_url: Optional[str] = None
    # Только для админа: разместить предложение от имени другого ресторана
    restaurant_id: Optional[str] = None


class OfferUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    type: Optional[OfferCategory] = None
    price: Optional[Decimal] = Field(None, gt=0)
    original_price: Optional[Decimal] = Field(None, gt=0)
    qty: Optional[int] = Field(None, ge=0)
    pickup_start: Optional[str] = Field(None, pattern=TIME_OF_DAY)
    pickup_end: Optional[str] = Field(None, pattern=TIME_OF_DAY)
    photo_url: Optional[str] = None
