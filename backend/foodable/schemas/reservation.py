from typing import List, Optional

from foodable.schemas.base import CamelModel


class ReserveResponse(CamelModel):
    ok: bool = True
    order_id: str


class CartItem(CamelModel):
    offer_id: Optional[str] = None
    qty: Optional[int] = None


class CheckoutRequest(CamelModel):
    items: Optional[List[CartItem]] = None


class CheckoutResponse(CamelModel):
    ok: bool = True
    order_ids: List[str]


class ErrorResponse(CamelModel):
    ok: bool = False
    code: str
    message: Optional[str] = None


class OrderResponse(CamelModel):
    id: str
    offer_id: str
    status: str
    created_at: str
