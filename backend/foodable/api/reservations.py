"""Бронирование одной единицы и оформление корзины."""
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.api.auth import get_current_user
from foodable.config import settings
from foodable.core.database import get_db
from foodable.core.permissions import Resource, can_access_resource
from foodable.schemas.reservation import (
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
    ReserveResponse,
)
from foodable.schemas.user import UserInfo
from foodable.services.checkout import CartLine, checkout
from foodable.services.reservation import ReservationError, ReservationErrorKind, reserve_offer

router = APIRouter(tags=["reservations"])

# Вид ошибки → HTTP-статус. Ядро про HTTP ничего не знает.
STATUS_BY_KIND = {
    ReservationErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ReservationErrorKind.SOLD_OUT: status.HTTP_409_CONFLICT,
    ReservationErrorKind.INSUFFICIENT_QUANTITY: status.HTTP_409_CONFLICT,
    ReservationErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ReservationErrorKind.INTERNAL_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def error_response(status_code: int, code: str, message: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(code=code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def reservation_error_response(e: ReservationError) -> JSONResponse:
    return error_response(STATUS_BY_KIND[e.kind], e.kind.code, e.message)


def _access_denied(user: Optional[UserInfo]) -> Optional[JSONResponse]:
    """Политика доступа к бронированию: см. RESERVATION_REQUIRES_AUTH."""
    if user is None:
        if settings.reservation_requires_auth:
            return error_response(status.HTTP_401_UNAUTHORIZED, "unauthenticated", "Sign in to reserve")
        return None
    if not can_access_resource(user.role, Resource.RESERVE):
        return error_response(status.HTTP_403_FORBIDDEN, "forbidden")
    return None


@router.post("/offers/{offer_id}/reserve", response_model=ReserveResponse, responses=ERROR_RESPONSES)
async def reserve(
    offer_id: str,
    db: AsyncSession = Depends(get_db),
    user: Optional[UserInfo] = Depends(get_current_user),
):
    denied = _access_denied(user)
    if denied is not None:
        return denied
    try:
        order_id = await reserve_offer(db, offer_id)
    except ReservationError as e:
        return reservation_error_response(e)
    return ReserveResponse(order_id=order_id)


@router.post("/cart/checkout", response_model=CheckoutResponse, responses=ERROR_RESPONSES)
async def cart_checkout(
    body: Optional[CheckoutRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: Optional[UserInfo] = Depends(get_current_user),
):
    """Все позиции корзины бронируются одной транзакцией: либо все, либо ни одной."""
    denied = _access_denied(user)
    if denied is not None:
        return denied
    items = body.items if body is not None else None
    lines = [CartLine(offer_id=it.offer_id, qty=it.qty) for it in items] if items else None
    try:
        result = await checkout(db, lines)
    except ReservationError as e:
        return reservation_error_response(e)
    return CheckoutResponse(order_ids=result.order_ids)
