"""Оформление корзины: нормализация строк и пакетное бронирование «всё или ничего»."""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from foodable.services.reservation import ReservationError, ReservationErrorKind, reserve_many


@dataclass
class CartLine:
    offer_id: Optional[str]
    qty: Optional[int] = None


@dataclass
class CheckoutResult:
    order_ids: list[str]
    units_by_offer: dict[str, int] = field(default_factory=dict)


def merge_cart_lines(lines: Iterable[CartLine]) -> dict[str, int]:
    """
    Строки без offer_id пропускаются, количество не меньше 1 (пусто → 1),
    повторы одного предложения суммируются. Порядок по первому появлению.
    """
    merged: dict[str, int] = {}
    for line in lines:
        if not line.offer_id:
            continue
        qty = max(1, int(line.qty or 1))
        merged[line.offer_id] = merged.get(line.offer_id, 0) + qty
    return merged


async def checkout(db: AsyncSession, lines: Optional[list[CartLine]]) -> CheckoutResult:
    if not lines:
        raise ReservationError(ReservationErrorKind.BAD_REQUEST)
    demands = merge_cart_lines(lines)
    if not demands:
        raise ReservationError(ReservationErrorKind.BAD_REQUEST, "items[].offerId required")
    order_ids = await reserve_many(db, demands)
    return CheckoutResult(order_ids=order_ids, units_by_offer=demands)
