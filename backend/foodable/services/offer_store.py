"""
Хранилище предложений.

Два пути изменения остатка:
- decrement_if_available: единственный путь для бронирования, условный UPDATE
  «минус один, если quantity > 0», без предварительного чтения;
- update_offer: правка владельцем (цена, остаток, окно самовывоза), без условий
  на текущее значение.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodable.models import Offer, OfferCategory, Restaurant

# Поля, которые владелец может менять напрямую
EDITABLE_FIELDS = frozenset((
    "title",
    "category",
    "price_cents",
    "original_price_cents",
    "quantity",
    "pickup_start",
    "pickup_end",
    "photo_url",
))


def to_cents(amount: Any) -> int:
    """Сумма в валюте (строка/число) → целые центы, округление half-up."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def get_offer(db: AsyncSession, offer_id: str, with_restaurant: bool = False) -> Optional[Offer]:
    q = select(Offer).where(Offer.id == offer_id)
    if with_restaurant:
        q = q.options(selectinload(Offer.restaurant))
    result = await db.execute(q)
    return result.scalar_one_or_none()


async def offer_exists(db: AsyncSession, offer_id: str) -> bool:
    result = await db.execute(select(Offer.id).where(Offer.id == offer_id))
    return result.scalar_one_or_none() is not None


async def decrement_if_available(db: AsyncSession, offer_id: str) -> bool:
    """Уменьшить остаток на 1, только если он > 0. True, если строка изменена."""
    result = await db.execute(
        update(Offer)
        .where(Offer.id == offer_id, Offer.quantity > 0)
        .values(quantity=Offer.quantity - 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def lock_offers_query(offer_ids: Iterable[str]):
    return (
        select(Offer.id)
        .where(Offer.id.in_(sorted(set(offer_ids))))
        .order_by(Offer.id)
        .with_for_update()
    )


async def lock_offers(db: AsyncSession, offer_ids: Iterable[str]) -> None:
    """
    Заблокировать строки предложений до конца транзакции, всегда в порядке id.
    В SQLite FOR UPDATE не выводится: там запись и так сериализована BEGIN IMMEDIATE.
    """
    await db.execute(lock_offers_query(offer_ids))


async def list_offers(db: AsyncSession, restaurant_id: Optional[str] = None) -> list[Offer]:
    q = select(Offer).options(selectinload(Offer.restaurant)).order_by(Offer.created_at.desc())
    if restaurant_id is not None:
        q = q.where(Offer.restaurant_id == restaurant_id)
    result = await db.execute(q)
    return list(result.scalars().all())


async def create_offer(db: AsyncSession, restaurant: Restaurant, data: dict) -> Offer:
    offer = Offer(
        restaurant_id=restaurant.id,
        title=data["title"],
        category=data.get("category") or OfferCategory.DISCOUNT,
        price_cents=data["price_cents"],
        original_price_cents=data["original_price_cents"],
        quantity=max(0, int(data.get("quantity") or 0)),
        pickup_start=data.get("pickup_start") or "17:00",
        pickup_end=data.get("pickup_end") or "19:00",
        photo_url=data.get("photo_url") or restaurant.hero_url,
    )
    db.add(offer)
    await db.flush()
    return offer


async def update_offer(db: AsyncSession, offer: Offer, changes: dict) -> Offer:
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Поля нельзя менять: {', '.join(sorted(unknown))}")
    if "quantity" in changes and changes["quantity"] < 0:
        raise ValueError("Остаток не может быть отрицательным")
    for field, value in changes.items():
        setattr(offer, field, value)
    db.add(offer)
    await db.flush()
    return offer


async def delete_offer(db: AsyncSession, offer: Offer) -> None:
    await db.delete(offer)
    await db.flush()
