"""Журнал заказов: только добавление. Заказ = одна забронированная единица предложения."""
from typing import Iterable, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.models import Order, OrderStatus


async def append_order(db: AsyncSession, offer_id: str) -> str:
    order = Order(offer_id=offer_id, status=OrderStatus.RESERVED)
    db.add(order)
    await db.flush()
    return order.id


async def count_orders(db: AsyncSession, offer_id: Optional[str] = None) -> int:
    q = select(func.count(Order.id))
    if offer_id is not None:
        q = q.where(Order.offer_id == offer_id)
    return int((await db.execute(q)).scalar_one() or 0)


async def list_orders_for_offers(db: AsyncSession, offer_ids: Iterable[str], limit: int = 200) -> list[Order]:
    ids = list(offer_ids)
    if not ids:
        return []
    result = await db.execute(
        select(Order)
        .where(Order.offer_id.in_(ids))
        .order_by(Order.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
