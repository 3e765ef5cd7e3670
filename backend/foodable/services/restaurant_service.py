"""Рестораны: публичный просмотр и профиль владельца (один ресторан на владельца)."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.models import Restaurant


async def list_restaurants(db: AsyncSession) -> list[Restaurant]:
    result = await db.execute(select(Restaurant).order_by(Restaurant.created_at.desc()))
    return list(result.scalars().all())


async def get_restaurant(db: AsyncSession, restaurant_id: str) -> Optional[Restaurant]:
    result = await db.execute(select(Restaurant).where(Restaurant.id == restaurant_id))
    return result.scalar_one_or_none()


async def get_owned_restaurant(db: AsyncSession, owner_user_id: str) -> Optional[Restaurant]:
    result = await db.execute(select(Restaurant).where(Restaurant.owner_user_id == owner_user_id))
    return result.scalar_one_or_none()


async def upsert_owned_restaurant(
    db: AsyncSession,
    owner_user_id: str,
    name: str,
    hero_url: str,
    area: Optional[str] = None,
) -> Restaurant:
    restaurant = await get_owned_restaurant(db, owner_user_id)
    if restaurant is None:
        restaurant = Restaurant(owner_user_id=owner_user_id)
    restaurant.name = name
    restaurant.hero_url = hero_url
    restaurant.area = area or None
    db.add(restaurant)
    await db.flush()
    return restaurant
