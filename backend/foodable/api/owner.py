"""Кабинет владельца: свой ресторан, свои предложения и брони по ним."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.api.auth import RequireOwnerAccess
from foodable.api.offers import offer_to_response
from foodable.api.restaurants import restaurant_to_response
from foodable.core.database import get_db
from foodable.core.logging_config import get_logger
from foodable.schemas.offer import OfferResponse
from foodable.schemas.reservation import OrderResponse
from foodable.schemas.restaurant import RestaurantResponse, RestaurantUpsert
from foodable.schemas.user import UserInfo
from foodable.services import offer_store, order_ledger
from foodable.services.restaurant_service import get_owned_restaurant, upsert_owned_restaurant

router = APIRouter(prefix="/me", tags=["owner"])
logger = get_logger(__name__)


@router.get("/restaurant", response_model=Optional[RestaurantResponse])
async def get_my_restaurant(
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    r = await get_owned_restaurant(db, user.id)
    return restaurant_to_response(r) if r else None


@router.post("/restaurant", response_model=RestaurantResponse)
async def save_my_restaurant(
    body: RestaurantUpsert,
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    """Создать или обновить ресторан текущего владельца (name и heroUrl обязательны)."""
    name = (body.name or "").strip()
    hero_url = (body.hero_url or "").strip()
    if not name or not hero_url:
        raise HTTPException(status_code=400, detail="validation_error")
    r = await upsert_owned_restaurant(db, user.id, name=name, hero_url=hero_url, area=body.area)
    logger.info("Ресторан id=%s сохранён владельцем %s", r.id, user.id)
    return restaurant_to_response(r)


@router.get("/offers", response_model=list[OfferResponse])
async def get_my_offers(
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    r = await get_owned_restaurant(db, user.id)
    if not r:
        return []
    offers = await offer_store.list_offers(db, restaurant_id=r.id)
    return [offer_to_response(o, r) for o in offers]


@router.get("/orders", response_model=list[OrderResponse])
async def get_my_orders(
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    """Брони по предложениям ресторана (новые сверху). Удалённые предложения сюда не попадают."""
    r = await get_owned_restaurant(db, user.id)
    if not r:
        return []
    offers = await offer_store.list_offers(db, restaurant_id=r.id)
    orders = await order_ledger.list_orders_for_offers(db, [o.id for o in offers])
    return [
        OrderResponse(
            id=o.id,
            offer_id=o.offer_id,
            status=o.status.value,
            created_at=o.created_at.isoformat() if o.created_at else "",
        )
        for o in orders
    ]
