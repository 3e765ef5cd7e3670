"""Каталог предложений: публичный просмотр и правки владельца ресторана."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.api.auth import RequireOwnerAccess
from foodable.core.database import get_db
from foodable.core.logging_config import get_logger
from foodable.core.permissions import Resource, can_access_resource, can_manage_offer
from foodable.models import Offer, Restaurant
from foodable.schemas.offer import OfferCreate, OfferResponse, OfferUpdate, PickupWindow, RestaurantRef
from foodable.schemas.user import UserInfo
from foodable.services import offer_store
from foodable.services.restaurant_service import get_owned_restaurant, get_restaurant

router = APIRouter(prefix="/offers", tags=["offers"])
logger = get_logger(__name__)


def offer_to_response(offer: Offer, restaurant: Optional[Restaurant] = None) -> OfferResponse:
    return OfferResponse(
        id=offer.id,
        title=offer.title,
        type=offer.category,
        price_cents=offer.price_cents,
        original_price_cents=offer.original_price_cents,
        distance_km=offer.distance_km if offer.distance_km is not None else 1.0,
        pickup=PickupWindow(start=offer.pickup_start, end=offer.pickup_end),
        qty=offer.quantity,
        photo_url=offer.photo_url,
        restaurant_id=offer.restaurant_id,
        restaurant=RestaurantRef(id=restaurant.id, name=restaurant.name) if restaurant else None,
    )


async def _get_managed_offer(db: AsyncSession, offer_id: str, user: UserInfo) -> Offer:
    offer = await offer_store.get_offer(db, offer_id, with_restaurant=True)
    if not offer:
        raise HTTPException(status_code=404, detail="not_found")
    owner_id = offer.restaurant.owner_user_id if offer.restaurant else None
    if not can_manage_offer(user.role, user.id, owner_id):
        raise HTTPException(status_code=403, detail="forbidden")
    return offer


@router.get("", response_model=list[OfferResponse])
async def list_offers(db: AsyncSession = Depends(get_db)):
    offers = await offer_store.list_offers(db)
    return [offer_to_response(o, o.restaurant) for o in offers]


@router.get("/{offer_id}", response_model=OfferResponse)
async def get_offer(offer_id: str, db: AsyncSession = Depends(get_db)):
    offer = await offer_store.get_offer(db, offer_id, with_restaurant=True)
    if not offer:
        raise HTTPException(status_code=404, detail="not_found")
    return offer_to_response(offer, offer.restaurant)


@router.post("", response_model=OfferResponse, status_code=status.HTTP_201_CREATED)
async def create_offer(
    body: OfferCreate,
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    target = await get_owned_restaurant(db, user.id)
    if body.restaurant_id and can_access_resource(user.role, Resource.MANAGE_ANY_OFFER):
        target = await get_restaurant(db, body.restaurant_id)
        if not target:
            raise HTTPException(status_code=400, detail="invalid_restaurant")
    if not target:
        raise HTTPException(status_code=400, detail="no_restaurant")
    offer = await offer_store.create_offer(
        db,
        target,
        {
            "title": body.title.strip(),
            "category": body.type,
            "price_cents": offer_store.to_cents(body.price),
            "original_price_cents": offer_store.to_cents(body.original_price),
            "quantity": body.qty,
            "pickup_start": body.pickup_start,
            "pickup_end": body.pickup_end,
            "photo_url": body.photo_url,
        },
    )
    logger.info("Создано предложение id=%s ресторан=%s остаток=%s", offer.id, target.id, offer.quantity)
    return offer_to_response(offer, target)


@router.patch("/{offer_id}", response_model=OfferResponse)
async def update_offer(
    offer_id: str,
    body: OfferUpdate,
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    """Правка владельцем: остаток задаётся напрямую, без проверки текущего значения."""
    offer = await _get_managed_offer(db, offer_id, user)
    sent = body.model_dump(exclude_unset=True)
    changes = {}
    if sent.get("title"):
        changes["title"] = sent["title"]
    if sent.get("type"):
        changes["category"] = sent["type"]
    if sent.get("price") is not None:
        changes["price_cents"] = offer_store.to_cents(sent["price"])
    if sent.get("original_price") is not None:
        changes["original_price_cents"] = offer_store.to_cents(sent["original_price"])
    if sent.get("qty") is not None:
        changes["quantity"] = sent["qty"]
    if sent.get("pickup_start"):
        changes["pickup_start"] = sent["pickup_start"]
    if sent.get("pickup_end"):
        changes["pickup_end"] = sent["pickup_end"]
    if "photo_url" in sent:
        changes["photo_url"] = sent["photo_url"] or None
    offer = await offer_store.update_offer(db, offer, changes)
    logger.info("Предложение id=%s изменено: %s", offer.id, ", ".join(sorted(changes)) or "-")
    return offer_to_response(offer, offer.restaurant)


@router.delete("/{offer_id}")
async def delete_offer(
    offer_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserInfo = Depends(RequireOwnerAccess),
):
    """Удаление предложения. Заказы сохраняют offer_id."""
    offer = await _get_managed_offer(db, offer_id, user)
    await offer_store.delete_offer(db, offer)
    logger.info("Предложение id=%s удалено", offer_id)
    return {"ok": True}
