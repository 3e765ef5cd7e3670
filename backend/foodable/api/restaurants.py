"""Публичный список ресторанов и их предложений."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.api.offers import offer_to_response
from foodable.core.database import get_db
from foodable.models import Restaurant
from foodable.schemas.offer import OfferResponse
from foodable.schemas.restaurant import RestaurantResponse
from foodable.services import offer_store
from foodable.services.restaurant_service import get_restaurant, list_restaurants

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


def restaurant_to_response(r: Restaurant) -> RestaurantResponse:
    return RestaurantResponse(
        id=r.id,
        name=r.name,
        area=r.area,
        hero_url=r.hero_url,
        owner_user_id=r.owner_user_id,
        created_at=r.created_at.isoformat() if r.created_at else "",
    )


@router.get("", response_model=list[RestaurantResponse])
async def get_restaurants(db: AsyncSession = Depends(get_db)):
    return [restaurant_to_response(r) for r in await list_restaurants(db)]


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
async def get_restaurant_by_id(restaurant_id: str, db: AsyncSession = Depends(get_db)):
    r = await get_restaurant(db, restaurant_id)
    if not r:
        raise HTTPException(status_code=404, detail="not_found")
    return restaurant_to_response(r)


@router.get("/{restaurant_id}/offers", response_model=list[OfferResponse])
async def get_restaurant_offers(restaurant_id: str, db: AsyncSession = Depends(get_db)):
    offers = await offer_store.list_offers(db, restaurant_id=restaurant_id)
    return [offer_to_response(o) for o in offers]
