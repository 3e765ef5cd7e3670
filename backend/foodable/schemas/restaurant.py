from typing import Optional

from foodable.schemas.base import CamelModel


class RestaurantResponse(CamelModel):
    id: str
    name: str
    area: Optional[str] = None
    hero_url: Optional[str] = None
    owner_user_id: Optional[str] = None
    created_at: str


class RestaurantUpsert(CamelModel):
    name: Optional[str] = None
    area: Optional[str] = None
    hero_url: Optional[str] = None
