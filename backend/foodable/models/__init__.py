from foodable.core.database import Base
from foodable.models.user import User, UserRole
from foodable.models.restaurant import Restaurant
from foodable.models.offer import Offer, OfferCategory
from foodable.models.order import Order, OrderStatus

__all__ = [
    "Base",
    "Offer",
    "OfferCategory",
    "Order",
    "OrderStatus",
    "Restaurant",
    "User",
    "UserRole",
]
