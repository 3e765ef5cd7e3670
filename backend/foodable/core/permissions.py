"""
RBAC: роль × ресурс.
Покупатель бронирует, владелец ресторана ведёт свой каталог, администратор может всё.
"""
from enum import Enum
from typing import Optional

from foodable.models.user import UserRole


class Resource(str, Enum):
    """Ресурсы для проверки доступа."""
    RESERVE = "RESERVE"                    # бронирование и оформление корзины
    OWNER_PORTAL = "OWNER_PORTAL"          # свой ресторан и свои предложения
    MANAGE_ANY_OFFER = "MANAGE_ANY_OFFER"  # правка/удаление чужих предложений


# Ресурс → роли, которым разрешён доступ
RESOURCE_ROLES = {
    Resource.RESERVE: [UserRole.CUSTOMER, UserRole.RESTAURANT, UserRole.ADMIN],
    Resource.OWNER_PORTAL: [UserRole.RESTAURANT, UserRole.ADMIN],
    Resource.MANAGE_ANY_OFFER: [UserRole.ADMIN],
}


def _parse_role(role: str) -> Optional[UserRole]:
    try:
        return UserRole(role)
    except ValueError:
        return None


def roles_for(resource: Resource) -> list[UserRole]:
    return list(RESOURCE_ROLES.get(resource, []))


def can_access_resource(role: str, resource: Resource) -> bool:
    """Проверка: есть ли у роли доступ к ресурсу."""
    r = _parse_role(role)
    if r is None:
        return False
    return r in RESOURCE_ROLES.get(resource, [])


def can_manage_offer(role: str, user_id: str, owner_user_id: Optional[str]) -> bool:
    """Владелец ресторана предложения или тот, кому можно править любые предложения."""
    if can_access_resource(role, Resource.MANAGE_ANY_OFFER):
        return True
    return owner_user_id is not None and owner_user_id == user_id
