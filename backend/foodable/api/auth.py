"""Веб-авторизация: регистрация, вход по email+пароль, JWT в cookie или Bearer, проверка ролей."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer, OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.config import settings
from foodable.core.database import get_db
from foodable.core.logging_config import get_logger
from foodable.core.permissions import Resource, roles_for
from foodable.models import User, UserRole
from foodable.schemas.user import LoginResponse, MeResponse, RegisterBody, UserInfo
from foodable.services.auth_service import (
    AccountError,
    authenticate_user,
    create_access_token,
    decode_token,
    register_user,
)
from foodable.services.restaurant_service import get_owned_restaurant

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)
logger = get_logger(__name__)

ACCOUNT_ERROR_STATUS = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "email_in_use": status.HTTP_409_CONFLICT,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
}


def _user_info(user: User) -> UserInfo:
    return UserInfo(id=user.id, email=user.email, name=user.name or "", role=user.role.value)


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.cookie_name,
        token,
        max_age=settings.jwt_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[UserInfo]:
    """Пользователь из Bearer-заголовка, иначе из cookie. None, если нет сессии или токен не прошёл проверку."""
    token = None
    if credentials is not None and credentials.scheme.lower() == "bearer":
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.cookie_name)
    if not token:
        return None
    payload = decode_token(token)
    if not payload or "sub" not in payload:
        logger.warning("Токен не прошёл проверку (неверный или истёк)")
        return None
    return UserInfo(
        id=str(payload["sub"]),
        email=payload.get("email", ""),
        name=payload.get("name", ""),
        role=payload.get("role", ""),
    )


def require_roles(allowed_roles: List[UserRole]):
    async def _check(
        current_user: Optional[UserInfo] = Depends(get_current_user),
    ) -> UserInfo:
        if not current_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="unauthenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        try:
            role_enum = UserRole(current_user.role)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        if role_enum not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        return current_user
    return _check


RequireOwnerAccess = require_roles(roles_for(Resource.OWNER_PORTAL))


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterBody,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await register_user(db, body.email, body.password, body.name, body.role)
    except AccountError as e:
        raise HTTPException(status_code=ACCOUNT_ERROR_STATUS[e.code], detail=e.code)
    token = create_access_token(user)
    _set_session_cookie(response, token)
    logger.info("Зарегистрирован пользователь id=%s роль=%s", user.id, user.role.value)
    return LoginResponse(access_token=token, user=_user_info(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    response: Response,
    form: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await authenticate_user(db, form.username, form.password)
    except AccountError as e:
        raise HTTPException(
            status_code=ACCOUNT_ERROR_STATUS[e.code],
            detail=e.code,
        )
    token = create_access_token(user)
    _set_session_cookie(response, token)
    return LoginResponse(access_token=token, user=_user_info(user))


@router.get("/me", response_model=Optional[MeResponse])
async def me(
    current_user: Optional[UserInfo] = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Текущий пользователь и его ресторан (для владельца); null, если сессии нет."""
    if current_user is None:
        return None
    restaurant = await get_owned_restaurant(db, current_user.id)
    return MeResponse(
        **current_user.model_dump(),
        restaurant_id=restaurant.id if restaurant else None,
    )


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(settings.cookie_name, path="/")
    return {"ok": True}
