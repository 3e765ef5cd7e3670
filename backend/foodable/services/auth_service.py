"""Пароли (bcrypt), JWT-сессии и учётные записи покупателей/владельцев ресторанов."""
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
import jwt
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from foodable.config import settings
from foodable.models import User, UserRole

MIN_PASSWORD_LENGTH = 6


class AccountError(Exception):
    """Ошибка регистрации/входа; code уходит клиенту как detail."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def create_access_token(user: User) -> str:
    now = datetime.utcnow()
    expire = now + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": user.id,
        "role": user.role.value,
        "name": user.name or "",
        "email": user.email,
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return None


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == normalize_email(email)))
    return result.scalar_one_or_none()


async def register_user(
    db: AsyncSession,
    email: str,
    password: str,
    name: str,
    role: UserRole = UserRole.CUSTOMER,
) -> User:
    """Регистрация по email и паролю. Роль admin через регистрацию не выдаётся."""
    email = normalize_email(email)
    if not email or "@" not in email:
        raise AccountError("validation_error")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AccountError("validation_error")
    if role == UserRole.ADMIN:
        raise AccountError("forbidden")

    if await get_user_by_email(db, email) is not None:
        raise AccountError("email_in_use")
    user = User(
        email=email,
        name=(name or "").strip() or None,
        role=role,
        password_hash=hash_password(password),
    )
    db.add(user)
    await db.flush()
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if not user or not user.is_active:
        raise AccountError("invalid_credentials")
    if not verify_password(password, user.password_hash):
        raise AccountError("invalid_credentials")
    return user
