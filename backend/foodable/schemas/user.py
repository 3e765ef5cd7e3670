from typing import Optional

from pydantic import BaseModel

from foodable.models import UserRole


class UserInfo(BaseModel):
    id: str
    email: str
    name: str
    role: str


class RegisterBody(BaseModel):
    email: str
    password: str
    name: str = ""
    role: UserRole = UserRole.CUSTOMER


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo


class MeResponse(UserInfo):
    restaurant_id: Optional[str] = None
