from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from cityat.schemas.common import CamelModel
from cityat.schemas.location import Address


class User(CamelModel):
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    role: str = "customer"
    profile_photo: Optional[str] = None
    addresses: List[Address] = []
    provider: Optional[str] = None
    provider_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthSession(CamelModel):
    user: User
    token: str
    refresh_token: str


class TokenPair(CamelModel):
    token: str
    refresh_token: str


class OtpRequest(CamelModel):
    phone: str = Field(..., min_length=10, max_length=15)


class OtpVerifyRequest(CamelModel):
    phone: str = Field(..., min_length=10, max_length=15)
    otp: str = Field(..., min_length=4, max_length=6)


class GoogleLoginRequest(CamelModel):
    access_token: str
    id_token: str


class FacebookLoginRequest(CamelModel):
    access_token: str


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    profile_photo: Optional[str] = None


class AuthStatusResponse(CamelModel):
    is_authenticated: bool
    user: Optional[User] = None
    is_loading: bool = False
    error: Optional[str] = None
