from typing import Optional

from pydantic import EmailStr, Field

from pizzeria.schemas.address_schemas import PHONE_PATTERN
from pizzeria.schemas.base import RequestModel


class UserRegister(RequestModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    password: str


class VerifyOtpRequest(RequestModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    otp: str = Field(min_length=1)


class UserLogin(RequestModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: str
