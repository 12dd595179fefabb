from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = Field(default=None, index=True)
    password: Optional[str] = None  # bcrypt hash
    role: str = Field(default="user")
    can_login: bool = Field(default=True)

    # one-time code sent at registration
    is_verified: bool = Field(default=False)
    otp: Optional[str] = None
    otp_expires: Optional[datetime] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
