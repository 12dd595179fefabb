from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Contact(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    subject: str = Field(max_length=100)
    message: str = Field(max_length=1000)
    contact_email: str
    contact_phone: Optional[str] = None

    status: str = Field(default="pending", index=True)
    priority: str = Field(default="medium")
    admin_response: Optional[str] = None
    responded_by: Optional[int] = Field(default=None, foreign_key="user.id")
    responded_at: Optional[datetime] = None
    is_read: bool = False

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
