from typing import Optional

from pydantic import EmailStr, Field, field_validator

from pizzeria.constants.catalog import ContactPriority, ContactStatus
from pizzeria.schemas.base import RequestModel


class ContactCreate(RequestModel):
    subject: str = Field(min_length=1, max_length=100)
    message: str = Field(min_length=1, max_length=1000)
    contact_email: EmailStr
    contact_phone: Optional[str] = Field(default=None, pattern=r"^(0\d{9}|\+94\d{9})$")

    @field_validator("subject", "message")
    @classmethod
    def strip_text(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ContactAdminUpdate(RequestModel):
    status: Optional[ContactStatus] = None
    priority: Optional[ContactPriority] = None
    admin_response: Optional[str] = Field(default=None, max_length=1000)
