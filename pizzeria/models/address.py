from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Address(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    first_name: str
    last_name: str
    phone: str
    address: str
    city: str
    district: str
    province: str
    postal_code: Optional[str] = None
    is_default: bool = Field(default=False)
    address_type: str = Field(default="Home")
    delivery_instructions: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def formatted_address(self) -> str:
        return f"{self.address}, {self.city}, {self.district}, {self.province}"

    def snapshot(self) -> dict:
        """Copy of the fields an order keeps, independent of later edits."""
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "district": self.district,
            "province": self.province,
            "postal_code": self.postal_code,
            "delivery_instructions": self.delivery_instructions,
        }
