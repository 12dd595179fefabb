from typing import Optional

from pydantic import Field, field_validator

from pizzeria.constants.catalog import AddressType, DISTRICTS, PROVINCES
from pizzeria.schemas.base import RequestModel

PHONE_PATTERN = r"^(\+94|0)?[1-9]\d{8}$"
POSTAL_CODE_PATTERN = r"^\d{5}$"


class AddressCreate(RequestModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    phone: str = Field(pattern=PHONE_PATTERN)
    address: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=50)
    district: str
    province: str
    postal_code: Optional[str] = Field(default=None, pattern=POSTAL_CODE_PATTERN)
    address_type: AddressType = AddressType.home
    delivery_instructions: Optional[str] = Field(default=None, max_length=200)
    is_default: bool = False

    @field_validator("district")
    @classmethod
    def check_district(cls, value):
        if value not in DISTRICTS:
            raise ValueError(f"Unknown district: {value}")
        return value

    @field_validator("province")
    @classmethod
    def check_province(cls, value):
        if value not in PROVINCES:
            raise ValueError(f"Unknown province: {value}")
        return value


class AddressUpdate(RequestModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    address: Optional[str] = Field(default=None, min_length=1, max_length=200)
    city: Optional[str] = Field(default=None, min_length=1, max_length=50)
    district: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, pattern=POSTAL_CODE_PATTERN)
    address_type: Optional[AddressType] = None
    delivery_instructions: Optional[str] = Field(default=None, max_length=200)

    @field_validator("district")
    @classmethod
    def check_district(cls, value):
        if value is not None and value not in DISTRICTS:
            raise ValueError(f"Unknown district: {value}")
        return value

    @field_validator("province")
    @classmethod
    def check_province(cls, value):
        if value is not None and value not in PROVINCES:
            raise ValueError(f"Unknown province: {value}")
        return value
