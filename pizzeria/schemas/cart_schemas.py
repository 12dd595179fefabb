from typing import List, Optional

from pydantic import Field

from pizzeria.schemas.base import RequestModel


class Topping(RequestModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0)


class Customizations(RequestModel):
    extra_cheese: bool = False
    extra_toppings: List[Topping] = []
    remove_toppings: List[str] = []
    special_instructions: Optional[str] = Field(default=None, max_length=200)


class CartAddRequest(RequestModel):
    pizza_id: int
    size: str
    quantity: int = 1
    customizations: Customizations = Customizations()


class CartUpdateRequest(RequestModel):
    quantity: int


class DiscountRequest(RequestModel):
    code: str = Field(min_length=1)
