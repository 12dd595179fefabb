from typing import Dict, List, Optional
from urllib.parse import quote_plus

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings


class DiscountRule(BaseModel):
    """A discount code is either a percentage or a flat amount, gated by a minimum subtotal."""

    percentage: Optional[float] = None
    amount: Optional[float] = None
    min_order: float = 0

    @model_validator(mode="after")
    def check_kind(self):
        if (self.percentage is None) == (self.amount is None):
            raise ValueError("Discount rule needs exactly one of percentage or amount")
        if self.percentage is not None and not 0 < self.percentage <= 100:
            raise ValueError("Discount percentage must be between 0 and 100")
        return self


DEFAULT_DISCOUNT_CODES = {
    "WELCOME10": DiscountRule(percentage=10, min_order=1000),
    "SAVE20": DiscountRule(percentage=20, min_order=2000),
    "FIRSTORDER": DiscountRule(amount=300, min_order=1500),
    "PIZZA50": DiscountRule(amount=500, min_order=2500),
}


class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    # a full URL wins over the postgres parts (sqlite in tests)
    db_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "pizzeria"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    otp_expire_minutes: int = 10

    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # pricing
    currency: str = "LKR"
    tax_rate: float = 0.10
    free_delivery_threshold: float = 3000
    delivery_fee: float = 200
    extra_cheese_price: float = 150
    max_item_quantity: int = 10
    cart_ttl_hours: int = 24
    discount_codes: Dict[str, DiscountRule] = DEFAULT_DISCOUNT_CODES

    # orders
    order_number_prefix: str = "PZ"
    estimated_delivery_minutes: int = 45
    cod_minimum_amount: float = 10

    @property
    def database_url(self):
        if self.db_url:
            return self.db_url
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"


settings = Settings()
