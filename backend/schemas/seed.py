from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional

from models.users import UserRole
from models.cart import CartStatus
from models.order import OrderStatus

# Field constraints mirror the CHECK constraints so bad fixtures fail before any insert

# Fixture row for the users table
class UserSeed(BaseModel):
    email: EmailStr
    password_hash: str = Field(min_length=1)
    full_name: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    is_active: bool = True

# Fixture row for the products table
class ProductSeed(BaseModel):
    sku: Optional[str] = None
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price_cents: int = Field(ge=0)
    currency: str = "USD"
    image_url: Optional[str] = None
    stock_quantity: int = Field(default=0, ge=0)
    is_active: bool = True

# A product reference (by SKU) and quantity inside a cart or order
class LineSeed(BaseModel):
    sku: str
    quantity: int = Field(gt=0)


def _unique_skus(items: List[LineSeed]) -> List[LineSeed]:
    skus = [item.sku for item in items]
    if len(skus) != len(set(skus)):
        raise ValueError("each product may appear only once")
    return items

class CartSeed(BaseModel):
    user_email: EmailStr
    status: CartStatus = CartStatus.ACTIVE
    items: List[LineSeed] = []

    @field_validator("items")
    @classmethod
    def one_line_per_product(cls, items):
        return _unique_skus(items)

class OrderSeed(BaseModel):
    user_email: EmailStr
    status: OrderStatus = OrderStatus.PENDING
    tax_cents: int = Field(default=0, ge=0)
    shipping_cents: int = Field(default=0, ge=0)
    currency: str = "USD"
    items: List[LineSeed] = []

    @field_validator("items")
    @classmethod
    def one_line_per_product(cls, items):
        return _unique_skus(items)

# The whole fixture file
class SeedData(BaseModel):
    users: List[UserSeed] = []
    products: List[ProductSeed] = []
    carts: List[CartSeed] = []
    orders: List[OrderSeed] = []
