"""
storefront/schemas/cart.py - Pydantic-модели корзины.

Цены и суммы хранятся как Decimal; subtotal считается от снимка цены, а не от текущей цены каталога.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class CartItemRequest(BaseModel):
    product_id: int = Field(..., description="ID of the product to add")
    quantity: int = Field(1, description="Units to add; must be at least 1")


class CartItemQuantityRequest(BaseModel):
    quantity: int = Field(..., description="New absolute quantity; 0 or less removes the item")


class CartItemView(BaseModel):
    id: int
    product_id: int
    product_name: str
    image_url: Optional[str] = None
    quantity: int
    price: Decimal = Field(..., description="Price snapshot taken at the last cart mutation")
    subtotal: Decimal


class CartView(BaseModel):
    id: int
    user_id: int
    items: List[CartItemView] = Field(default_factory=list)
    total_price: Decimal = Decimal("0.00")
