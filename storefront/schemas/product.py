"""
storefront/schemas/product.py - Pydantic-модели каталога.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Unit price")
    stock_quantity: int = Field(0, ge=0, description="Units available")
    image_url: Optional[str] = Field(None, description="Primary image URL")


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    stock_quantity: int
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
