"""
storefront/schemas/order.py - Pydantic-модели заказов.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from storefront.models.order import OrderStatus


class OrderItemView(BaseModel):
    id: int
    product_id: int
    product_name: str
    image_url: Optional[str] = None
    quantity: int
    price_at_purchase: Decimal
    subtotal: Decimal


class OrderView(BaseModel):
    id: int
    user_id: int
    user_email: str
    order_date: datetime
    total_amount: Decimal
    status: OrderStatus
    items: List[OrderItemView] = Field(default_factory=list)


class OrderStatusUpdate(BaseModel):
    # Строка, а не OrderStatus: неизвестный статус должен дать 400, а не 422
    status: str = Field(..., description="PENDING, PROCESSING, SHIPPED, DELIVERED or CANCELLED")
