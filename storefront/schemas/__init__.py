from storefront.schemas.cart import CartItemQuantityRequest, CartItemRequest, CartItemView, CartView
from storefront.schemas.order import OrderItemView, OrderStatusUpdate, OrderView
from storefront.schemas.product import ProductIn, ProductOut
from storefront.schemas.user import Token, UserCreate, UserOut, UserUpdate

__all__ = [
    "CartItemQuantityRequest",
    "CartItemRequest",
    "CartItemView",
    "CartView",
    "OrderItemView",
    "OrderStatusUpdate",
    "OrderView",
    "ProductIn",
    "ProductOut",
    "Token",
    "UserCreate",
    "UserOut",
    "UserUpdate",
]
