# storefront/api/cart.py
# Роуты корзины текущего пользователя. Идентичность передаётся в сервис явно.
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.security import get_current_user, get_db
from storefront.models.user import User
from storefront.schemas.cart import CartItemQuantityRequest, CartItemRequest, CartView
from storefront.services import cart as cart_service

router = APIRouter()


@router.get("", response_model=CartView)
def get_my_cart(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return cart_service.view_cart(db, current_user.id)


@router.post("/items", response_model=CartView, status_code=status.HTTP_201_CREATED)
def add_item(
    payload: CartItemRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return cart_service.add_item(db, current_user.id, payload.product_id, payload.quantity)


@router.put("/items/{cart_item_id}", response_model=CartView)
def set_item_quantity(
    cart_item_id: int,
    payload: CartItemQuantityRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return cart_service.set_item_quantity(db, current_user.id, cart_item_id, payload.quantity)


@router.delete("/items/{cart_item_id}", response_model=CartView)
def remove_item(cart_item_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return cart_service.remove_item(db, current_user.id, cart_item_id)


@router.delete("")
def clear_my_cart(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if cart_service.clear_cart(db, current_user.id):
        return {"status": "ok", "message": "Cart cleared successfully."}
    return {"status": "ok", "message": "Cart is already empty."}
