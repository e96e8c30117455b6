# storefront/api/orders.py
# Роуты заказов: оформление и просмотр своих заказов, админский список и смена статуса.
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.core.security import get_current_user, get_db, require_admin
from storefront.models.user import User
from storefront.schemas.order import OrderStatusUpdate, OrderView
from storefront.services import order as order_service

router = APIRouter()


@router.post("", response_model=OrderView, status_code=status.HTTP_201_CREATED)
def place_order(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.place_order(db, current_user.id)


@router.get("", response_model=List[OrderView])
def get_my_orders(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.get_my_orders(db, current_user.id)


# Объявлен до /{order_id}, иначе "all" попадёт в параметр пути
@router.get("/all", response_model=List[OrderView], dependencies=[Depends(require_admin)])
def get_all_orders(db: Session = Depends(get_db)):
    return order_service.get_all_orders(db)


@router.get("/{order_id}", response_model=OrderView)
def get_order_details(order_id: int, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.get_order_details(db, current_user.id, order_id)


@router.put("/{order_id}/status", response_model=OrderView, dependencies=[Depends(require_admin)])
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    return order_service.update_order_status(db, order_id, payload.status)
