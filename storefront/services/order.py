# storefront/services/order.py
# Оформление заказа из корзины и жизненный цикл статуса заказа.
#
# place_order: единственная настоящая критическая секция. Корзина и строки товаров
# блокируются в фиксированном порядке, остаток перепроверяется по живым данным, затем
# списание, создание заказа и очистка корзины коммитятся одной транзакцией.
import logging
from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from storefront.core.errors import InvalidArgument, ResourceNotFound
from storefront.db.session import atomic
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.user import User
from storefront.schemas.order import OrderItemView, OrderView
from storefront.services import cart as cart_service
from storefront.services import catalog
from storefront.services.inventory import ensure_available

logger = logging.getLogger(__name__)


def _to_view(order: Order) -> OrderView:
    items = [
        OrderItemView(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product.name,
            image_url=item.product.image_url,
            quantity=item.quantity,
            price_at_purchase=item.price_at_purchase,
            subtotal=item.price_at_purchase * item.quantity,
        )
        for item in order.items
    ]
    total = sum((item.subtotal for item in items), Decimal("0.00"))
    return OrderView(
        id=order.id,
        user_id=order.user_id,
        user_email=order.user.email,
        order_date=order.order_date,
        total_amount=total,
        status=order.status,
        items=items,
    )


def place_order(db: Session, user_id: int) -> OrderView:
    """
    Превращает корзину пользователя в заказ со статусом PENDING и очищает корзину.

    Списание остатков, создание заказа и очистка корзины коммитятся вместе, пока
    строка корзины заблокирована: повторный checkout той же корзины увидит её пустой.
    Ошибки (ResourceNotFound, InvalidArgument, InsufficientStock) откатывают
    транзакцию целиком: остатки не списываются, заказ не создаётся, корзина не меняется.
    """
    with atomic(db):
        user = db.get(User, user_id)
        if user is None:
            raise ResourceNotFound("User", "id", user_id)
        cart = cart_service.lock_cart(db, user_id)
        if cart is None:
            raise ResourceNotFound("Cart", "user id", user_id)
        if not cart.items:
            raise InvalidArgument("Cannot place an order for an empty cart.")

        products = catalog.lock_products(db, [item.product_id for item in cart.items])

        # Жёсткая проверка по всем позициям до любой записи
        for item in cart.items:
            product = products.get(item.product_id)
            if product is None:
                raise ResourceNotFound("Product", "id", item.product_id)
            ensure_available(product, item.quantity)

        order = Order(user_id=user.id, order_date=datetime.utcnow(), status=OrderStatus.PENDING)
        total = Decimal("0.00")
        for item in cart.items:
            product = products[item.product_id]
            catalog.decrement_stock(db, product.id, item.quantity)
            price = product.price
            subtotal = price * item.quantity
            order.items.append(
                OrderItem(
                    product_id=product.id,
                    quantity=item.quantity,
                    price_at_purchase=price,
                    subtotal=subtotal,
                )
            )
            total += subtotal
        order.total_amount = total
        db.add(order)
        cart.items.clear()
        db.flush()
        order_id = order.id

    logger.info(f"✅ Order {order_id} placed by user {user_id}: total {total}")
    return _to_view(db.get(Order, order_id))


def get_my_orders(db: Session, user_id: int) -> List[OrderView]:
    orders = (
        db.query(Order)
        .filter(Order.user_id == user_id)
        .order_by(Order.order_date.desc(), Order.id.desc())
        .all()
    )
    return [_to_view(order) for order in orders]


def get_order_details(db: Session, user_id: int, order_id: int) -> OrderView:
    """Чужой заказ выглядит как несуществующий, чтобы не раскрывать его наличие."""
    order = db.get(Order, order_id)
    if order is None or order.user_id != user_id:
        raise ResourceNotFound("Order", "id", order_id)
    return _to_view(order)


def get_all_orders(db: Session) -> List[OrderView]:
    return [_to_view(order) for order in db.query(Order).order_by(Order.id).all()]


def update_order_status(db: Session, order_id: int, new_status: str) -> OrderView:
    """Любой статус может смениться на любой другой; проверяется только допустимость значения."""
    with atomic(db):
        order = db.get(Order, order_id)
        if order is None:
            raise ResourceNotFound("Order", "id", order_id)
        try:
            status = OrderStatus(new_status)
        except ValueError:
            raise InvalidArgument(f"Invalid order status: {new_status}")
        previous = order.status
        order.status = status

    logger.info(f"Order {order_id} status changed: {previous.value} -> {status.value}")
    return _to_view(order)
