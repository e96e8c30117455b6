# storefront/services/cart.py
# Корзина пользователя: добавление, изменение количества, удаление, очистка, просмотр.
#
# Проверки остатка здесь мягкие (см. inventory.ensure_available): они не дают положить
# в корзину больше, чем видно на складе сейчас, но окончательная проверка выполняется при оформлении.
# Каждая мутация выполняется одной транзакцией с блокировкой строки корзины, чтобы параллельные
# изменения одной корзины не теряли обновления при слиянии количеств.
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.errors import Forbidden, InvalidArgument, ResourceNotFound
from storefront.db.session import atomic
from storefront.models.cart import Cart, CartItem
from storefront.models.user import User
from storefront.schemas.cart import CartItemView, CartView
from storefront.services import catalog
from storefront.services.inventory import ensure_available

logger = logging.getLogger(__name__)


def _find_cart(db: Session, user_id: int, lock: bool = False) -> Optional[Cart]:
    query = db.query(Cart).filter(Cart.user_id == user_id)
    if lock:
        query = query.with_for_update()
    cart = query.first()
    if cart is not None and lock:
        # SQLite не знает FOR UPDATE: запись в строку корзины берёт блокировку записи БД,
        # и позиции ниже читаются уже после того, как конкурент закоммитил
        db.query(Cart).filter(Cart.id == cart.id).update(
            {Cart.updated_at: datetime.utcnow()}, synchronize_session=False
        )
        db.expire(cart)
    return cart


def lock_cart(db: Session, user_id: int) -> Optional[Cart]:
    """Корзина пользователя под блокировкой до конца текущей транзакции (или None)."""
    return _find_cart(db, user_id, lock=True)


def _get_or_create_cart(db: Session, user_id: int, lock: bool = False) -> Cart:
    """Находит корзину или создаёт пустую в текущей транзакции (без commit)."""
    cart = _find_cart(db, user_id, lock)
    if cart is not None:
        return cart
    if db.get(User, user_id) is None:
        raise ResourceNotFound("User", "id", user_id)
    cart = Cart(user_id=user_id)
    db.add(cart)
    try:
        db.flush()
    except IntegrityError:
        # Параллельный первый доступ уже создал корзину (UNIQUE user_id)
        db.rollback()
        cart = _find_cart(db, user_id, lock)
        if cart is None:
            raise
        return cart
    logger.info(f"Cart {cart.id} created for user {user_id}")
    return cart


def _owned_item(db: Session, cart: Cart, cart_item_id: int) -> CartItem:
    item = db.get(CartItem, cart_item_id)
    if item is None:
        raise ResourceNotFound("CartItem", "id", cart_item_id)
    if item.cart_id != cart.id:
        raise Forbidden(f"Cart item with ID {cart_item_id} does not belong to the current user's cart.")
    return item


def _to_view(cart: Cart) -> CartView:
    items = [
        CartItemView(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product.name,
            image_url=item.product.image_url,
            quantity=item.quantity,
            price=item.price,
            subtotal=item.subtotal,
        )
        for item in cart.items
    ]
    total = sum((item.subtotal for item in items), Decimal("0.00"))
    return CartView(id=cart.id, user_id=cart.user_id, items=items, total_price=total)


def get_or_create_cart(db: Session, user_id: int) -> Cart:
    """Возвращает корзину пользователя; при первом обращении создаёт и сохраняет пустую."""
    with atomic(db):
        cart = _get_or_create_cart(db, user_id)
    return cart


def add_item(db: Session, user_id: int, product_id: int, quantity: int) -> CartView:
    """
    Добавляет товар в корзину. Если товар уже есть, количества складываются,
    и остаток проверяется на суммарное количество. Снимок цены обновляется
    текущей ценой каталога.
    """
    if quantity is None or quantity < 1:
        raise InvalidArgument("Quantity must be at least 1.")

    with atomic(db):
        cart = _get_or_create_cart(db, user_id, lock=True)
        product = catalog.get_product(db, product_id)
        ensure_available(product, quantity)

        existing = next((item for item in cart.items if item.product_id == product.id), None)
        if existing is not None:
            new_quantity = existing.quantity + quantity
            ensure_available(product, new_quantity, in_cart=existing.quantity)
            existing.quantity = new_quantity
            existing.price = product.price
        else:
            cart.items.append(
                CartItem(cart_id=cart.id, product_id=product.id, quantity=quantity, price=product.price)
            )
        db.flush()

    logger.info(f"User {user_id} added {quantity} x product {product_id} to cart {cart.id}")
    return _to_view(cart)


def set_item_quantity(db: Session, user_id: int, cart_item_id: int, quantity: int) -> CartView:
    """Устанавливает абсолютное количество; 0 и меньше равносильно remove_item."""
    if quantity <= 0:
        return remove_item(db, user_id, cart_item_id)

    with atomic(db):
        cart = _get_or_create_cart(db, user_id, lock=True)
        item = _owned_item(db, cart, cart_item_id)
        product = catalog.get_product(db, item.product_id)
        ensure_available(product, quantity)
        item.quantity = quantity
        item.price = product.price
        db.flush()

    return _to_view(cart)


def remove_item(db: Session, user_id: int, cart_item_id: int) -> CartView:
    with atomic(db):
        cart = _get_or_create_cart(db, user_id, lock=True)
        item = _owned_item(db, cart, cart_item_id)
        cart.items.remove(item)
        db.flush()

    logger.info(f"Cart item {cart_item_id} removed from cart {cart.id}")
    return _to_view(cart)


def view_cart(db: Session, user_id: int) -> CartView:
    with atomic(db):
        cart = _get_or_create_cart(db, user_id)
    return _to_view(cart)


def clear_cart(db: Session, user_id: int) -> bool:
    """Удаляет все позиции. Возвращает False, если корзина уже была пуста (это не ошибка)."""
    with atomic(db):
        cart = _get_or_create_cart(db, user_id, lock=True)
        if not cart.items:
            return False
        removed = len(cart.items)
        cart.items.clear()
        db.flush()

    logger.info(f"Cart {cart.id} cleared ({removed} items)")
    return True
