# storefront/services/inventory.py
# Общая проверка остатка для корзины (мягкая) и оформления заказа (жёсткая).
#
# Мягкая проверка выполняется при изменении корзины и не является источником истины:
# остаток может измениться между добавлением в корзину и оформлением заказа.
# Жёсткая проверка выполняется в транзакции checkout после блокировки строк товаров.
import logging
from typing import Optional

from storefront.core.errors import InsufficientStock
from storefront.models.product import Product

logger = logging.getLogger(__name__)


def ensure_available(product: Product, requested: int, *, in_cart: Optional[int] = None) -> None:
    """
    Бросает InsufficientStock, если на складе меньше requested единиц.

    in_cart: сколько уже лежит в корзине (только для лога при слиянии позиций).
    """
    available = product.stock_quantity
    if available >= requested:
        return
    if in_cart is not None:
        logger.warning(
            f"Stock check failed for product {product.id}: requested {requested} "
            f"({in_cart} already in cart), available {available}"
        )
    else:
        logger.warning(
            f"Stock check failed for product {product.id}: requested {requested}, available {available}"
        )
    raise InsufficientStock(product.name, available, requested)
