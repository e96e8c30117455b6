# storefront/services/catalog.py
# Каталог товаров: чтение, блокировка строк и атомарное списание остатка,
# плюс простой админский CRUD.
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from storefront.core.errors import InsufficientStock, InvalidArgument, ResourceNotFound
from storefront.db.session import atomic
from storefront.models.cart import CartItem
from storefront.models.order import OrderItem
from storefront.models.product import Product
from storefront.schemas.product import ProductIn

logger = logging.getLogger(__name__)


def find_by_id(db: Session, product_id: int) -> Optional[Product]:
    return db.get(Product, product_id)


def get_product(db: Session, product_id: int) -> Product:
    product = find_by_id(db, product_id)
    if product is None:
        raise ResourceNotFound("Product", "id", product_id)
    return product


def lock_products(db: Session, product_ids: Iterable[int]) -> Dict[int, Product]:
    """
    SELECT ... FOR UPDATE по товарам в порядке возрастания id.
    Единый порядок блокировок исключает взаимоблокировку двух checkout'ов.
    На SQLite FOR UPDATE не поддерживается и просто опускается.
    """
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    rows = (
        db.query(Product)
        .filter(Product.id.in_(ids))
        .order_by(Product.id)
        .with_for_update()
        .populate_existing()
        .all()
    )
    return {p.id: p for p in rows}


def decrement_stock(db: Session, product_id: int, amount: int) -> None:
    """
    Атомарно списывает amount единиц: UPDATE ... WHERE stock_quantity >= amount.
    Если ни одна строка не обновилась, остатка не хватило (или товара нет).
    """
    if amount < 1:
        raise InvalidArgument("Stock decrement amount must be at least 1.")
    updated = (
        db.query(Product)
        .filter(Product.id == product_id, Product.stock_quantity >= amount)
        .update(
            {Product.stock_quantity: Product.stock_quantity - amount},
            synchronize_session=False,
        )
    )
    product = find_by_id(db, product_id)
    if product is None:
        raise ResourceNotFound("Product", "id", product_id)
    # Объект в сессии видит остаток до UPDATE, перечитываем
    db.refresh(product)
    if updated != 1:
        raise InsufficientStock(product.name, product.stock_quantity, amount)


def save(db: Session, product: Product) -> Product:
    db.add(product)
    db.flush()
    return product


def list_products(db: Session) -> List[Product]:
    return db.query(Product).order_by(Product.id).all()


def create_product(db: Session, data: ProductIn) -> Product:
    with atomic(db):
        product = save(db, Product(**data.model_dump()))
    db.refresh(product)
    logger.info(f"Product {product.id} '{product.name}' created")
    return product


def update_product(db: Session, product_id: int, data: ProductIn) -> Product:
    with atomic(db):
        product = get_product(db, product_id)
        for field, value in data.model_dump().items():
            setattr(product, field, value)
        save(db, product)
    db.refresh(product)
    logger.info(f"Product {product_id} updated")
    return product


def delete_product(db: Session, product_id: int) -> None:
    with atomic(db):
        product = get_product(db, product_id)
        # Заказы являются журналом аудита, товар из заказа удалять нельзя
        ordered = db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first()
        if ordered is not None:
            raise InvalidArgument(f"Product {product_id} is referenced by existing orders and cannot be deleted.")
        db.query(CartItem).filter(CartItem.product_id == product_id).delete(synchronize_session="fetch")
        db.delete(product)
    logger.info(f"Product {product_id} deleted")
