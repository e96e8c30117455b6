# storefront/models/cart.py
# Корзина (одна на пользователя) и её элементы.
# CartItem хранит снимок цены на момент последнего изменения, а не живую цену каталога.
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from storefront.db.base import Base


class Cart(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Удаление элемента из коллекции удаляет его и из БД (delete-orphan)
    items = relationship(
        "CartItem",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(12, 2), nullable=False)
    added_at = Column(DateTime, default=datetime.utcnow)

    product = relationship("Product")

    @property
    def subtotal(self):
        return self.price * self.quantity
