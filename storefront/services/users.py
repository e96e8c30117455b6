# storefront/services/users.py
# Администрирование пользователей: просмотр, изменение профиля и роли, удаление.
# Пользователь с заказами не удаляется: заказы остаются историей продаж.
import logging
from typing import List

from sqlalchemy.orm import Session

from storefront.core.errors import InvalidArgument, ResourceNotFound
from storefront.db.session import atomic
from storefront.models.cart import Cart
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.id).all()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise ResourceNotFound("User", "id", user_id)
    return user


def update_user(db: Session, user_id: int, payload: UserUpdate) -> User:
    """Меняет только переданные поля; новый email не должен принадлежать другому пользователю."""
    changes = payload.model_dump(exclude_unset=True)
    with atomic(db):
        user = get_user(db, user_id)
        email = changes.get("email")
        if email is not None and email != user.email:
            taken = db.query(User).filter(User.email == email, User.id != user_id).first()
            if taken is not None:
                raise InvalidArgument("Email already registered")
        for field, value in changes.items():
            if value is None and field in ("email", "role"):
                continue
            setattr(user, field, value)
    db.refresh(user)
    logger.info(f"User {user_id} updated: {sorted(changes)}")
    return user


def delete_user(db: Session, user_id: int) -> None:
    """Удаляет пользователя вместе с корзиной. Пользователя с заказами удалить нельзя."""
    with atomic(db):
        user = get_user(db, user_id)
        if db.query(Order).filter(Order.user_id == user_id).first() is not None:
            raise InvalidArgument(f"User with ID {user_id} has orders and cannot be deleted.")
        cart = db.query(Cart).filter(Cart.user_id == user_id).first()
        if cart is not None:
            # Позиции уходят вместе с корзиной (delete-orphan)
            db.delete(cart)
            db.flush()
        db.delete(user)
    logger.warning(f"🗑️ User {user_id} deleted")
