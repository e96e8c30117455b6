import itertools
import os
import tempfile
from decimal import Decimal
from pathlib import Path

# Настройки читаются при импорте пакета, поэтому окружение задаётся до него
_tmp_dir = Path(tempfile.mkdtemp(prefix="storefront-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'storefront.db'}"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from storefront.db.base import Base
from storefront.db.session import SessionLocal, engine
from storefront.models.product import Product
from storefront.models.user import RoleEnum, User

import storefront.models.cart  # noqa: F401
import storefront.models.order  # noqa: F401

_counter = itertools.count(1)


@pytest.fixture(autouse=True)
def setup_db():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make_user(email=None, role=RoleEnum.user):
        user = User(
            email=email or f"user{next(_counter)}@example.com",
            hashed_password="not-a-real-hash",
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_product(db):
    def _make_product(name=None, price="10.00", stock=5, image_url=None):
        product = Product(
            name=name or f"Product {next(_counter)}",
            price=Decimal(price),
            stock_quantity=stock,
            image_url=image_url,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture
def stock_of():
    """Reads the committed stock level through an independent session."""
    def _stock_of(product_id):
        session = SessionLocal()
        try:
            return session.get(Product, product_id).stock_quantity
        finally:
            session.close()

    return _stock_of
