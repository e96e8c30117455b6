"""Tests for the cart engine: soft stock checks, merges, ownership and clearing."""

from decimal import Decimal

import pytest

from storefront.core.errors import Forbidden, InsufficientStock, InvalidArgument, ResourceNotFound
from storefront.models.cart import Cart, CartItem
from storefront.models.product import Product
from storefront.services import cart as cart_service


class TestGetOrCreateCart:
    def test_creates_cart_lazily(self, db, make_user):
        user = make_user()
        assert db.query(Cart).count() == 0

        cart = cart_service.get_or_create_cart(db, user.id)

        assert cart.user_id == user.id
        assert db.query(Cart).count() == 1

    def test_returns_existing_cart(self, db, make_user):
        user = make_user()
        first = cart_service.get_or_create_cart(db, user.id)
        second = cart_service.get_or_create_cart(db, user.id)
        assert first.id == second.id
        assert db.query(Cart).count() == 1

    def test_unknown_user(self, db):
        with pytest.raises(ResourceNotFound):
            cart_service.get_or_create_cart(db, 999)


class TestViewCart:
    def test_empty_cart_has_zero_total(self, db, make_user):
        user = make_user()
        view = cart_service.view_cart(db, user.id)
        assert view.items == []
        assert view.total_price == Decimal("0.00")
        assert view.user_id == user.id

    def test_subtotals_use_price_snapshot(self, db, make_user, make_product):
        user = make_user()
        product = make_product(price="10.00", stock=10)
        cart_service.add_item(db, user.id, product.id, 2)

        # Меняется только живая цена, снимок в корзине остаётся прежним
        live = db.get(Product, product.id)
        live.price = Decimal("99.00")
        db.commit()

        view = cart_service.view_cart(db, user.id)
        assert view.items[0].price == Decimal("10.00")
        assert view.items[0].subtotal == Decimal("20.00")
        assert view.total_price == Decimal("20.00")


class TestAddItem:
    def test_add_to_empty_cart(self, db, make_user, make_product):
        user = make_user()
        product = make_product(name="Mug", price="7.50", stock=5)

        view = cart_service.add_item(db, user.id, product.id, 3)

        assert len(view.items) == 1
        item = view.items[0]
        assert item.product_id == product.id
        assert item.product_name == "Mug"
        assert item.quantity == 3
        assert item.subtotal == Decimal("22.50")
        assert view.total_price == Decimal("22.50")

    def test_same_product_merges_into_one_item(self, db, make_user, make_product):
        user = make_user()
        product = make_product(stock=5)

        cart_service.add_item(db, user.id, product.id, 2)
        view = cart_service.add_item(db, user.id, product.id, 3)

        assert len(view.items) == 1
        assert view.items[0].quantity == 5
        assert db.query(CartItem).count() == 1

    def test_merge_over_stock_is_rejected_and_cart_unchanged(self, db, make_user, make_product):
        user = make_user()
        product = make_product(name="Lamp", stock=5)
        cart_service.add_item(db, user.id, product.id, 3)

        with pytest.raises(InsufficientStock) as exc_info:
            cart_service.add_item(db, user.id, product.id, 3)

        assert exc_info.value.product_name == "Lamp"
        assert exc_info.value.available == 5
        assert exc_info.value.requested == 6
        view = cart_service.view_cart(db, user.id)
        assert [item.quantity for item in view.items] == [3]

    def test_more_than_stock_is_rejected(self, db, make_user, make_product):
        user = make_user()
        product = make_product(stock=2)

        with pytest.raises(InsufficientStock) as exc_info:
            cart_service.add_item(db, user.id, product.id, 3)

        assert exc_info.value.requested == 3
        assert cart_service.view_cart(db, user.id).items == []

    def test_merge_refreshes_price_snapshot(self, db, make_user, make_product):
        user = make_user()
        product = make_product(price="10.00", stock=10)
        cart_service.add_item(db, user.id, product.id, 1)

        live = db.get(Product, product.id)
        live.price = Decimal("12.00")
        db.commit()

        view = cart_service.add_item(db, user.id, product.id, 1)
        assert view.items[0].price == Decimal("12.00")
        assert view.total_price == Decimal("24.00")

    def test_items_keep_insertion_order(self, db, make_user, make_product):
        user = make_user()
        first = make_product(stock=5)
        second = make_product(stock=5)

        cart_service.add_item(db, user.id, second.id, 1)
        view = cart_service.add_item(db, user.id, first.id, 1)

        assert [item.product_id for item in view.items] == [second.id, first.id]

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, db, make_user, make_product, quantity):
        user = make_user()
        product = make_product()
        with pytest.raises(InvalidArgument):
            cart_service.add_item(db, user.id, product.id, quantity)

    def test_unknown_product(self, db, make_user):
        user = make_user()
        with pytest.raises(ResourceNotFound):
            cart_service.add_item(db, user.id, 12345, 1)


class TestSetItemQuantity:
    def test_sets_absolute_quantity(self, db, make_user, make_product):
        user = make_user()
        product = make_product(stock=10)
        view = cart_service.add_item(db, user.id, product.id, 2)

        view = cart_service.set_item_quantity(db, user.id, view.items[0].id, 7)

        assert view.items[0].quantity == 7

    def test_checks_new_quantity_not_increment(self, db, make_user, make_product):
        user = make_user()
        product = make_product(stock=5)
        view = cart_service.add_item(db, user.id, product.id, 4)
        item_id = view.items[0].id

        # 5 в сумме с 4 превысило бы остаток, но проверяется абсолютное значение
        assert cart_service.set_item_quantity(db, user.id, item_id, 5).items[0].quantity == 5
        with pytest.raises(InsufficientStock):
            cart_service.set_item_quantity(db, user.id, item_id, 6)
        assert cart_service.view_cart(db, user.id).items[0].quantity == 5

    def test_zero_removes_item(self, db, make_user, make_product):
        user = make_user()
        product = make_product()
        view = cart_service.add_item(db, user.id, product.id, 1)

        view = cart_service.set_item_quantity(db, user.id, view.items[0].id, 0)

        assert view.items == []
        assert db.query(CartItem).count() == 0

    def test_refreshes_price_snapshot(self, db, make_user, make_product):
        user = make_user()
        product = make_product(price="3.00", stock=10)
        view = cart_service.add_item(db, user.id, product.id, 1)

        live = db.get(Product, product.id)
        live.price = Decimal("4.00")
        db.commit()

        view = cart_service.set_item_quantity(db, user.id, view.items[0].id, 2)
        assert view.items[0].price == Decimal("4.00")
        assert view.items[0].subtotal == Decimal("8.00")

    def test_foreign_item(self, db, make_user, make_product):
        owner, intruder = make_user(), make_user()
        product = make_product()
        view = cart_service.add_item(db, owner.id, product.id, 1)

        with pytest.raises(Forbidden):
            cart_service.set_item_quantity(db, intruder.id, view.items[0].id, 2)


class TestRemoveItem:
    def test_removes_item(self, db, make_user, make_product):
        user = make_user()
        keep, drop = make_product(), make_product()
        cart_service.add_item(db, user.id, keep.id, 1)
        view = cart_service.add_item(db, user.id, drop.id, 1)
        drop_item_id = view.items[1].id

        view = cart_service.remove_item(db, user.id, drop_item_id)

        assert [item.product_id for item in view.items] == [keep.id]
        assert db.get(CartItem, drop_item_id) is None

    def test_missing_item(self, db, make_user):
        user = make_user()
        with pytest.raises(ResourceNotFound):
            cart_service.remove_item(db, user.id, 404)

    def test_item_of_another_user(self, db, make_user, make_product):
        owner, intruder = make_user(), make_user()
        product = make_product()
        view = cart_service.add_item(db, owner.id, product.id, 1)

        with pytest.raises(Forbidden):
            cart_service.remove_item(db, intruder.id, view.items[0].id)

        assert len(cart_service.view_cart(db, owner.id).items) == 1


class TestClearCart:
    def test_clear_removes_all_items(self, db, make_user, make_product):
        user = make_user()
        cart_service.add_item(db, user.id, make_product().id, 1)
        cart_service.add_item(db, user.id, make_product().id, 2)

        assert cart_service.clear_cart(db, user.id) is True

        assert cart_service.view_cart(db, user.id).items == []
        assert db.query(CartItem).count() == 0
        # Сама корзина не удаляется
        assert db.query(Cart).count() == 1

    def test_clear_is_idempotent(self, db, make_user):
        user = make_user()
        assert cart_service.clear_cart(db, user.id) is False
        assert cart_service.clear_cart(db, user.id) is False
