"""
Model tests: identifiers, computed properties and query helpers.
"""

import re
import time
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from storefront.models import User, CartItem, Order, Product
from storefront.models.utils import (
    generate_user_id, generate_order_number, generate_payment_reference, slugify
)
from storefront.models.seed import seed_sample_data, SAMPLE_CATEGORIES, SAMPLE_PRODUCTS
from storefront.utils.auth_utils import hash_password


class TestIdentifiers:

    def test_user_id_format(self):
        assert re.fullmatch(r'[A-Z0-9]{12}', generate_user_id())

    def test_order_number_format(self):
        before = int(time.time() * 1000)
        number = generate_order_number()
        match = re.fullmatch(r'ORD-(\d+)-([A-Z0-9]{9})', number)
        assert match
        assert int(match.group(1)) >= before

    def test_order_numbers_are_unique(self):
        assert len({generate_order_number() for _ in range(50)}) == 50

    def test_payment_reference_prefixed_by_order_number(self):
        reference = generate_payment_reference('ORD-1-ABCDEFGHI')
        assert re.fullmatch(r'ORD-1-ABCDEFGHI-\d+', reference)

    @pytest.mark.parametrize("value, expected", [
        ("Home & Kitchen", "home-kitchen"),
        ("  Classic Leather Tote ", "classic-leather-tote"),
        ("--Already-Slugged--", "already-slugged"),
        ("", ""),
    ])
    def test_slugify(self, value, expected):
        assert slugify(value) == expected


class TestUserModel:

    def test_new_user_is_inactive_with_lowercase_email(self, db_session):
        user = User(email='New.User@Example.com', password_hash=hash_password('TestPass123!'))
        db_session.add(user)
        db_session.commit()

        assert user.email == 'new.user@example.com'
        assert user.status == 'inactive'
        assert not user.is_active()
        assert len(user.user_id) == 12

    def test_invalid_email_raises(self, db_session):
        with pytest.raises(ValueError):
            User(email='not-an-email', password_hash='hash')

    def test_missing_password_hash_raises(self, db_session):
        with pytest.raises(ValueError):
            User(email='ok@example.com', password_hash='')

    def test_is_admin(self, test_user, admin_user):
        assert not test_user.is_admin()
        assert admin_user.is_admin()

    def test_display_name_falls_back_to_email(self, test_user, other_user):
        assert test_user.display_name == 'Ama Mensah'
        assert other_user.display_name == 'other@example.com'

    def test_activation_token_expiry(self, activation_token, expired_activation_token):
        assert activation_token.is_valid()
        assert not expired_activation_token.is_valid()


class TestProductModel:

    def test_discount_percent(self, product):
        # (500 - 450) / 500
        assert product.discount_percent == 10

    def test_discount_percent_rounds(self, db_session, category):
        product = Product(name='X', slug='x', price=Decimal('310.00'),
                          compare_at_price=Decimal('380.00'), category_id=category.id)
        db_session.add(product)
        db_session.commit()
        assert product.discount_percent == 18

    def test_no_discount_without_compare_price(self, preorder_product):
        assert preorder_product.discount_percent == 0

    def test_stock_and_preorder_flags(self, product, preorder_product):
        assert product.in_stock
        assert not product.is_preorder
        assert not preorder_product.in_stock
        assert preorder_product.is_preorder


class TestCartModel:

    def test_line_total(self, cart_item):
        assert cart_item.line_total == Decimal('900.00')

    def test_for_user_newest_first(self, db_session, test_user, product, preorder_product):
        older = CartItem(user_id=test_user.id, product_id=product.id, quantity=1,
                         created_at=datetime.utcnow() - timedelta(minutes=5))
        newer = CartItem(user_id=test_user.id, product_id=preorder_product.id, quantity=1)
        db_session.add_all([older, newer])
        db_session.commit()

        items = CartItem.for_user(test_user.id)
        assert [i.product_id for i in items] == [preorder_product.id, product.id]
        assert CartItem.count_for_user(test_user.id) == 2

    def test_unique_user_product(self, db_session, cart_item):
        db_session.add(CartItem(user_id=cart_item.user_id, product_id=cart_item.product_id, quantity=1))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestOrderModel:

    def test_amount_in_subunits(self, order):
        assert order.amount_in_subunits == 90000

    def test_amount_in_subunits_rounds(self, db_session, order):
        order.total_amount = Decimal('10.99')
        db_session.commit()
        assert order.amount_in_subunits == 1099

    def test_order_type_follows_first_item(self, db_session, order, preorder_product):
        assert order.order_type == 'available'

        first = order.items[0]
        first.product_id = preorder_product.id
        db_session.commit()
        db_session.expire_all()
        assert db_session.get(Order, order.id).order_type == 'preorder'

    def test_for_user_scopes_to_owner(self, order, test_user, other_user):
        assert Order.for_user(order.id, test_user.id) is not None
        assert Order.for_user(order.id, other_user.id) is None

    def test_item_line_total_uses_captured_price(self, db_session, order, product):
        product.price = Decimal('999.00')
        db_session.commit()
        assert order.items[0].line_total == Decimal('900.00')


class TestSeedData:

    def test_seed_is_idempotent(self, db_session):
        added = seed_sample_data()
        assert added == len(SAMPLE_CATEGORIES) + len(SAMPLE_PRODUCTS)
        assert seed_sample_data() == 0
        assert Product.query.filter_by(is_featured=True).count() >= 1
