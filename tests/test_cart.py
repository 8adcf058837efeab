"""
Cart route tests.
"""

from decimal import Decimal

from storefront.models import db, CartItem
from conftest import login


class TestViewCart:

    def test_requires_login(self, client, db_session):
        response = client.get('/cart')
        assert response.status_code == 302
        assert '/auth/login' in response.location
        assert 'redirect=/cart' in response.location or 'redirect=%2Fcart' in response.location

    def test_empty_cart(self, logged_in_client):
        response = logged_in_client.get('/cart')
        assert response.status_code == 200
        assert b'Your cart is empty.' in response.data

    def test_cart_shows_items_and_totals(self, logged_in_client, cart_item):
        response = logged_in_client.get('/cart')
        assert response.status_code == 200
        assert b'Classic Leather Tote' in response.data
        assert b'900.00' in response.data
        assert b'Free' in response.data

    def test_header_shows_cart_row_count(self, logged_in_client, cart_item):
        response = logged_in_client.get('/products')
        assert b'<span class="badge" id="cart-count">1</span>' in response.data


class TestAddToCart:

    def test_anonymous_redirected_to_login_with_product_return(self, client, product):
        response = client.post(f'/cart/add/{product.id}')
        assert response.status_code == 302
        assert '/auth/login' in response.location
        assert product.slug in response.location
        assert CartItem.query.count() == 0

    def test_add_new_item(self, logged_in_client, test_user, product):
        response = logged_in_client.post(f'/cart/add/{product.id}', follow_redirects=True)
        assert response.status_code == 200
        assert b'Added to cart' in response.data

        item = CartItem.query.filter_by(user_id=test_user.id, product_id=product.id).one()
        assert item.quantity == 1

    def test_add_existing_item_increments(self, logged_in_client, cart_item):
        response = logged_in_client.post(f'/cart/add/{cart_item.product_id}', follow_redirects=True)
        assert b'Cart updated' in response.data

        db.session.expire_all()
        assert db.session.get(CartItem, cart_item.id).quantity == 3
        assert CartItem.query.count() == 1

    def test_add_unknown_product(self, logged_in_client):
        response = logged_in_client.post('/cart/add/9999', follow_redirects=True)
        assert b'Product not found.' in response.data


class TestUpdateAndRemove:

    def test_update_quantity(self, logged_in_client, cart_item):
        response = logged_in_client.post(f'/cart/update/{cart_item.id}', data={'quantity': '5'})
        assert response.status_code == 302

        db.session.expire_all()
        assert db.session.get(CartItem, cart_item.id).quantity == 5

    def test_quantity_below_one_is_ignored(self, logged_in_client, cart_item):
        logged_in_client.post(f'/cart/update/{cart_item.id}', data={'quantity': '0'})
        logged_in_client.post(f'/cart/update/{cart_item.id}', data={'quantity': 'abc'})

        db.session.expire_all()
        assert db.session.get(CartItem, cart_item.id).quantity == 2

    def test_cannot_update_someone_elses_item(self, client, cart_item, other_user):
        login(client, other_user)
        response = client.post(f'/cart/update/{cart_item.id}', data={'quantity': '7'}, follow_redirects=True)
        assert b'Cart item not found.' in response.data

        db.session.expire_all()
        assert db.session.get(CartItem, cart_item.id).quantity == 2

    def test_remove_item(self, logged_in_client, cart_item):
        response = logged_in_client.post(f'/cart/remove/{cart_item.id}', follow_redirects=True)
        assert response.status_code == 200
        assert b'Your cart is empty.' in response.data
        assert CartItem.query.count() == 0

    def test_cannot_remove_someone_elses_item(self, client, cart_item, other_user):
        login(client, other_user)
        client.post(f'/cart/remove/{cart_item.id}')
        assert CartItem.query.count() == 1

    def test_line_total_uses_current_price(self, logged_in_client, db_session, cart_item, product):
        product.price = Decimal('100.00')
        db_session.commit()
        response = logged_in_client.get('/cart')
        assert b'200.00' in response.data
