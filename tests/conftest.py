"""
Test configuration and shared fixtures for storefront tests.

This file contains:
- Centralized test configuration
- Shared fixtures used across multiple test files
- Common test utilities
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from storefront import create_app
from storefront.models import (
    db, User, Admin, ActivationToken, PasswordResetToken,
    Category, Product, CartItem, Address, Order, OrderItem,
)
from storefront.models.utils import generate_order_number
from storefront.utils.auth_utils import hash_password


TEST_PASSWORD = 'TestPass123!'

# Centralized test configuration
TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SECRET_KEY': 'test-secret-key',
    'SERVER_NAME': 'localhost',
    'MAIL_SERVER': 'localhost',
    'MAIL_PORT': 587,
    'MAIL_USE_TLS': False,
    'MAIL_USE_SSL': False,
    'MAIL_USERNAME': 'test@example.com',
    'MAIL_PASSWORD': 'test-password',
    'MAIL_DEFAULT_SENDER': 'store@example.com',
    'SUPPORT_EMAIL': 'support@example.com',
    'PAYSTACK_SECRET_KEY': 'sk_test_secret',
    'PAYSTACK_PUBLIC_KEY': 'pk_test_public',
    'PAYSTACK_BASE_URL': 'https://api.paystack.test',
    'BCRYPT_LOG_ROUNDS': 4,
    'SETUP_ENABLED': True,
    'AUTO_ACTIVATE_USERS': False,
}


@pytest.fixture
def app(tmp_path):
    """Create and configure a new app instance for each test."""
    config = dict(TEST_CONFIG, UPLOAD_FOLDER=str(tmp_path / 'uploads'))
    app = create_app(config)
    return app


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


@pytest.fixture
def app_context(app):
    """Create an application context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def db_session(app_context):
    """Create a database session and clean up after tests."""
    db.create_all()
    yield db.session
    db.session.remove()
    db.drop_all()


def login(client, user):
    """Put a user's public id in the session the way login_user does"""
    with client.session_transaction() as sess:
        sess['user_id'] = user.user_id
        sess['user_email'] = user.email


@pytest.fixture
def test_user(db_session):
    """Create an active customer."""
    user = User(
        email='test@example.com',
        password_hash=hash_password(TEST_PASSWORD),
        full_name='Ama Mensah',
        phone='0241234567',
    )
    user.status = 'active'
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def other_user(db_session):
    """Create a second active customer."""
    user = User(email='other@example.com', password_hash=hash_password(TEST_PASSWORD))
    user.status = 'active'
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def test_user_inactive(db_session):
    """Create an inactive test user for testing."""
    user = User(
        email='inactive@example.com',
        password_hash=hash_password(TEST_PASSWORD)
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    """Create an active user with an admins row."""
    user = User(email='admin@example.com', password_hash=hash_password(TEST_PASSWORD),
                full_name='Store Admin')
    user.status = 'active'
    db_session.add(user)
    db_session.flush()
    db_session.add(Admin(user_id=user.id))
    db_session.commit()
    return user


@pytest.fixture
def logged_in_client(client, test_user):
    login(client, test_user)
    return client


@pytest.fixture
def admin_client(client, admin_user):
    login(client, admin_user)
    return client


@pytest.fixture
def activation_token(db_session, test_user_inactive):
    """Create an activation token for the inactive user."""
    token = ActivationToken(test_user_inactive.id)
    db_session.add(token)
    db_session.commit()
    return token


@pytest.fixture
def expired_activation_token(db_session, test_user_inactive):
    """Create an expired activation token for testing."""
    token = ActivationToken(test_user_inactive.id)
    token.expires_at = datetime.utcnow() - timedelta(hours=2)
    db_session.add(token)
    db_session.commit()
    return token


@pytest.fixture
def password_reset_token(db_session, test_user):
    """Create a password reset token for testing."""
    token = PasswordResetToken(test_user.id)
    db_session.add(token)
    db_session.commit()
    return token


@pytest.fixture
def used_password_reset_token(db_session, test_user):
    """Create a used password reset token for testing."""
    token = PasswordResetToken(test_user.id)
    token.used = True
    db_session.add(token)
    db_session.commit()
    return token


@pytest.fixture
def category(db_session):
    category = Category(name='Handbags', slug='handbags', description='Leather and fashion bags')
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture
def product(db_session, category):
    """An in-stock, featured, discounted product."""
    product = Product(
        name='Classic Leather Tote',
        slug='classic-leather-tote',
        description='Full grain leather tote.',
        price=Decimal('450.00'),
        compare_at_price=Decimal('500.00'),
        category_id=category.id,
        stock_quantity=12,
        status='available',
        is_active=True,
        is_featured=True,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture
def preorder_product(db_session, category):
    """An out-of-stock pre-order product."""
    product = Product(
        name='Mini Crossbody Bag',
        slug='mini-crossbody-bag',
        description='Arrives next month.',
        price=Decimal('220.00'),
        category_id=category.id,
        stock_quantity=0,
        status='preorder',
        is_active=True,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture
def cart_item(db_session, test_user, product):
    item = CartItem(user_id=test_user.id, product_id=product.id, quantity=2)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture
def address(db_session, test_user):
    address = Address(
        user_id=test_user.id,
        full_name='Ama Mensah',
        phone='0241234567',
        address_line1='12 Oxford Street',
        city='Accra',
        state='Greater Accra',
        postal_code='GA-123',
        country='Ghana',
    )
    db_session.add(address)
    db_session.commit()
    return address


@pytest.fixture
def order(db_session, test_user, product, address):
    """A pending order with one line of two units."""
    order = Order(
        user_id=test_user.id,
        email=test_user.email,
        order_number=generate_order_number(),
        total_amount=Decimal('900.00'),
        shipping_address_id=address.id,
        status='pending',
        payment_status='pending',
    )
    db_session.add(order)
    db_session.flush()
    db_session.add(OrderItem(order_id=order.id, product_id=product.id, quantity=2, price=Decimal('450.00')))
    db_session.commit()
    return order
