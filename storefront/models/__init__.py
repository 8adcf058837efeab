"""
Database Models Package

FLOW OVERVIEW
- Centralizes SQLAlchemy DB instance and model imports for convenient usage.
- Exposes: db, User, Admin, ActivationToken, PasswordResetToken, Category, Product,
  CartItem, Address, Order, OrderItem.
"""

from .database import db
from .user import User, Admin, ActivationToken, PasswordResetToken
from .catalog import Category, Product, PRODUCT_STATUSES
from .cart import CartItem
from .order import Address, Order, OrderItem, ORDER_STATUSES, FULFILLMENT_STATUSES, PAYMENT_STATUSES

__all__ = [
    'db',
    'User',
    'Admin',
    'ActivationToken',
    'PasswordResetToken',
    'Category',
    'Product',
    'CartItem',
    'Address',
    'Order',
    'OrderItem',
    'PRODUCT_STATUSES',
    'ORDER_STATUSES',
    'FULFILLMENT_STATUSES',
    'PAYMENT_STATUSES',
]
