"""
Database Configuration

FLOW OVERVIEW
- Provides the global SQLAlchemy instance `db` used across all models.
- Initialized in app factory (storefront/__init__.py) with app context.
- STORE_TABLES lists the tables the setup page checks for.
"""

from flask_sqlalchemy import SQLAlchemy

# Create SQLAlchemy instance
db = SQLAlchemy()

STORE_TABLES = ('products', 'categories', 'orders', 'cart_items', 'admins')
