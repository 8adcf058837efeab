"""
Routes Package

This package contains all Flask route blueprints.
"""

from .main import main_bp
from .auth import auth_bp
from .catalog import catalog_bp
from .cart import cart_bp
from .checkout import checkout_bp
from .account import account_bp
from .admin import admin_bp
from .api import api_bp

__all__ = [
    'main_bp',
    'auth_bp',
    'catalog_bp',
    'cart_bp',
    'checkout_bp',
    'account_bp',
    'admin_bp',
    'api_bp',
]
