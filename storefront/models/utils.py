"""
Model Utilities

This module contains identifier, token and slug helpers for the models package.
"""

import re
import secrets
import string
import time


def generate_user_id():
    """Generate a unique 12-character user ID"""
    return ''.join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(12))


def generate_activation_token():
    """Generate a secure activation token"""
    return secrets.token_urlsafe(32)


def generate_password_reset_token():
    """Generate a secure password reset token"""
    return secrets.token_urlsafe(32)


def generate_order_number():
    """Generate an order number like ORD-1718000000000-K3J9QX2ZP"""
    suffix = ''.join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


def generate_payment_reference(order_number):
    """Gateway reference for one payment attempt on an order"""
    return f"{order_number}-{int(time.time() * 1000)}"


def slugify(value):
    """Lowercase, collapse non-alphanumerics to '-', strip leading/trailing dashes"""
    value = (value or '').lower()
    value = re.sub(r'[^a-z0-9]+', '-', value)
    return value.strip('-')
