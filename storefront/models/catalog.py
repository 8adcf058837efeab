"""
Catalog Models

This module contains the Category and Product models.
"""

from datetime import datetime
from decimal import Decimal
from .database import db

PRODUCT_STATUSES = ('available', 'preorder')


class Category(db.Model):
    """Product grouping shown on /categories"""
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(140), unique=True, nullable=False)
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    products = db.relationship('Product', backref='category', lazy=True)

    def __repr__(self):
        return f'<Category {self.slug}>'


class Product(db.Model):
    """Sellable item; price is the current unit price in store currency"""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    compare_at_price = db.Column(db.Numeric(10, 2))
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'))
    image_url = db.Column(db.String(500))
    stock_quantity = db.Column(db.Integer, default=0, nullable=False)
    status = db.Column(db.String(20), default='available', nullable=False)  # available, preorder
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    is_featured = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def discount_percent(self):
        """Whole-number markdown against compare_at_price, 0 when not discounted"""
        if not self.compare_at_price:
            return 0
        compare = Decimal(self.compare_at_price)
        return int(round((compare - Decimal(self.price)) / compare * 100))

    @property
    def in_stock(self):
        return (self.stock_quantity or 0) > 0

    @property
    def is_preorder(self):
        return self.status == 'preorder'

    def __repr__(self):
        return f'<Product {self.slug}>'
