"""
Cart Model

One row per (user, product) with a quantity.
"""

from datetime import datetime
from decimal import Decimal
from .database import db


class CartItem(db.Model):
    __tablename__ = 'cart_items'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, default=1, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'product_id', name='unique_user_cart_product'),
    )

    product = db.relationship('Product', lazy='joined')

    @property
    def line_total(self):
        return Decimal(self.product.price) * self.quantity

    @classmethod
    def for_user(cls, user_id):
        """Cart rows for a user, newest first"""
        return (
            cls.query
            .filter_by(user_id=user_id)
            .order_by(cls.created_at.desc(), cls.id.desc())
            .all()
        )

    @classmethod
    def count_for_user(cls, user_id):
        return cls.query.filter_by(user_id=user_id).count()
