"""
Order Models

This module contains the Address, Order and OrderItem models.
"""

from datetime import datetime
from decimal import Decimal
from .database import db

ORDER_STATUSES = ('pending', 'processing', 'shipped', 'delivered', 'completed', 'cancelled')
FULFILLMENT_STATUSES = ('pending', 'processing', 'shipped', 'delivered', 'cancelled')
PAYMENT_STATUSES = ('pending', 'paid', 'failed', 'cancelled')


class Address(db.Model):
    """Saved shipping address"""
    __tablename__ = 'addresses'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    full_name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    address_line1 = db.Column(db.String(200), nullable=False)
    address_line2 = db.Column(db.String(200))
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(100), nullable=False)
    postal_code = db.Column(db.String(20), nullable=False)
    country = db.Column(db.String(80), default='Ghana', nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def one_line(self):
        return f"{self.address_line1}, {self.city}, {self.state} {self.postal_code}"


class Order(db.Model):
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    order_number = db.Column(db.String(40), unique=True, nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    shipping_address_id = db.Column(db.Integer, db.ForeignKey('addresses.id'))
    notes = db.Column(db.Text)
    status = db.Column(db.String(20), default='pending', nullable=False)
    payment_status = db.Column(db.String(20), default='pending', nullable=False)
    payment_reference = db.Column(db.String(100))
    transaction_ref = db.Column(db.String(100))
    email_sent = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    shipping_address = db.relationship('Address', lazy='joined')
    items = db.relationship('OrderItem', backref='order', lazy=True, cascade='all, delete-orphan',
                            order_by='OrderItem.id')

    @property
    def is_paid(self):
        return self.payment_status == 'paid'

    @property
    def amount_in_subunits(self):
        """Total in pesewas/kobo as the payment gateway expects it"""
        return int((Decimal(self.total_amount) * 100).quantize(Decimal('1')))

    @property
    def order_type(self):
        """'preorder' when the first item is a pre-order product, else 'available'"""
        if self.items and self.items[0].product is not None:
            return self.items[0].product.status
        return 'available'

    @classmethod
    def for_user(cls, order_id, user_id):
        return cls.query.filter_by(id=order_id, user_id=user_id).first()


class OrderItem(db.Model):
    """Line item; price is the unit price captured when the order was placed"""
    __tablename__ = 'order_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)

    product = db.relationship('Product', lazy='joined')

    @property
    def line_total(self):
        return Decimal(self.price) * self.quantity
