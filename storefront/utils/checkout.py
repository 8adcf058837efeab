"""
Checkout and Order Updates

FLOW OVERVIEW
- cart_summary(cart_items)
  • Subtotal, shipping (flat 0) and total for a list of cart rows.
- place_order(user, cart_items, form)
  • Sequential writes: new address (optional) → order → order items → delete cart rows.
  • Raises CheckoutError for bad input; store errors propagate to the caller.
- record_verified_payment(order, result)
  • Mark an order paid after the gateway confirms the charge.
- set_payment_status(order, payment_status)
  • Back-office payment status change and the order status it implies.
- set_fulfillment_status(order, status)
  • Back-office fulfillment status change.

There is no retry, idempotency key or compensation: a failure part way through
leaves earlier writes in place and the customer retries.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal

from ..models import db, Address, Order, OrderItem, CartItem, FULFILLMENT_STATUSES, PAYMENT_STATUSES
from ..models.utils import generate_order_number
from .prom_metrics import observe_order_created
from .validators import validate_address_form, sanitize_input

logger = logging.getLogger(__name__)

SHIPPING_FEE = Decimal('0.00')

# payment_status set by an admin -> order status
PAYMENT_TO_ORDER_STATUS = {
    'paid': 'completed',
    'cancelled': 'cancelled',
}


class CheckoutError(ValueError):
    """Raised when submitted checkout data cannot produce an order."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or [message]


def cart_summary(cart_items):
    subtotal = sum((item.line_total for item in cart_items), Decimal('0.00'))
    shipping = SHIPPING_FEE if subtotal > 0 else Decimal('0.00')
    return {
        'subtotal': subtotal,
        'shipping': shipping,
        'total': subtotal + shipping,
        'item_count': sum(item.quantity for item in cart_items),
    }


def _resolve_address(user, form):
    """Return the shipping address id, inserting a new address when requested"""
    selected = (form.get('address_id') or 'new').strip()

    if selected != 'new':
        if not selected.isdigit():
            raise CheckoutError('Please choose a shipping address.')
        address = Address.query.filter_by(id=int(selected), user_id=user.id).first()
        if address is None:
            raise CheckoutError('Please choose a shipping address.')
        return address.id

    validation = validate_address_form(form)
    if not validation.is_valid:
        raise CheckoutError(validation.errors[0], validation.errors)

    address = Address(user_id=user.id, **validation.data)
    db.session.add(address)
    db.session.commit()
    return address.id


def place_order(user, cart_items, form):
    """Create an order from the user's cart and clear the cart. Returns the Order."""
    if not cart_items:
        raise CheckoutError('Your cart is empty.')

    shipping_address_id = _resolve_address(user, form)
    summary = cart_summary(cart_items)

    order = Order(
        user_id=user.id,
        email=user.email,
        order_number=generate_order_number(),
        total_amount=summary['total'],
        shipping_address_id=shipping_address_id,
        notes=sanitize_input(form.get('notes'), 2000) or None,
        status='pending',
        payment_status='pending',
    )
    db.session.add(order)
    db.session.commit()

    for item in cart_items:
        db.session.add(OrderItem(
            order_id=order.id,
            product_id=item.product_id,
            quantity=item.quantity,
            price=item.product.price,
        ))
    db.session.commit()

    CartItem.query.filter_by(user_id=user.id).delete()
    db.session.commit()

    observe_order_created(order.total_amount)
    logger.info(json.dumps({
        'event': 'order_created',
        'order_id': order.id,
        'order_number': order.order_number,
        'total_amount': str(order.total_amount),
        'items': len(cart_items),
    }))
    return order


def record_verified_payment(order, result):
    """Persist a successful gateway verification on the order"""
    order.payment_status = 'paid'
    order.status = 'processing'
    order.transaction_ref = result.reference
    order.payment_reference = order.payment_reference or result.reference
    order.updated_at = datetime.utcnow()
    db.session.commit()

    if result.amount is not None and Decimal(result.amount) != Decimal(order.total_amount):
        logger.warning(json.dumps({
            'event': 'payment_amount_mismatch',
            'order_number': order.order_number,
            'expected': str(order.total_amount),
            'paid': str(result.amount),
        }))
    return order


def set_payment_status(order, payment_status):
    """Apply an admin payment status change; returns the new order status"""
    if payment_status not in PAYMENT_STATUSES:
        raise ValueError(f'Unknown payment status: {payment_status}')
    if not order.email or not order.order_number or not order.total_amount:
        raise ValueError('Order is missing email, order number or total')

    order.payment_status = payment_status
    order.status = PAYMENT_TO_ORDER_STATUS.get(payment_status, 'pending')
    order.updated_at = datetime.utcnow()
    db.session.commit()
    return order.status


def set_fulfillment_status(order, status):
    if status not in FULFILLMENT_STATUSES:
        raise ValueError(f'Unknown order status: {status}')
    order.status = status
    order.updated_at = datetime.utcnow()
    db.session.commit()
    return order
