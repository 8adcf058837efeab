"""
Checkout Routes

FLOW OVERVIEW
- /checkout [GET, POST]
  • Auth gate; address selection + order summary / place order and go to payment.
- /payment [GET] ?order=<id>
  • Auth gate; Paystack inline widget for the owner's unpaid order.
- /payment/initialize [POST] ?order=<id>
  • Auth gate; hosted checkout: initialize transaction and redirect to Paystack.
- /payment/callback [GET] ?reference=<ref>&order=<id>
  • Return from hosted checkout; verify and redirect to the order page.
- /order-confirmation [GET] ?order=<id>
  • Auth gate; order summary, sends the receipt once.
- /order-success [GET] ?order=<id>
  • Auth gate; status and payment status summary.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from ..models import db, Address, CartItem, Order
from ..models.utils import generate_payment_reference
from ..utils.auth_utils import get_current_user, login_required
from ..utils.checkout import CheckoutError, cart_summary, place_order, record_verified_payment
from ..utils.mailer import send_order_receipt
from ..utils.paystack import PaystackClient
from ..utils.prom_metrics import observe_payment_verification

checkout_bp = Blueprint('checkout', __name__)
logger = logging.getLogger(__name__)


def _render_checkout(user, items, form=None, status=200):
    addresses = Address.query.filter_by(user_id=user.id).order_by(Address.created_at.desc()).all()
    if form is None:
        form = {
            'address_id': str(addresses[0].id) if addresses else 'new',
            'full_name': user.full_name or '',
            'phone': user.phone or '',
            'country': 'Ghana',
        }
    return render_template('checkout.html', items=items, summary=cart_summary(items),
                           addresses=addresses, form=form), status


def _send_receipt(order):
    """Send the receipt and flag the order so it is not sent again"""
    if not send_order_receipt(order):
        return False
    try:
        order.email_sent = True
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Could not flag receipt sent for {order.order_number}: {str(e)}", exc_info=True)
    return True


def _owned_order(user):
    order_id = request.args.get('order', type=int)
    if order_id is None:
        return None
    return Order.for_user(order_id, user.id)


@checkout_bp.route('/checkout', methods=['GET', 'POST'])
@login_required
def checkout():
    user = get_current_user()
    items = CartItem.for_user(user.id)

    if not items:
        flash('Your cart is empty.', 'info')
        return redirect(url_for('cart.view_cart'))

    if request.method == 'GET':
        return _render_checkout(user, items)

    try:
        order = place_order(user, items, request.form)
    except CheckoutError as e:
        db.session.rollback()
        for message in e.errors:
            flash(message, 'error')
        return _render_checkout(user, items, form=request.form, status=400)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Order creation failed for user {user.user_id}: {str(e)}", exc_info=True)
        flash('Failed to create order. Please try again.', 'error')
        return _render_checkout(user, CartItem.for_user(user.id), form=request.form, status=500)

    return redirect(url_for('checkout.payment', order=order.id))


@checkout_bp.route('/payment')
@login_required
def payment():
    """Inline payment page for a pending order"""
    user = get_current_user()
    order = _owned_order(user)
    if order is None:
        flash('Order not found.', 'error')
        return redirect(url_for('cart.view_cart'))

    if order.is_paid:
        return redirect(url_for('account.order_detail', order_id=order.id))

    return render_template('payment.html',
                           order=order,
                           reference=generate_payment_reference(order.order_number),
                           paystack_public_key=current_app.config.get('PAYSTACK_PUBLIC_KEY', ''),
                           currency=current_app.config.get('STORE_CURRENCY', 'GHS'),
                           channels=current_app.config.get('PAYSTACK_CHANNELS', ['mobile_money']))


@checkout_bp.route('/payment/initialize', methods=['POST'])
@login_required
def initialize_payment():
    """Hosted checkout alternative to the inline widget"""
    user = get_current_user()
    order = _owned_order(user)
    if order is None:
        flash('Order not found.', 'error')
        return redirect(url_for('cart.view_cart'))

    if order.is_paid:
        return redirect(url_for('account.order_detail', order_id=order.id))

    reference = generate_payment_reference(order.order_number)
    result = PaystackClient.from_config().initialize_transaction(
        email=order.email,
        amount_subunits=order.amount_in_subunits,
        reference=reference,
        callback_url=url_for('checkout.payment_callback', order=order.id, _external=True),
        currency=current_app.config.get('STORE_CURRENCY', 'GHS'),
        channels=current_app.config.get('PAYSTACK_CHANNELS'),
        metadata={'order_id': order.id, 'order_number': order.order_number},
    )

    if not result.success or not result.authorization_url:
        flash('Unable to start payment. Please try again.', 'error')
        return redirect(url_for('checkout.payment', order=order.id))

    try:
        order.payment_reference = result.reference
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Could not store payment reference for {order.order_number}: {str(e)}", exc_info=True)

    return redirect(result.authorization_url)


@checkout_bp.route('/payment/callback')
def payment_callback():
    """Paystack redirects here after hosted checkout"""
    reference = request.args.get('reference') or request.args.get('trxref')
    order_id = request.args.get('order', type=int)
    order = db.session.get(Order, order_id) if order_id else None

    if not reference or order is None:
        flash('Payment reference or order missing.', 'error')
        return redirect(url_for('account.orders'))

    result = PaystackClient.from_config().verify_transaction(reference)
    if not result.success:
        observe_payment_verification('invalid')
        flash('We could not verify your payment. Please contact support.', 'error')
        return redirect(url_for('account.order_detail', order_id=order.id))

    if not result.paid:
        observe_payment_verification('unsuccessful')
        flash(f'Payment not successful ({result.status}).', 'error')
        return redirect(url_for('checkout.payment', order=order.id))

    try:
        record_verified_payment(order, result)
    except Exception as e:
        db.session.rollback()
        observe_payment_verification('update_failed')
        logger.error(f"Failed to update order {order.order_number} after payment: {str(e)}", exc_info=True)
        flash('Payment received but we could not update your order. Please contact support.', 'error')
        return redirect(url_for('account.order_detail', order_id=order.id))

    observe_payment_verification('success')
    if not order.email_sent:
        _send_receipt(order)
    return redirect(url_for('account.order_detail', order_id=order.id, payment='success'))


@checkout_bp.route('/order-confirmation')
@login_required
def order_confirmation():
    user = get_current_user()
    order = _owned_order(user)
    if order is None:
        flash('Order not found.', 'error')
        return redirect(url_for('account.orders'))

    if not order.email_sent and order.items:
        _send_receipt(order)

    return render_template('order_confirmation.html', order=order)


@checkout_bp.route('/order-success')
@login_required
def order_success():
    user = get_current_user()
    order = _owned_order(user)
    if order is None:
        flash('Order not found.', 'error')
        return redirect(url_for('account.orders'))
    return render_template('order_success.html', order=order)
