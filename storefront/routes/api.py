"""
API Routes

FLOW OVERVIEW
- /api/verify-payment [POST] {orderId, reference}
  • Verify a Paystack reference, mark the order paid, send the receipt.
- /api/send-order-confirmation [POST] {orderId}
  • Owner only; send the receipt and flag email_sent.
- /api/send-paid-email [POST] {email, orderNumber, totalAmount}
  • Admin only; "order has been paid" notification.
- /api/send-status-update [POST] {orderId, status}
  • Admin only; fulfillment status notification.
- /api/status [GET]
  • Service status with database reachability.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import text
from ..models import db, Order
from ..utils.auth_utils import get_current_user, api_login_required, api_admin_required
from ..utils.checkout import record_verified_payment
from ..utils.mailer import send_order_receipt, send_order_paid_email, send_order_status_update_email
from ..utils.paystack import PaystackClient
from ..utils.prom_metrics import observe_payment_verification

api_bp = Blueprint('api', __name__)
logger = logging.getLogger(__name__)


def _json_body():
    """Request JSON object, or {} when the body is missing or not an object"""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _load_order(order_id):
    try:
        return db.session.get(Order, int(order_id))
    except (TypeError, ValueError, OverflowError):
        return None


@api_bp.route('/verify-payment', methods=['POST'])
def verify_payment():
    """Confirm a payment with the gateway and mark the order paid"""
    data = _json_body()
    order_id = data.get('orderId')
    reference = str(data.get('reference') or '').strip()

    if not order_id or not reference:
        return jsonify({'error': 'Missing reference or orderId'}), 400

    order = _load_order(order_id)
    if order is None:
        return jsonify({'error': 'Order not found'}), 404

    result = PaystackClient.from_config().verify_transaction(reference)
    if not result.success:
        observe_payment_verification('invalid')
        return jsonify({'error': 'Invalid or failed verification'}), 400

    if not result.paid:
        observe_payment_verification('unsuccessful')
        return jsonify({'error': 'Payment not successful', 'status': result.status}), 400

    try:
        record_verified_payment(order, result)
    except Exception as e:
        # The charge already succeeded at the gateway; nothing reverses it here
        db.session.rollback()
        observe_payment_verification('update_failed')
        logger.error(json.dumps({
            'event': 'payment_update_failed',
            'order_id': order.id,
            'reference': reference,
            'error': str(e)[:500],
        }), exc_info=True)
        return jsonify({'error': 'Failed to update order'}), 500

    observe_payment_verification('success')

    if send_order_receipt(order):
        try:
            order.email_sent = True
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Could not flag receipt sent for {order.order_number}: {str(e)}", exc_info=True)

    return jsonify({
        'message': 'Payment verified successfully',
        'amount': float(result.amount) if result.amount is not None else None,
        'reference': result.reference,
    })


@api_bp.route('/send-order-confirmation', methods=['POST'])
@api_login_required
def send_order_confirmation():
    data = _json_body()
    order_id = data.get('orderId')
    if not order_id:
        return jsonify({'error': 'Missing orderId'}), 400

    user = get_current_user()
    order = _load_order(order_id)
    if order is None or order.user_id != user.id:
        return jsonify({'error': 'Order not found'}), 404
    if not order.items:
        return jsonify({'error': 'Order items not found'}), 404

    sent = send_order_receipt(order)
    if sent:
        try:
            order.email_sent = True
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Could not flag receipt sent for {order.order_number}: {str(e)}", exc_info=True)

    return jsonify({'success': sent})


@api_bp.route('/send-paid-email', methods=['POST'])
@api_admin_required
def send_paid_email():
    data = _json_body()
    email = data.get('email')
    order_number = data.get('orderNumber')
    total_amount = data.get('totalAmount')

    if not email or not order_number or total_amount in (None, ''):
        return jsonify({'error': 'Missing required fields'}), 400

    try:
        total_amount = Decimal(str(total_amount))
    except InvalidOperation:
        return jsonify({'error': 'Invalid totalAmount'}), 400

    if not send_order_paid_email(email, order_number, total_amount):
        return jsonify({'error': 'Failed to send email'}), 500
    return jsonify({'success': True})


@api_bp.route('/send-status-update', methods=['POST'])
@api_admin_required
def send_status_update():
    data = _json_body()
    order_id = data.get('orderId')
    status = data.get('status')

    if not order_id or not status:
        return jsonify({'error': 'Missing orderId or status'}), 400

    order = _load_order(order_id)
    if order is None:
        return jsonify({'error': 'Order not found'}), 404

    if not send_order_status_update_email(order, status):
        return jsonify({'error': 'Failed to send email'}), 500
    return jsonify({'success': True})


@api_bp.route('/status')
def status():
    """Service status for uptime checks"""
    try:
        db.session.execute(text('SELECT 1'))
        database = 'ok'
    except Exception as e:
        db.session.rollback()
        logger.error(f"Database status check failed: {str(e)}")
        database = 'unavailable'

    return jsonify({
        'status': 'ok' if database == 'ok' else 'degraded',
        'database': database,
        'payments_configured': bool(current_app.config.get('PAYSTACK_SECRET_KEY')),
        'timestamp': datetime.utcnow().isoformat(),
    })
