"""
Transactional Email

FLOW OVERVIEW
- mail: Flask-Mail extension, bound in the app factory.
- send_order_receipt(order)
  • "Payment Received" receipt with reference, products, amount and pre-order notice.
- send_order_paid_email(email, order_number, total_amount)
  • Back-office "order marked as PAID" notification.
- send_order_status_update_email(order, status)
  • Fulfillment status change notification.
- send_activation_email / send_password_reset_email / send_contact_message

Every sender returns True/False. Failures are logged and counted, never raised,
so a mail outage cannot fail the request that triggered it.
"""

import logging
from datetime import datetime
from flask import current_app, render_template, url_for
from flask_mail import Mail, Message
from .prom_metrics import observe_email

mail = Mail()
logger = logging.getLogger(__name__)


def _send(kind, subject, recipients, template=None, context=None, body=None, reply_to=None):
    try:
        html = render_template(template, **(context or {})) if template else None
        msg = Message(subject, recipients=recipients, html=html, body=body, reply_to=reply_to)
        mail.send(msg)
        logger.info(f"Sent {kind} email to {', '.join(recipients)}")
        observe_email(kind, True)
        return True
    except Exception as e:
        logger.error(f"Failed to send {kind} email to {', '.join(recipients)}: {str(e)}", exc_info=True)
        observe_email(kind, False)
        return False


def send_order_receipt(order):
    """Send the payment receipt for an order to its customer"""
    items = order.items
    user = order.user
    order_type = order.order_type
    context = {
        'store_name': current_app.config.get('STORE_NAME', 'KaysTrend'),
        'currency': current_app.config.get('STORE_CURRENCY', 'GHS'),
        'customer_name': (user.full_name if user else None) or 'Customer',
        'order_number': order.order_number,
        'order_date': (order.created_at or datetime.utcnow()).strftime('%B %d, %Y'),
        'payment_reference': order.transaction_ref or order.payment_reference or 'N/A',
        'product_names': ', '.join(item.product.name for item in items if item.product),
        'amount': order.total_amount,
        'is_preorder': order_type == 'preorder',
        'year': datetime.utcnow().year,
    }
    return _send('order_receipt', f"Payment Receipt - Order {order.order_number}",
                 [order.email], template='emails/order_receipt.html', context=context)


def send_order_paid_email(email, order_number, total_amount):
    """Notify a customer that their order has been marked as paid"""
    context = {
        'store_name': current_app.config.get('STORE_NAME', 'KaysTrend'),
        'order_number': order_number,
        'total_amount': total_amount,
        'orders_url': url_for('account.orders', _external=True),
        'year': datetime.utcnow().year,
    }
    body = (f"Thank you for your payment of {float(total_amount):.2f}. "
            f"Your order #{order_number} is now PAID.")
    return _send('order_paid', f"Your order #{order_number} has been paid",
                 [email], template='emails/order_paid.html', context=context, body=body)


def send_order_status_update_email(order, status):
    user = order.user
    context = {
        'store_name': current_app.config.get('STORE_NAME', 'KaysTrend'),
        'customer_name': (user.full_name if user else None) or 'Customer',
        'order_number': order.order_number,
        'status': status,
        'order_url': url_for('account.order_detail', order_id=order.id, _external=True),
        'year': datetime.utcnow().year,
    }
    return _send('order_status', f"Order #{order.order_number} is now {status}",
                 [order.email], template='emails/order_status.html', context=context)


def send_activation_email(user, activation_token):
    """Send activation email to user"""
    activation_url = url_for('auth.activate_account', token=activation_token.token, _external=True)
    context = {
        'user': user,
        'activation_url': activation_url,
        'store_name': current_app.config.get('STORE_NAME', 'KaysTrend'),
    }
    return _send('activation', 'Activate Your Account', [user.email],
                 template='emails/activation.html', context=context,
                 body=f"Click this link to activate your account: {activation_url}")


def send_password_reset_email(user, reset_token):
    """Send password reset email to user"""
    reset_url = url_for('auth.reset_password', token=reset_token.token, _external=True)
    return _send('password_reset', 'Reset Your Password', [user.email],
                 body=f"Click this link to reset your password: {reset_url}\n\n"
                      f"The link expires in one hour.")


def send_contact_message(name, email, subject, message):
    """Forward a contact form submission to the support inbox"""
    support = current_app.config.get('SUPPORT_EMAIL')
    if not support:
        logger.warning("SUPPORT_EMAIL not configured; contact message dropped")
        return False
    body = f"From: {name} <{email}>\n\n{message}"
    return _send('contact', f"[Contact] {subject}", [support], body=body, reply_to=email)
