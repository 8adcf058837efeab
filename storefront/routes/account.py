"""
Account Routes

FLOW OVERVIEW
- /account [GET]
  • Auth gate; profile, avatar and counts of orders, addresses and cart rows.
- /account/profile [POST]
  • Update full name and phone.
- /account/email [POST]
  • Validated, unique email change.
- /account/password [POST]
  • Current password check + strength rules.
- /account/avatar [POST]
  • Store uploaded image and save its public URL.
- /account/orders [GET]
  • The user's orders, newest first.
- /orders/<order_id> [GET]
  • Owner-only order detail; ?payment=success shows a banner.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, session
from ..models import db, User, Address, CartItem, Order
from ..utils.auth_utils import get_current_user, login_required, hash_password, verify_password
from ..utils.storage import save_avatar
from ..utils.validators import validate_email, validate_password_strength, sanitize_input

account_bp = Blueprint('account', __name__)
logger = logging.getLogger(__name__)


@account_bp.route('/account')
@login_required
def account():
    """Account overview page"""
    user = get_current_user()
    counts = {
        'orders': Order.query.filter_by(user_id=user.id).count(),
        'addresses': Address.query.filter_by(user_id=user.id).count(),
        'cart_items': CartItem.count_for_user(user.id),
    }
    return render_template('account/account.html', user=user, counts=counts)


@account_bp.route('/account/profile', methods=['POST'])
@login_required
def update_profile():
    user = get_current_user()
    try:
        user.full_name = sanitize_input(request.form.get('full_name'), 120) or None
        user.phone = sanitize_input(request.form.get('phone'), 32) or None
        db.session.commit()
        flash('Profile updated successfully.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Profile update failed for {user.user_id}: {str(e)}", exc_info=True)
        flash('Failed to update profile. Please try again.', 'error')
    return redirect(url_for('account.account'))


@account_bp.route('/account/email', methods=['POST'])
@login_required
def update_email():
    user = get_current_user()
    email_validation = validate_email(request.form.get('email', ''))
    if not email_validation.is_valid:
        flash(email_validation.error_message, 'error')
        return redirect(url_for('account.account'))

    new_email = email_validation.sanitized_value
    if new_email == user.email:
        flash('That is already your email address.', 'info')
        return redirect(url_for('account.account'))

    if User.query.filter_by(email=new_email).first():
        flash('An account with this email already exists.', 'error')
        return redirect(url_for('account.account'))

    try:
        user.email = new_email
        db.session.commit()
        session['user_email'] = new_email
        flash('Email updated successfully.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Email update failed for {user.user_id}: {str(e)}", exc_info=True)
        flash('Failed to update email. Please try again.', 'error')
    return redirect(url_for('account.account'))


@account_bp.route('/account/password', methods=['POST'])
@login_required
def update_password():
    user = get_current_user()
    current_password = request.form.get('current_password', '')
    new_password = request.form.get('new_password', '')
    confirm_password = request.form.get('confirm_password', '')

    if not verify_password(current_password, user.password_hash):
        flash('Current password is incorrect.', 'error')
        return redirect(url_for('account.account'))

    if new_password != confirm_password:
        flash('Passwords do not match.', 'error')
        return redirect(url_for('account.account'))

    password_validation = validate_password_strength(new_password)
    if not password_validation.is_valid:
        flash(password_validation.error_message, 'error')
        return redirect(url_for('account.account'))

    try:
        user.password_hash = hash_password(new_password)
        db.session.commit()
        flash('Password updated successfully.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Password update failed for {user.user_id}: {str(e)}", exc_info=True)
        flash('Failed to update password. Please try again.', 'error')
    return redirect(url_for('account.account'))


@account_bp.route('/account/avatar', methods=['POST'])
@login_required
def upload_avatar():
    user = get_current_user()
    upload = request.files.get('avatar')
    if upload is None or not upload.filename:
        flash('Please choose an image to upload.', 'error')
        return redirect(url_for('account.account'))

    try:
        user.avatar_url = save_avatar(upload, user.user_id)
        db.session.commit()
        flash('Profile picture updated.', 'success')
    except ValueError as e:
        flash(str(e), 'error')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Avatar upload failed for {user.user_id}: {str(e)}", exc_info=True)
        flash('Failed to upload profile picture. Please try again.', 'error')
    return redirect(url_for('account.account'))


@account_bp.route('/account/orders')
@login_required
def orders():
    user = get_current_user()
    user_orders = (
        Order.query
        .filter_by(user_id=user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return render_template('account/orders.html', orders=user_orders)


@account_bp.route('/orders/<int:order_id>')
@login_required
def order_detail(order_id):
    user = get_current_user()
    order = Order.for_user(order_id, user.id)
    if order is None:
        flash('Order not found.', 'error')
        return redirect(url_for('account.orders'))
    return render_template('account/order_detail.html', order=order,
                           payment_success=request.args.get('payment') == 'success')
