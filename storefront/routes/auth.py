"""
Authentication Routes

FLOW OVERVIEW
- /auth/register [GET, POST]
  • Render form / validate + create user + send activation; redirect to verify-email.
- /auth/verify-email [GET]
  • Informational "check your email" page after registration.
- /auth/activate/<token> [GET]
  • Validate token → activate user.
- /auth/login [GET, POST]
  • Render form / authenticate → set session → redirect to ?redirect= or account.
- /auth/logout [GET]
  • Clear session and redirect to home.
- /auth/forgot-password [GET, POST]
  • Render form / generate reset token and send email.
- /auth/reset-password/<token> [GET, POST]
  • Render form / validate token and update password.
"""

import logging
from flask import Blueprint, request, render_template, redirect, url_for, flash, session, current_app
from ..models import db, User, ActivationToken, PasswordResetToken
from ..utils.auth_utils import (
    create_user, authenticate_user, hash_password, login_user, safe_redirect_target
)
from ..utils.mailer import send_activation_email, send_password_reset_email
from ..utils.validators import validate_email, validate_password_strength, sanitize_input

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """User registration endpoint"""
    if request.method == 'GET':
        return render_template('auth/register.html')

    email = request.form.get('email', '').strip().lower()
    password = request.form.get('password', '')
    confirm_password = request.form.get('confirm_password', password)
    full_name = sanitize_input(request.form.get('full_name'), 120) or None

    if not email or not password:
        flash('Email and password are required.', 'error')
        return render_template('auth/register.html', email=email, full_name=full_name), 400

    email_validation = validate_email(email)
    if not email_validation.is_valid:
        flash(email_validation.error_message, 'error')
        return render_template('auth/register.html', email=email, full_name=full_name), 400

    password_validation = validate_password_strength(password)
    if not password_validation.is_valid:
        flash(password_validation.error_message, 'error')
        return render_template('auth/register.html', email=email, full_name=full_name), 400

    if password != confirm_password:
        flash('Passwords do not match.', 'error')
        return render_template('auth/register.html', email=email, full_name=full_name), 400

    if User.query.filter_by(email=email_validation.sanitized_value).first():
        flash('An account with this email already exists.', 'error')
        return render_template('auth/register.html', email=email, full_name=full_name), 409

    try:
        user, activation_token = create_user(email, password, full_name=full_name)

        if current_app.config.get('AUTO_ACTIVATE_USERS'):
            user.status = 'active'
            activation_token.mark_used()
            flash('Account created. You can now log in.', 'success')
            return redirect(url_for('auth.login'))

        if not send_activation_email(user, activation_token):
            flash('Account created but the activation email failed to send. Please contact support.', 'warning')
        return redirect(url_for('auth.verify_email', email=user.email))

    except Exception as e:
        db.session.rollback()
        logger.error(f"Registration failed for {email}: {str(e)}", exc_info=True)
        flash('Registration failed. Please try again.', 'error')
        return render_template('auth/register.html', email=email, full_name=full_name), 500


@auth_bp.route('/verify-email')
def verify_email():
    """Show 'check your email' message"""
    email = request.args.get('email', '')
    return render_template('auth/verify_email.html', email=email)


@auth_bp.route('/activate/<token>')
def activate_account(token):
    """Activate user account with token"""
    try:
        activation_token = ActivationToken.query.filter_by(token=token).first()

        if not activation_token:
            flash('Invalid or expired activation token.', 'error')
            return redirect(url_for('auth.login'))

        if activation_token.used:
            flash('This activation token has already been used.', 'error')
            return redirect(url_for('auth.login'))

        if not activation_token.is_valid():
            flash('This activation token has expired.', 'error')
            return redirect(url_for('auth.login'))

        user = db.session.get(User, activation_token.user_id)
        if not user:
            flash('User not found.', 'error')
            return redirect(url_for('auth.login'))

        user.status = 'active'
        activation_token.mark_used()

        flash('Account activated successfully! You can now log in.', 'success')
        return redirect(url_for('auth.login'))

    except Exception as e:
        db.session.rollback()
        logger.error(f"Activation failed: {str(e)}", exc_info=True)
        flash('An error occurred during activation. Please try again.', 'error')
        return redirect(url_for('auth.login'))


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """User login endpoint"""
    next_url = safe_redirect_target(request.values.get('redirect'))

    if request.method == 'GET':
        return render_template('auth/login.html', redirect_to=next_url)

    email = request.form.get('email', '').strip().lower()
    password = request.form.get('password', '')

    if not email or not password:
        flash('Email and password are required.', 'error')
        return render_template('auth/login.html', redirect_to=next_url)

    try:
        user = authenticate_user(email, password)

        if user is None:
            flash('Invalid email or password.', 'error')
            return render_template('auth/login.html', redirect_to=next_url)

        if not user.is_active():
            flash('Account not activated. Please check your email for activation link.', 'error')
            return render_template('auth/login.html', redirect_to=next_url)

        login_user(user)
        flash(f'Welcome back, {user.display_name}!', 'success')
        return redirect(next_url or url_for('account.account'))

    except Exception as e:
        db.session.rollback()
        logger.error(f"Login failed for {email}: {str(e)}", exc_info=True)
        flash('An error occurred during login. Please try again.', 'error')
        return render_template('auth/login.html', redirect_to=next_url)


@auth_bp.route('/logout')
def logout():
    """User logout endpoint"""
    session.clear()
    flash('You have been logged out successfully.', 'info')
    return redirect(url_for('catalog.home'))


@auth_bp.route('/forgot-password', methods=['GET', 'POST'])
def forgot_password():
    """Forgot password endpoint"""
    if request.method == 'GET':
        return render_template('auth/forgot_password.html')

    email = request.form.get('email', '').strip().lower()

    if not email:
        flash('Email is required.', 'error')
        return render_template('auth/forgot_password.html')

    try:
        user = User.query.filter_by(email=email).first()
        if user and user.is_active():
            reset_token = PasswordResetToken(user.id)
            db.session.add(reset_token)
            db.session.commit()
            send_password_reset_email(user, reset_token)

        # Don't reveal if user exists or not
        flash('If an account with that email exists, password reset instructions have been sent.', 'info')
        return redirect(url_for('auth.login'))

    except Exception as e:
        db.session.rollback()
        logger.error(f"Password reset request failed: {str(e)}", exc_info=True)
        flash('An error occurred. Please try again.', 'error')
        return render_template('auth/forgot_password.html')


@auth_bp.route('/reset-password/<token>', methods=['GET', 'POST'])
def reset_password(token):
    """Reset password with token endpoint"""
    if request.method == 'GET':
        return render_template('auth/reset_password.html', token=token)

    password = request.form.get('password', '')
    confirm_password = request.form.get('confirm_password', '')

    if not password or not confirm_password:
        flash('Password and confirmation are required.', 'error')
        return render_template('auth/reset_password.html', token=token)

    if password != confirm_password:
        flash('Passwords do not match.', 'error')
        return render_template('auth/reset_password.html', token=token)

    password_validation = validate_password_strength(password)
    if not password_validation.is_valid:
        flash(password_validation.error_message, 'error')
        return render_template('auth/reset_password.html', token=token)

    try:
        reset_token = PasswordResetToken.query.filter_by(token=token).first()

        if not reset_token:
            flash('Invalid or expired reset token.', 'error')
            return redirect(url_for('auth.login'))

        if reset_token.used:
            flash('This reset token has already been used.', 'error')
            return redirect(url_for('auth.login'))

        if not reset_token.is_valid():
            flash('This reset token has expired.', 'error')
            return redirect(url_for('auth.login'))

        user = db.session.get(User, reset_token.user_id)
        if not user:
            flash('User not found.', 'error')
            return redirect(url_for('auth.login'))

        user.password_hash = hash_password(password)
        reset_token.mark_used()

        flash('Password has been reset successfully. You can now log in with your new password.', 'success')
        return redirect(url_for('auth.login'))

    except Exception as e:
        db.session.rollback()
        logger.error(f"Password reset failed: {str(e)}", exc_info=True)
        flash('An error occurred during password reset. Please try again.', 'error')
        return render_template('auth/reset_password.html', token=token)
