"""
Authentication Utilities

This module contains password hashing, user lifecycle helpers, session lookups
and the route decorators that gate customer and admin pages.
"""

import bcrypt
from functools import wraps
from flask import current_app, flash, has_request_context, jsonify, redirect, request, session, url_for
from ..models import db, User, ActivationToken, PasswordResetToken

_MISSING = object()


def hash_password(password):
    """Hash a password using bcrypt"""
    rounds = current_app.config.get('BCRYPT_LOG_ROUNDS', 12) if current_app else 12
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password, password_hash):
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_user(email, password, full_name=None):
    """Create a new user with activation token"""
    user = User(email=email, password_hash=hash_password(password), full_name=full_name)
    db.session.add(user)
    db.session.flush()  # Get the user ID

    activation_token = ActivationToken(user.id)
    db.session.add(activation_token)

    db.session.commit()

    return user, activation_token


def authenticate_user(email, password):
    """Return the user for valid credentials, regardless of status"""
    user = User.query.filter_by(email=email).first()
    if user and verify_password(password, user.password_hash):
        return user
    return None


def get_user_by_reset_token(token):
    """Get user by token (for password reset)"""
    reset_token = PasswordResetToken.query.filter_by(token=token).first()

    if reset_token and reset_token.is_valid():
        return db.session.get(User, reset_token.user_id)

    return None


def login_user(user):
    session.clear()
    session['user_id'] = user.user_id
    session['user_email'] = user.email
    session.permanent = True
    user.update_last_login()


def get_current_user():
    """Resolve the signed-in, active user from the session (cached per request)"""
    if not has_request_context():
        return None
    cached = getattr(request, '_current_user', _MISSING)
    if cached is not _MISSING:
        return cached

    user = None
    public_id = session.get('user_id')
    if public_id:
        user = User.query.filter_by(user_id=public_id).first()
        if user is not None and not user.is_active():
            user = None
    request._current_user = user
    return user


def safe_redirect_target(target, default=None):
    """Only allow local absolute paths as post-login destinations"""
    if target and target.startswith('/') and not target.startswith('//') and '\\' not in target:
        return target
    return default


def login_required(f):
    """Decorator to require a signed-in user; redirects to login with a return path"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_user() is None:
            flash('Please log in to continue.', 'error')
            return redirect(url_for('auth.login', redirect=request.full_path.rstrip('?')))
        return f(*args, **kwargs)
    return decorated_function


def api_login_required(f):
    """Decorator to require user login for JSON endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_user() is None:
            return jsonify({'error': 'Unauthorized'}), 401
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    """Decorator to require an admins row for the signed-in user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from .error_handlers import render_error_page

        user = get_current_user()
        if user is None:
            return redirect(url_for('auth.login', redirect=request.full_path.rstrip('?')))
        if not user.is_admin():
            return render_error_page('Access Denied',
                'You do not have admin privileges. Only administrators can access this page.', 403)
        return f(*args, **kwargs)
    return decorated_function


def api_admin_required(f):
    """Decorator to require an admin session for JSON endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if user is None:
            return jsonify({'error': 'Unauthorized'}), 401
        if not user.is_admin():
            return jsonify({'error': 'Forbidden'}), 403
        return f(*args, **kwargs)
    return decorated_function
