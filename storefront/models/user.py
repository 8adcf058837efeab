"""
User Models

This module contains the User, ActivationToken, PasswordResetToken and Admin models.
"""

from datetime import datetime, timedelta
from .database import db
from .utils import generate_user_id, generate_activation_token, generate_password_reset_token


class User(db.Model):
    """Customer account, profile and session identity"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(12), unique=True, nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120))
    phone = db.Column(db.String(32))
    avatar_url = db.Column(db.String(500))
    status = db.Column(db.String(20), default='inactive')  # inactive, active, suspended
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = db.Column(db.DateTime)

    # Relationships
    activation_tokens = db.relationship('ActivationToken', backref='user', lazy=True,
                                        cascade='all, delete-orphan')
    password_reset_tokens = db.relationship('PasswordResetToken', backref='user', lazy=True,
                                            cascade='all, delete-orphan')
    admin = db.relationship('Admin', backref='user', uselist=False, lazy=True)
    cart_items = db.relationship('CartItem', backref='user', lazy=True)
    addresses = db.relationship('Address', backref='user', lazy=True)
    orders = db.relationship('Order', backref='user', lazy=True)

    def __init__(self, email, password_hash, full_name=None, phone=None):
        """Initialize a new user with validated email"""
        # Import validators here to avoid circular imports
        from ..utils.validators import validate_email

        email_validation = validate_email(email)
        if not email_validation.is_valid:
            raise ValueError(email_validation.error_message)
        if not password_hash:
            raise ValueError("Password hash is required")

        self.email = email_validation.sanitized_value
        self.password_hash = password_hash
        self.full_name = full_name
        self.phone = phone
        self.user_id = generate_user_id()

        # Inactive until the activation link is followed
        self.status = 'inactive'

    def is_active(self):
        """Check if user account is active"""
        return self.status == 'active'

    def is_admin(self):
        return self.admin is not None

    @property
    def display_name(self):
        return self.full_name or self.email

    def update_last_login(self):
        """Update the last login timestamp"""
        self.last_login = datetime.utcnow()
        db.session.commit()


class Admin(db.Model):
    """Back-office access grant; one row per administrator"""
    __tablename__ = 'admins'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class ActivationToken(db.Model):
    """Activation token for user account activation"""
    __tablename__ = 'activation_tokens'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(255), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
    used = db.Column(db.Boolean, default=False)

    def __init__(self, user_id, expires_in_hours=24):
        """Initialize a new activation token"""
        self.user_id = user_id
        self.token = generate_activation_token()
        self.used = False
        self.expires_at = datetime.utcnow() + timedelta(hours=expires_in_hours)

    def is_valid(self):
        """Check if token is valid and not expired"""
        return not self.used and datetime.utcnow() < self.expires_at

    def mark_used(self):
        self.used = True
        db.session.commit()


class PasswordResetToken(db.Model):
    """Password reset token for password recovery"""
    __tablename__ = 'password_reset_tokens'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(255), unique=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
    used = db.Column(db.Boolean, default=False)

    def __init__(self, user_id, expires_in_hours=1):
        """Initialize a new password reset token"""
        self.user_id = user_id
        self.token = generate_password_reset_token()
        self.used = False
        self.expires_at = datetime.utcnow() + timedelta(hours=expires_in_hours)

    def is_valid(self):
        """Check if token is valid and not expired"""
        return not self.used and datetime.utcnow() < self.expires_at

    def mark_used(self):
        self.used = True
        db.session.commit()
