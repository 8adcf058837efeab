"""
Application Configuration

FLOW OVERVIEW
- Config.__init__
  • Reads FLASK_ENV to select which .env file to load (dev/prod). Testing bypasses file load.
- Properties expose configuration values, defaulting to sensible development-safe defaults.
"""

import os
from dotenv import load_dotenv


def _env_flag(name, default='False'):
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Base configuration class"""

    def __init__(self):
        # Load environment variables based on FLASK_ENV
        env_file = os.getenv('FLASK_ENV', 'development')
        if env_file == 'testing':
            # For testing, don't load config files, use environment variables directly
            pass
        elif env_file == 'production':
            load_dotenv('config.prod.env')
        else:
            load_dotenv('config.env')  # Default to development

    @property
    def SECRET_KEY(self):
        """Application secret key"""
        return os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        """Database connection URI"""
        return os.getenv('DATABASE_URL', 'sqlite:///storefront.db')

    @property
    def SQLALCHEMY_TRACK_MODIFICATIONS(self):
        return False

    # Mail

    @property
    def MAIL_SERVER(self):
        """Mail server hostname"""
        return os.getenv('MAIL_SERVER', 'smtp.gmail.com')

    @property
    def MAIL_PORT(self):
        return int(os.getenv('MAIL_PORT', 587))

    @property
    def MAIL_USE_TLS(self):
        return _env_flag('MAIL_USE_TLS', 'True')

    @property
    def MAIL_USE_SSL(self):
        return _env_flag('MAIL_USE_SSL')

    @property
    def MAIL_USERNAME(self):
        return os.getenv('MAIL_USERNAME')

    @property
    def MAIL_PASSWORD(self):
        return os.getenv('MAIL_PASSWORD')

    @property
    def MAIL_DEFAULT_SENDER(self):
        """Default sender, e.g. '"KaysTrend" <orders@example.com>'"""
        return os.getenv('MAIL_DEFAULT_SENDER', os.getenv('MAIL_USERNAME'))

    # Payment gateway

    @property
    def PAYSTACK_SECRET_KEY(self):
        """Server-side Paystack key used for verification calls"""
        return os.getenv('PAYSTACK_SECRET_KEY', '')

    @property
    def PAYSTACK_PUBLIC_KEY(self):
        """Public key handed to the inline payment widget"""
        return os.getenv('PAYSTACK_PUBLIC_KEY', '')

    @property
    def PAYSTACK_BASE_URL(self):
        return os.getenv('PAYSTACK_BASE_URL', 'https://api.paystack.co')

    @property
    def PAYSTACK_TIMEOUT(self):
        """Seconds to wait for the gateway before giving up"""
        return float(os.getenv('PAYSTACK_TIMEOUT', 15))

    @property
    def PAYSTACK_CHANNELS(self):
        return [c.strip() for c in os.getenv('PAYSTACK_CHANNELS', 'mobile_money').split(',') if c.strip()]

    # Store

    @property
    def STORE_NAME(self):
        return os.getenv('STORE_NAME', 'KaysTrend')

    @property
    def STORE_CURRENCY(self):
        return os.getenv('STORE_CURRENCY', 'GHS')

    @property
    def SUPPORT_EMAIL(self):
        return os.getenv('SUPPORT_EMAIL', 'support@kaystrend.com')

    @property
    def UPLOAD_FOLDER(self):
        """Filesystem root for uploaded avatars"""
        return os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'static', 'uploads'))

    @property
    def UPLOAD_URL_PREFIX(self):
        """Public URL prefix the upload folder is served under"""
        return os.getenv('UPLOAD_URL_PREFIX', '/static/uploads')

    @property
    def MAX_CONTENT_LENGTH(self):
        """Largest accepted request body (bytes)"""
        return int(os.getenv('MAX_CONTENT_LENGTH', 5 * 1024 * 1024))

    @property
    def SETUP_ENABLED(self):
        """Allow /setup/init-db to create and seed tables"""
        return _env_flag('SETUP_ENABLED', 'False' if os.getenv('FLASK_ENV') == 'production' else 'True')

    @property
    def AUTO_ACTIVATE_USERS(self):
        """Skip the activation email and activate accounts on registration"""
        return _env_flag('AUTO_ACTIVATE_USERS')

    @property
    def BCRYPT_LOG_ROUNDS(self):
        """bcrypt cost factor for password hashes"""
        return int(os.getenv('BCRYPT_LOG_ROUNDS', 12))

    # Sessions

    @property
    def SESSION_COOKIE_SECURE(self):
        return os.getenv('FLASK_ENV') == 'production'

    @property
    def SESSION_COOKIE_HTTPONLY(self):
        return True

    @property
    def SESSION_COOKIE_SAMESITE(self):
        return 'Lax'

    @property
    def PERMANENT_SESSION_LIFETIME(self):
        """Session lifetime in seconds"""
        return int(os.getenv('PERMANENT_SESSION_LIFETIME', 86400))

    @property
    def LOG_LEVEL(self):
        return os.getenv('LOG_LEVEL', 'INFO').upper()
