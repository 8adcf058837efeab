#!/usr/bin/env python3
"""
KaysTrend storefront entry point.

This module selects configuration based on environment variables, configures
logging, creates the Flask application via `create_app`, and eagerly creates
tables for in-memory databases. When executed directly, it runs the
development server. In production, a WSGI server should import `app` from
this module.

Environment variables of interest:
- FLASK_ENV: if set to 'testing', enables in-memory DB and testing flags.
- DATABASE_URL: if set to 'sqlite:///:memory:' forces in-memory DB init.
- LOG_LEVEL: root logging level (default INFO).
- SECRET_KEY, mail and Paystack settings: consumed by `create_app`.
"""

import logging
import os
from storefront import create_app
from storefront.models import db

logging.basicConfig(
    level=os.getenv('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger('storefront')

# Create app instance
if os.getenv('FLASK_ENV') == 'testing':
    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': os.getenv('DATABASE_URL', 'sqlite:///:memory:'),
        'SECRET_KEY': os.getenv('SECRET_KEY', 'test-secret-key'),
        'MAIL_DEFAULT_SENDER': os.getenv('MAIL_DEFAULT_SENDER', 'test@example.com'),
        'PAYSTACK_SECRET_KEY': os.getenv('PAYSTACK_SECRET_KEY', 'sk_test_dummy'),
        'PAYSTACK_PUBLIC_KEY': os.getenv('PAYSTACK_PUBLIC_KEY', 'pk_test_dummy'),
    }
    app = create_app(test_config)
else:
    app = create_app()

logger.info("Starting KaysTrend storefront")
if os.getenv('FLASK_ENV') == 'testing' or app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite:///:memory:':
    with app.app_context():
        db.create_all()
    logger.info("In-memory database initialized")
else:
    logger.info("Database tables are managed with `flask --app app init-db` or /setup")

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
