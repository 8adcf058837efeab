"""
KaysTrend Storefront Application Package

FLOW OVERVIEW
- create_app(test_config=None)
  • Build Flask app, apply config (test or env-based), init extensions (DB, Mail).
  • Register blueprints: main (/), auth (/auth), catalog (/products, /categories),
    cart (/cart), checkout (/checkout, /payment, /order-*), account (/account, /orders),
    admin (/admin), api (/api).
  • Register global error handlers, request metrics hooks and template globals.
  • Register CLI commands: init-db, seed-db.
"""

import time
import click
from flask import Flask, g, request
from .models import db
from .routes import main_bp, auth_bp, catalog_bp, cart_bp, checkout_bp, account_bp, admin_bp, api_bp
from .config import Config
from .utils.mailer import mail


def create_app(test_config=None):
    """Application factory pattern for production deployment"""
    app = Flask(__name__,
                template_folder='../templates',
                static_folder='../static')

    # Configuration
    if test_config:
        # Use test configuration if provided
        app.config.from_object(Config())
        app.config.update(test_config)
    else:
        # Use environment-based configuration
        app.config.from_object(Config())

    if 'AUTO_ACTIVATE_USERS' not in (test_config or {}):
        app.config['AUTO_ACTIVATE_USERS'] = app.config.get('AUTO_ACTIVATE_USERS') or app.config.get('TESTING', False)

    # Initialize extensions
    db.init_app(app)
    mail.init_app(app)

    # Register blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(catalog_bp)
    app.register_blueprint(cart_bp, url_prefix='/cart')
    app.register_blueprint(checkout_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(api_bp, url_prefix='/api')

    # Register error handlers
    from .utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    _register_request_metrics(app)
    _register_template_globals(app)
    _register_commands(app)

    return app


def _register_request_metrics(app):
    from .utils.prom_metrics import observe_request

    @app.before_request
    def start_timer():
        g.request_started_at = time.time()

    @app.after_request
    def record_request(response):
        started_at = g.pop('request_started_at', None)
        if started_at is not None:
            observe_request(request.endpoint or 'unknown', response.status_code, time.time() - started_at)
        return response


def _register_template_globals(app):
    from sqlalchemy.exc import SQLAlchemyError
    from .models import CartItem
    from .utils.auth_utils import get_current_user

    @app.context_processor
    def inject_store_context():
        user = None
        cart_item_count = 0
        try:
            user = get_current_user()
            if user is not None:
                cart_item_count = CartItem.count_for_user(user.id)
        except SQLAlchemyError:
            # Tables missing before setup; pages render their own setup notice
            db.session.rollback()
        return {
            'current_user': user,
            'cart_item_count': cart_item_count,
            'store_name': app.config.get('STORE_NAME', 'KaysTrend'),
            'currency_symbol': '₵' if app.config.get('STORE_CURRENCY', 'GHS') == 'GHS' else app.config.get('STORE_CURRENCY'),
        }

    @app.template_filter('money')
    def money(value):
        return f"{float(value or 0):,.2f}"


def _register_commands(app):
    from .models.seed import seed_sample_data

    @app.cli.command('init-db')
    def init_db_command():
        """Create all database tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('seed-db')
    def seed_db_command():
        """Insert the sample catalog."""
        db.create_all()
        added = seed_sample_data()
        click.echo(f'Seeded {added} rows.')
