"""
Main Routes

FLOW OVERVIEW
- /health [GET]
  • JSON health check.
- /metrics [GET]
  • Prometheus text exposition.
- /about [GET]
  • Static store information page.
- /contact [GET, POST]
  • Render form / forward the message to the support inbox.
- /setup [GET]
  • Per-table existence check with setup steps.
- /setup/init-db [POST]
  • Create tables and seed the sample catalog (only when SETUP_ENABLED).
"""

import logging
from datetime import datetime
from flask import Blueprint, render_template, jsonify, request, redirect, url_for, flash, current_app, Response
from sqlalchemy import inspect
from ..models import db
from ..models.database import STORE_TABLES
from ..models.seed import seed_sample_data
from ..utils.error_handlers import render_error_page
from ..utils.mailer import send_contact_message
from ..utils.prom_metrics import metrics_latest, CONTENT_TYPE_LATEST
from ..utils.validators import validate_email, sanitize_input

main_bp = Blueprint('main', __name__)
logger = logging.getLogger(__name__)


@main_bp.route('/health')
def health():
    """Health check endpoint"""
    return jsonify({'status': 'healthy', 'timestamp': datetime.utcnow().isoformat()})


@main_bp.route('/metrics')
def metrics():
    return Response(metrics_latest(), mimetype=CONTENT_TYPE_LATEST)


@main_bp.route('/about')
def about():
    return render_template('about.html')


@main_bp.route('/contact', methods=['GET', 'POST'])
def contact():
    """Contact form; submissions are emailed to SUPPORT_EMAIL"""
    if request.method == 'GET':
        return render_template('contact.html', form={})

    form = {
        'name': sanitize_input(request.form.get('name'), 120),
        'email': sanitize_input(request.form.get('email'), 254),
        'subject': sanitize_input(request.form.get('subject'), 200),
        'message': sanitize_input(request.form.get('message'), 5000),
    }

    if not all(form.values()):
        flash('Please fill in all fields.', 'error')
        return render_template('contact.html', form=form), 400

    email_validation = validate_email(form['email'])
    if not email_validation.is_valid:
        flash(email_validation.error_message, 'error')
        return render_template('contact.html', form=form), 400

    if send_contact_message(form['name'], email_validation.sanitized_value, form['subject'], form['message']):
        flash("Thanks for reaching out! We'll get back to you soon.", 'success')
        return redirect(url_for('main.contact'))

    flash('We could not send your message right now. Please try again later.', 'error')
    return render_template('contact.html', form=form), 500


def _table_status():
    existing = set(inspect(db.engine).get_table_names())
    return [{'name': name, 'exists': name in existing} for name in STORE_TABLES]


@main_bp.route('/setup')
def setup():
    """Database setup checklist"""
    try:
        tables = _table_status()
    except Exception as e:
        logger.error(f"Setup table check failed: {str(e)}", exc_info=True)
        return render_error_page('Database Unavailable',
            'Could not connect to the database. Check DATABASE_URL and try again.', 500)

    return render_template('setup.html',
                           tables=tables,
                           all_ready=all(t['exists'] for t in tables),
                           setup_enabled=current_app.config.get('SETUP_ENABLED', False))


@main_bp.route('/setup/init-db', methods=['POST'])
def init_db():
    """Create tables and load the sample catalog"""
    if not current_app.config.get('SETUP_ENABLED', False):
        return render_error_page('Access Denied', 'Database setup is disabled on this server.', 403)

    try:
        db.create_all()
        added = seed_sample_data()
        logger.info(f"Database initialized; {added} sample rows added")
        flash(f'Database initialized successfully. {added} sample rows added.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Database initialization failed: {str(e)}", exc_info=True)
        flash('Database initialization failed. Please check the server logs.', 'error')

    return redirect(url_for('main.setup'))
