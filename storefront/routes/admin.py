"""
Admin Routes

FLOW OVERVIEW
- /admin [GET]
  • Admin gate; revenue (all order totals), counts and the most recent orders.
- /admin/products [GET], /admin/products/new [GET, POST],
  /admin/products/<id>/edit [GET, POST], /admin/products/<id>/delete [POST]
  • Product management.
- /admin/categories [GET], /admin/categories/new [GET, POST],
  /admin/categories/<id>/edit [GET, POST], /admin/categories/<id>/delete [POST]
  • Category management; delete refused while products reference the category.
- /admin/orders [GET] ?filter=all|pending|paid|cancelled&q=
  • Orders newest first with payment filter and search.
- /admin/orders/<id> [GET]
  • Order details with items and shipping address.
- /admin/orders/<id>/payment-status [POST]
  • Payment status change; "paid" sends the paid email.
- /admin/orders/<id>/status [POST]
  • Fulfillment status change; sends the status update email.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash, abort
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from ..models import db, User, Category, Product, CartItem, Order, OrderItem, FULFILLMENT_STATUSES, PAYMENT_STATUSES, PRODUCT_STATUSES
from ..utils.auth_utils import admin_required
from ..utils.checkout import set_payment_status, set_fulfillment_status
from ..utils.mailer import send_order_paid_email, send_order_status_update_email
from ..utils.validators import validate_product_form, validate_category_form, sanitize_input

admin_bp = Blueprint('admin', __name__)
logger = logging.getLogger(__name__)

ORDER_FILTERS = ('all', 'pending', 'paid', 'cancelled')
RECENT_ORDER_LIMIT = 5


@admin_bp.route('')
@admin_required
def dashboard():
    """Back-office overview"""
    # Sum of every order total, paid or not
    revenue = db.session.query(func.coalesce(func.sum(Order.total_amount), 0)).scalar()
    stats = {
        'revenue': revenue,
        'orders': Order.query.count(),
        'products': Product.query.count(),
        'users': User.query.count(),
    }
    recent_orders = (
        Order.query
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(RECENT_ORDER_LIMIT)
        .all()
    )
    return render_template('admin/dashboard.html', stats=stats, recent_orders=recent_orders)


# Products

def _category_choices():
    return Category.query.order_by(Category.name).all()


def _render_product_form(form, product=None, status=200):
    return render_template('admin/product_form.html', form=form, product=product,
                           categories=_category_choices(), statuses=PRODUCT_STATUSES), status


@admin_bp.route('/products')
@admin_required
def products():
    items = Product.query.order_by(Product.created_at.desc(), Product.id.desc()).all()
    return render_template('admin/products.html', products=items)


@admin_bp.route('/products/new', methods=['GET', 'POST'])
@admin_required
def new_product():
    if request.method == 'GET':
        return _render_product_form({'status': 'available', 'is_active': True, 'stock_quantity': 0})

    validation = validate_product_form(request.form)
    if not validation.is_valid:
        for message in validation.errors:
            flash(message, 'error')
        return _render_product_form(request.form, status=400)

    try:
        product = Product(**validation.data)
        db.session.add(product)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        flash('A product with this slug already exists.', 'error')
        return _render_product_form(request.form, status=409)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Product create failed: {str(e)}", exc_info=True)
        flash('Failed to create product. Please try again.', 'error')
        return _render_product_form(request.form, status=500)

    flash(f'Product "{product.name}" created.', 'success')
    return redirect(url_for('admin.products'))


@admin_bp.route('/products/<int:product_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        abort(404)

    if request.method == 'GET':
        form = {
            'name': product.name,
            'slug': product.slug,
            'description': product.description,
            'price': product.price,
            'compare_at_price': product.compare_at_price or '',
            'stock_quantity': product.stock_quantity,
            'category_id': product.category_id,
            'status': product.status,
            'image_url': product.image_url or '',
            'is_active': product.is_active,
            'is_featured': product.is_featured,
        }
        return _render_product_form(form, product)

    validation = validate_product_form(request.form)
    if not validation.is_valid:
        for message in validation.errors:
            flash(message, 'error')
        return _render_product_form(request.form, product, status=400)

    try:
        for key, value in validation.data.items():
            setattr(product, key, value)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        flash('A product with this slug already exists.', 'error')
        return _render_product_form(request.form, product, status=409)
    except Exception as e:
        db.session.rollback()
        logger.error(f"Product update failed for {product_id}: {str(e)}", exc_info=True)
        flash('Failed to update product. Please try again.', 'error')
        return _render_product_form(request.form, product, status=500)

    flash(f'Product "{product.name}" updated.', 'success')
    return redirect(url_for('admin.products'))


@admin_bp.route('/products/<int:product_id>/delete', methods=['POST'])
@admin_required
def delete_product(product_id):
    product = db.session.get(Product, product_id)
    if product is None:
        abort(404)

    if OrderItem.query.filter_by(product_id=product.id).count():
        flash('This product is part of existing orders. Deactivate it instead.', 'error')
        return redirect(url_for('admin.products'))

    try:
        CartItem.query.filter_by(product_id=product.id).delete()
        db.session.delete(product)
        db.session.commit()
        flash(f'Product "{product.name}" deleted.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Product delete failed for {product_id}: {str(e)}", exc_info=True)
        flash('Failed to delete product. Please try again.', 'error')
    return redirect(url_for('admin.products'))


# Categories

@admin_bp.route('/categories')
@admin_required
def categories():
    items = Category.query.order_by(Category.name).all()
    return render_template('admin/categories.html', categories=items)


@admin_bp.route('/categories/new', methods=['GET', 'POST'])
@admin_required
def new_category():
    if request.method == 'GET':
        return render_template('admin/category_form.html', form={}, category=None)

    validation = validate_category_form(request.form)
    if not validation.is_valid:
        for message in validation.errors:
            flash(message, 'error')
        return render_template('admin/category_form.html', form=request.form, category=None), 400

    try:
        category = Category(**validation.data)
        db.session.add(category)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        flash('A category with this slug already exists.', 'error')
        return render_template('admin/category_form.html', form=request.form, category=None), 409
    except Exception as e:
        db.session.rollback()
        logger.error(f"Category create failed: {str(e)}", exc_info=True)
        flash('Failed to create category. Please try again.', 'error')
        return render_template('admin/category_form.html', form=request.form, category=None), 500

    flash(f'Category "{category.name}" created.', 'success')
    return redirect(url_for('admin.categories'))


@admin_bp.route('/categories/<int:category_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        abort(404)

    if request.method == 'GET':
        form = {
            'name': category.name,
            'slug': category.slug,
            'description': category.description or '',
            'image_url': category.image_url or '',
        }
        return render_template('admin/category_form.html', form=form, category=category)

    validation = validate_category_form(request.form)
    if not validation.is_valid:
        for message in validation.errors:
            flash(message, 'error')
        return render_template('admin/category_form.html', form=request.form, category=category), 400

    try:
        for key, value in validation.data.items():
            setattr(category, key, value)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        flash('A category with this slug already exists.', 'error')
        return render_template('admin/category_form.html', form=request.form, category=category), 409
    except Exception as e:
        db.session.rollback()
        logger.error(f"Category update failed for {category_id}: {str(e)}", exc_info=True)
        flash('Failed to update category. Please try again.', 'error')
        return render_template('admin/category_form.html', form=request.form, category=category), 500

    flash(f'Category "{category.name}" updated.', 'success')
    return redirect(url_for('admin.categories'))


@admin_bp.route('/categories/<int:category_id>/delete', methods=['POST'])
@admin_required
def delete_category(category_id):
    category = db.session.get(Category, category_id)
    if category is None:
        abort(404)

    if Product.query.filter_by(category_id=category.id).count():
        flash('Cannot delete a category that still has products.', 'error')
        return redirect(url_for('admin.categories'))

    try:
        db.session.delete(category)
        db.session.commit()
        flash(f'Category "{category.name}" deleted.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Category delete failed for {category_id}: {str(e)}", exc_info=True)
        flash('Failed to delete category. Please try again.', 'error')
    return redirect(url_for('admin.categories'))


# Orders

@admin_bp.route('/orders')
@admin_required
def orders():
    payment_filter = request.args.get('filter', 'all')
    if payment_filter not in ORDER_FILTERS:
        payment_filter = 'all'
    search = sanitize_input(request.args.get('q'), 100)

    query = Order.query
    if payment_filter != 'all':
        query = query.filter(Order.payment_status == payment_filter)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(or_(func.lower(Order.order_number).like(pattern),
                                 func.lower(Order.email).like(pattern)))

    items = query.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return render_template('admin/orders.html', orders=items, filters=ORDER_FILTERS,
                           active_filter=payment_filter, search=search)


def _get_order_or_404(order_id):
    order = db.session.get(Order, order_id)
    if order is None:
        abort(404)
    return order


@admin_bp.route('/orders/<int:order_id>')
@admin_required
def order_details(order_id):
    order = _get_order_or_404(order_id)
    return render_template('admin/order_details.html', order=order,
                           payment_statuses=PAYMENT_STATUSES, fulfillment_statuses=FULFILLMENT_STATUSES)


@admin_bp.route('/orders/<int:order_id>/payment-status', methods=['POST'])
@admin_required
def update_payment_status(order_id):
    order = _get_order_or_404(order_id)
    new_status = request.form.get('payment_status', '')

    try:
        set_payment_status(order, new_status)
    except ValueError as e:
        db.session.rollback()
        flash(str(e), 'error')
        return redirect(url_for('admin.order_details', order_id=order.id))
    except Exception as e:
        db.session.rollback()
        logger.error(f"Payment status update failed for {order.order_number}: {str(e)}", exc_info=True)
        flash('Failed to update payment status. Please try again.', 'error')
        return redirect(url_for('admin.order_details', order_id=order.id))

    if new_status == 'paid':
        if send_order_paid_email(order.email, order.order_number, order.total_amount):
            flash('Payment status updated and customer notified.', 'success')
        else:
            flash('Payment status updated but the notification email failed.', 'warning')
    else:
        flash('Payment status updated.', 'success')
    return redirect(url_for('admin.order_details', order_id=order.id))


@admin_bp.route('/orders/<int:order_id>/status', methods=['POST'])
@admin_required
def update_order_status(order_id):
    order = _get_order_or_404(order_id)
    new_status = request.form.get('status', '')

    try:
        set_fulfillment_status(order, new_status)
    except ValueError as e:
        db.session.rollback()
        flash(str(e), 'error')
        return redirect(url_for('admin.order_details', order_id=order.id))
    except Exception as e:
        db.session.rollback()
        logger.error(f"Order status update failed for {order.order_number}: {str(e)}", exc_info=True)
        flash('Failed to update order status. Please try again.', 'error')
        return redirect(url_for('admin.order_details', order_id=order.id))

    if send_order_status_update_email(order, new_status):
        flash('Order status updated and customer notified.', 'success')
    else:
        flash('Order status updated but the notification email failed.', 'warning')
    return redirect(url_for('admin.order_details', order_id=order.id))
