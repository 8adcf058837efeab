"""
Cart Routes

FLOW OVERVIEW
- /cart [GET]
  • Auth gate; cart rows newest first with totals.
- /cart/add/<product_id> [POST]
  • Auth gate (redirect back to the product); increment existing row or insert quantity 1.
- /cart/update/<item_id> [POST]
  • Auth gate; set quantity (values below 1 are ignored).
- /cart/remove/<item_id> [POST]
  • Auth gate; delete the row.
"""

import logging
from flask import Blueprint, render_template, request, redirect, url_for, flash
from ..models import db, CartItem, Product
from ..utils.auth_utils import get_current_user, login_required, safe_redirect_target
from ..utils.checkout import cart_summary

cart_bp = Blueprint('cart', __name__)
logger = logging.getLogger(__name__)


@cart_bp.route('')
@login_required
def view_cart():
    user = get_current_user()
    items = CartItem.for_user(user.id)
    return render_template('cart.html', items=items, summary=cart_summary(items))


@cart_bp.route('/add/<int:product_id>', methods=['POST'])
def add_to_cart(product_id):
    """Add one unit of a product to the signed-in user's cart"""
    product = Product.query.filter_by(id=product_id, is_active=True).first()
    if product is None:
        flash('Product not found.', 'error')
        return redirect(url_for('catalog.products'))

    user = get_current_user()
    if user is None:
        flash('Please log in to add items to your cart.', 'error')
        return redirect(url_for('auth.login',
                                redirect=url_for('catalog.product_detail', slug=product.slug)))

    try:
        item = CartItem.query.filter_by(user_id=user.id, product_id=product.id).first()
        if item:
            item.quantity += 1
            db.session.commit()
            flash('Cart updated', 'success')
        else:
            db.session.add(CartItem(user_id=user.id, product_id=product.id, quantity=1))
            db.session.commit()
            flash('Added to cart', 'success')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Add to cart failed for product {product_id}: {str(e)}", exc_info=True)
        flash('Could not add this item to your cart. Please try again.', 'error')

    return redirect(safe_redirect_target(request.form.get('next'),
                                         url_for('catalog.product_detail', slug=product.slug)))


def _owned_item(item_id, user):
    return CartItem.query.filter_by(id=item_id, user_id=user.id).first()


@cart_bp.route('/update/<int:item_id>', methods=['POST'])
@login_required
def update_quantity(item_id):
    user = get_current_user()
    try:
        quantity = int(request.form.get('quantity', ''))
    except ValueError:
        return redirect(url_for('cart.view_cart'))

    if quantity < 1:
        return redirect(url_for('cart.view_cart'))

    item = _owned_item(item_id, user)
    if item is None:
        flash('Cart item not found.', 'error')
        return redirect(url_for('cart.view_cart'))

    try:
        item.quantity = quantity
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Cart update failed for item {item_id}: {str(e)}", exc_info=True)
        flash('Could not update your cart. Please try again.', 'error')

    return redirect(url_for('cart.view_cart'))


@cart_bp.route('/remove/<int:item_id>', methods=['POST'])
@login_required
def remove_item(item_id):
    user = get_current_user()
    item = _owned_item(item_id, user)
    if item is None:
        flash('Cart item not found.', 'error')
        return redirect(url_for('cart.view_cart'))

    try:
        db.session.delete(item)
        db.session.commit()
        flash('Item removed from cart', 'info')
    except Exception as e:
        db.session.rollback()
        logger.error(f"Cart remove failed for item {item_id}: {str(e)}", exc_info=True)
        flash('Could not remove this item. Please try again.', 'error')

    return redirect(url_for('cart.view_cart'))
