"""
Catalog Routes

FLOW OVERVIEW
- / [GET]
  • Featured products and first categories; setup notice when tables are missing.
- /products [GET]
  • All active products, newest first.
- /products/<slug> [GET]
  • Product detail with discount badge and stock text; 404 when unknown.
- /categories [GET]
  • All categories by name.
- /categories/<slug> [GET]
  • Category and its active products.
"""

import logging
from flask import Blueprint, render_template, abort
from sqlalchemy.exc import OperationalError, ProgrammingError
from ..models import db, Category, Product
from ..utils.error_handlers import render_error_page

catalog_bp = Blueprint('catalog', __name__)
logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6
HOME_CATEGORY_LIMIT = 4


def _active_products():
    return Product.query.filter_by(is_active=True)


@catalog_bp.route('/')
def home():
    """Store landing page"""
    try:
        featured = (
            _active_products()
            .filter_by(is_featured=True)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(FEATURED_LIMIT)
            .all()
        )
        categories = Category.query.order_by(Category.name).limit(HOME_CATEGORY_LIMIT).all()
    except (OperationalError, ProgrammingError) as e:
        # Missing tables: the page links to /setup instead of listing products
        db.session.rollback()
        logger.warning(f"Catalog tables unavailable: {str(e)}")
        return render_template('index.html', products=[], categories=[], setup_required=True)

    return render_template('index.html', products=featured, categories=categories, setup_required=False)


@catalog_bp.route('/products')
def products():
    items = _active_products().order_by(Product.created_at.desc(), Product.id.desc()).all()
    return render_template('products/list.html', products=items)


@catalog_bp.route('/products/<slug>')
def product_detail(slug):
    product = _active_products().filter_by(slug=slug).first()
    if product is None:
        abort(404)
    return render_template('products/detail.html', product=product)


@catalog_bp.route('/categories')
def categories():
    items = Category.query.order_by(Category.name).all()
    return render_template('categories/list.html', categories=items)


@catalog_bp.route('/categories/<slug>')
def category_detail(slug):
    category = Category.query.filter_by(slug=slug).first()
    if category is None:
        return render_error_page('Not Found', 'Category not found.', 404)

    items = (
        _active_products()
        .filter_by(category_id=category.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .all()
    )
    return render_template('categories/detail.html', category=category, products=items)
