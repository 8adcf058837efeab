"""
Sample catalog used by /setup and the seed-db command.
"""

from decimal import Decimal
from .database import db
from .catalog import Category, Product

SAMPLE_CATEGORIES = [
    {'name': 'Handbags', 'description': 'Imported leather and fashion handbags'},
    {'name': 'Electronics', 'description': 'Phones, audio and accessories'},
    {'name': 'Home & Kitchen', 'description': 'Cookware and home essentials'},
    {'name': 'Beauty', 'description': 'Skincare and fragrances'},
]

SAMPLE_PRODUCTS = [
    {'name': 'Classic Leather Tote', 'category': 'handbags', 'price': '450.00',
     'compare_at_price': '520.00', 'stock_quantity': 12, 'is_featured': True},
    {'name': 'Mini Crossbody Bag', 'category': 'handbags', 'price': '220.00',
     'stock_quantity': 0, 'status': 'preorder'},
    {'name': 'Wireless Earbuds', 'category': 'electronics', 'price': '310.00',
     'compare_at_price': '380.00', 'stock_quantity': 25, 'is_featured': True},
    {'name': 'Fast Charging Power Bank', 'category': 'electronics', 'price': '180.00',
     'stock_quantity': 40},
    {'name': 'Non-Stick Cookware Set', 'category': 'home-kitchen', 'price': '650.00',
     'stock_quantity': 6, 'is_featured': True},
    {'name': 'Vitamin C Serum', 'category': 'beauty', 'price': '95.00',
     'stock_quantity': 30},
]


def seed_sample_data():
    """Insert sample categories/products that do not exist yet. Returns rows added."""
    from .utils import slugify

    added = 0
    categories = {}
    for data in SAMPLE_CATEGORIES:
        slug = slugify(data['name'])
        category = Category.query.filter_by(slug=slug).first()
        if category is None:
            category = Category(name=data['name'], slug=slug, description=data['description'])
            db.session.add(category)
            added += 1
        categories[slug] = category
    db.session.flush()

    for data in SAMPLE_PRODUCTS:
        slug = slugify(data['name'])
        if Product.query.filter_by(slug=slug).first():
            continue
        compare = data.get('compare_at_price')
        db.session.add(Product(
            name=data['name'],
            slug=slug,
            description=f"{data['name']} imported and quality checked.",
            price=Decimal(data['price']),
            compare_at_price=Decimal(compare) if compare else None,
            category_id=categories[data['category']].id,
            stock_quantity=data['stock_quantity'],
            status=data.get('status', 'available'),
            is_active=True,
            is_featured=data.get('is_featured', False),
        ))
        added += 1

    db.session.commit()
    return added
