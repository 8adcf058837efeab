"""
Storefront catalog page tests.
"""

from decimal import Decimal

from storefront.models import Category, Product


class TestHomePage:

    def test_home_lists_featured_products_and_categories(self, client, product, preorder_product):
        response = client.get('/')
        assert response.status_code == 200
        assert b'Classic Leather Tote' in response.data
        # Not featured
        assert b'Mini Crossbody Bag' not in response.data
        assert b'Handbags' in response.data

    def test_home_limits_featured_products(self, client, db_session, category):
        for i in range(8):
            db_session.add(Product(name=f'Featured {i}', slug=f'featured-{i}', description='d',
                                   price=Decimal('10.00'), category_id=category.id,
                                   stock_quantity=1, is_featured=True))
        db_session.commit()

        response = client.get('/')
        assert response.data.count(b'class="product-card"') == 6

    def test_home_limits_categories(self, client, db_session):
        for name in ('Alpha', 'Beta', 'Gamma', 'Delta', 'Epsilon'):
            db_session.add(Category(name=name, slug=name.lower()))
        db_session.commit()

        response = client.get('/')
        assert response.data.count(b'class="category-card"') == 4

    def test_home_without_tables_shows_setup_notice(self, client, app_context):
        response = client.get('/')
        assert response.status_code == 200
        assert b'Database Setup Required' in response.data


class TestProductPages:

    def test_products_list_only_active(self, client, db_session, product, category):
        db_session.add(Product(name='Hidden Item', slug='hidden-item', description='d',
                               price=Decimal('5.00'), category_id=category.id, is_active=False))
        db_session.commit()

        response = client.get('/products')
        assert response.status_code == 200
        assert b'Classic Leather Tote' in response.data
        assert b'Hidden Item' not in response.data

    def test_product_detail(self, client, product):
        response = client.get(f'/products/{product.slug}')
        assert response.status_code == 200
        assert b'Classic Leather Tote' in response.data
        assert b'12 in stock' in response.data
        assert b'Save 10%' in response.data
        assert b'450.00' in response.data
        assert b'Handbags' in response.data

    def test_product_detail_out_of_stock_disables_add(self, client, preorder_product):
        response = client.get(f'/products/{preorder_product.slug}')
        assert response.status_code == 200
        assert b'Out of stock' in response.data
        assert b'Pre-order' in response.data
        assert b'disabled' in response.data

    def test_unknown_product_is_404(self, client, db_session):
        response = client.get('/products/does-not-exist')
        assert response.status_code == 404
        assert b'Page Not Found' in response.data


class TestCategoryPages:

    def test_categories_sorted_by_name(self, client, db_session):
        db_session.add_all([Category(name='Zeta', slug='zeta'), Category(name='Alpha', slug='alpha')])
        db_session.commit()

        body = client.get('/categories').data
        assert body.index(b'Alpha') < body.index(b'Zeta')

    def test_category_detail_lists_its_products(self, client, product, category):
        response = client.get(f'/categories/{category.slug}')
        assert response.status_code == 200
        assert b'Classic Leather Tote' in response.data

    def test_unknown_category(self, client, db_session):
        response = client.get('/categories/nope')
        assert response.status_code == 404
        assert b'Category not found.' in response.data
