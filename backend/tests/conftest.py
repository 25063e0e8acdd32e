"""
Pytest fixtures for insights backend tests.

Provides test database setup, a small management tree, catalog and order
factories, and a test client.
"""

from datetime import datetime

import pytest
from insights import create_app
from insights.config import Config
from insights.extensions import db
from insights.models import Order, OrderLine, Product, User
from insights.services import permission_service, session_service


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ["http://localhost:5173"]


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def setup_roles(db_session):
    """Seed role templates with default permissions."""
    permission_service.initialize_role_templates()
    db_session.commit()


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory: make_user("alice", "manager", manager=<User>)."""
    def _make(username, role, manager=None, **kwargs):
        user = User(
            username=username,
            email=f"{username}@example.com",
            first_name=kwargs.pop("first_name", username.capitalize()),
            last_name=kwargs.pop("last_name", "Test"),
            role=role,
            managed_by_user_id=manager.id if manager else None,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: make_product(owner, "Widget", price_cents=5000)."""
    def _make(owner, name, price_cents=1000, category="general"):
        product = Product(
            owner_user_id=owner.id,
            name=name,
            category=category,
            price_cents=price_cents,
            stock=10,
        )
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def make_order(db_session):
    """
    Factory: make_order(buyer, created_at, [(product, quantity, unit_price_cents), ...]).

    A line may pass a bare product id instead of a Product to simulate a
    reference to an item that no longer exists.
    """
    def _make(buyer, created_at, lines, status="delivered", country="India", state="KA", city="Bengaluru"):
        order = Order(
            buyer_user_id=buyer.id,
            status=status,
            created_at=created_at,
            shipping_country=country,
            shipping_state=state,
            shipping_city=city,
        )
        db_session.add(order)
        db_session.flush()

        items_total = 0
        for product, quantity, unit_price_cents in lines:
            product_id = product if isinstance(product, int) else product.id
            name = f"Item {product_id}" if isinstance(product, int) else product.name
            db_session.add(OrderLine(
                order_id=order.id,
                product_id=product_id,
                name=name,
                quantity=quantity,
                unit_price_cents=unit_price_cents,
            ))
            items_total += quantity * unit_price_cents

        # Stored totals carry tax and shipping that attribution must ignore
        order.items_price_cents = items_total
        order.tax_price_cents = 700
        order.shipping_price_cents = 300
        order.total_price_cents = items_total + 1000
        db_session.commit()
        db_session.refresh(order)
        return order
    return _make


@pytest.fixture(scope='function')
def org(setup_roles, make_user):
    """
    Management tree:

        top (super_admin)
        └── admin1 (admin)
            ├── manager1 (manager)
            │   └── provider1 (provider)
            └── manager2 (manager)

    plus an unaffiliated customer.
    """
    top = make_user("top", "super_admin")
    admin1 = make_user("admin1", "admin", manager=top)
    manager1 = make_user("manager1", "manager", manager=admin1)
    manager2 = make_user("manager2", "manager", manager=admin1)
    provider1 = make_user("provider1", "provider", manager=manager1)
    customer = make_user("customer", "customer")
    return {
        "top": top,
        "admin1": admin1,
        "manager1": manager1,
        "manager2": manager2,
        "provider1": provider1,
        "customer": customer,
    }


@pytest.fixture(scope='function')
def auth_header(db_session):
    """Factory: auth_header(user) -> {"Authorization": "Bearer ..."}."""
    def _make(user):
        _, token = session_service.create_session(user.id)
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def as_of():
    return datetime(2025, 6, 15, 12, 0, 0)
