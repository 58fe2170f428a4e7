"""
Pytest configuration and fixtures for testing the Scrap Marketplace API.
"""

import os
import pytest
from faker import Faker

from scrapmarket import create_app, db
from scrapmarket.models import User, UserRole, Listing
from scrapmarket.utils import create_token

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table and keep an app context open for the test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


def _create_user(**overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'username': fake.user_name() + fake.pystr(min_chars=4, max_chars=6),
        'email': fake.unique.email(),
        'full_name': fake.name(),
        'role': UserRole.BUYER,
    }
    data.update(overrides)
    user = User(**data)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'username': user.username,
        'full_name': user.full_name,
        'role': user.role,
        'upi_id': user.upi_id,
    }


def _create_listing(seller_id, **overrides):
    """Helper to create an available listing."""
    data = {
        'title': fake.sentence(nb_words=3),
        'description': fake.paragraph(),
        'category': 'Metal',
        'weight_kg': 25.0,
        'expected_price': 100.0,
        'location': fake.city(),
    }
    data.update(overrides)
    listing = Listing(seller_id=seller_id, **data)
    db.session.add(listing)
    db.session.commit()
    return {
        'id': listing.id,
        'title': listing.title,
        'seller_id': listing.seller_id,
        'expected_price': listing.expected_price,
    }


def _headers(user_id):
    return {'Authorization': f'Bearer {create_token(user_id)}'}


@pytest.fixture
def seller(app, db_session):
    """A seller with a UPI handle."""
    with app.app_context():
        return _create_user(role=UserRole.SELLER, upi_id=f'{fake.user_name()}@upi')


@pytest.fixture
def seller_without_upi(app, db_session):
    with app.app_context():
        return _create_user(role=UserRole.SELLER)


@pytest.fixture
def buyer(app, db_session):
    with app.app_context():
        return _create_user()


@pytest.fixture
def second_buyer(app, db_session):
    """A second buyer for competing-purchase tests."""
    with app.app_context():
        return _create_user()


@pytest.fixture
def admin_user(app, db_session):
    with app.app_context():
        return _create_user(role=UserRole.ADMIN)


@pytest.fixture
def listing(app, db_session, seller):
    """An available listing priced at 100."""
    with app.app_context():
        return _create_listing(seller['id'])


@pytest.fixture
def make_listing(app, db_session):
    """Factory for extra listings."""
    def _make(seller_id, **overrides):
        with app.app_context():
            return _create_listing(seller_id, **overrides)
    return _make


@pytest.fixture
def seller_headers(app, seller):
    with app.app_context():
        return _headers(seller['id'])


@pytest.fixture
def buyer_headers(app, buyer):
    with app.app_context():
        return _headers(buyer['id'])


@pytest.fixture
def second_buyer_headers(app, second_buyer):
    with app.app_context():
        return _headers(second_buyer['id'])


@pytest.fixture
def admin_headers(app, admin_user):
    with app.app_context():
        return _headers(admin_user['id'])
