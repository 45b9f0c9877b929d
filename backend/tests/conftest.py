"""
Pytest fixtures for optistore backend tests.

Provides an in-memory database, a controllable clock, isolated session
storage per test and a ready-made pair of stores (Alpha and Beta).
"""

from datetime import date, datetime, timedelta

import pytest

from optistore import create_app
from optistore.extensions import db
from optistore.models import Store
from optistore.services.auth_service import hash_secret
from optistore.services.data_service import DataService
from optistore.services.session_service import SessionStore


SUPER_ADMIN_USERNAME = "superadmin"
SUPER_ADMIN_PASSWORD = "admin-pass-2024"
TEST_BCRYPT_ROUNDS = 4


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SUPER_ADMIN_USERNAME': SUPER_ADMIN_USERNAME,
        'SUPER_ADMIN_PASSWORD': SUPER_ADMIN_PASSWORD,
        'BCRYPT_ROUNDS': TEST_BCRYPT_ROUNDS,
    })

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
def clock():
    return FakeClock(datetime(2026, 10, 17, 9, 0, 0))


@pytest.fixture(scope='function')
def storage():
    """Stand-in for the client-side session cookie."""
    return {}


@pytest.fixture(scope='function')
def sessions(storage, clock):
    return SessionStore(storage, clock=clock)


@pytest.fixture(scope='function')
def make_services(app, db_session):
    """Factory: a DataService over the given session store."""
    def _make_services(session_store: SessionStore) -> DataService:
        return DataService(
            session_store,
            super_admin_username=SUPER_ADMIN_USERNAME,
            super_admin_password_hash=app.config['SUPER_ADMIN_PASSWORD_HASH'],
            bcrypt_rounds=TEST_BCRYPT_ROUNDS,
        )

    return _make_services


@pytest.fixture(scope='function')
def services(make_services, sessions):
    """DataService wired to this test's session storage."""
    return make_services(sessions)


@pytest.fixture(scope='function')
def other_client_services(make_services, clock):
    """A second, independent client (its own session storage)."""
    return make_services(SessionStore({}, clock=clock))


@pytest.fixture(scope='function')
def make_store(db_session):
    """Factory: insert a store directly, bypassing the access gate."""
    def _make_store(name: str, pin: str = "1234") -> Store:
        store = Store(name=name, pin_hash=hash_secret(pin, TEST_BCRYPT_ROUNDS))
        db_session.add(store)
        db_session.commit()
        return store

    return _make_store


@pytest.fixture(scope='function')
def store_alpha(make_store):
    return make_store("Alpha", "1234")


@pytest.fixture(scope='function')
def store_beta(make_store):
    return make_store("Beta", "5678")


@pytest.fixture(scope='function')
def as_super_admin(services):
    """Services acting with a super admin session only."""
    services.sessions.create_super_admin_session(SUPER_ADMIN_USERNAME)
    return services


@pytest.fixture(scope='function')
def as_alpha(services, store_alpha):
    """Services acting with a store session for Alpha only."""
    services.sessions.create_store_session(store_alpha)
    return services


@pytest.fixture(scope='function')
def alpha_customer(as_alpha, store_alpha):
    return as_alpha.customers.create(store_alpha.id, {"name": "Asif", "phone": "0300-1112222"})


@pytest.fixture(scope='function')
def alpha_checkup(as_alpha, store_alpha, alpha_customer):
    return as_alpha.checkups.create(store_alpha.id, {
        "customer_id": alpha_customer.id,
        "date": "2026-10-15",
        "right_eye_spherical_dv": "-1.25",
        "left_eye_spherical_dv": "-1.00",
        "tested_by": "Dr. Rana",
    })


def order_payload(customer_id: str, **overrides) -> dict:
    payload = {
        "customer_id": customer_id,
        "order_date": date(2026, 10, 15).isoformat(),
        "frame": "Ray-Ban RB5154",
        "lenses": "Single vision",
        "total_amount": "5000",
        "advance_amount": "2000",
    }
    payload.update(overrides)
    return payload
