"""Pytest configuration and fixtures."""

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app import create_app
from extensions import db
from models.account import Account
from policies import AuthContext
from schemas import BookingCreate, ExcessCreate
from services import bookings as booking_service, excesses as excess_service

PASSWORD = "secret123"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'cardoo-test.db'}",
        "UPLOAD_FOLDER_DOCUMENTS": str(tmp_path / "documents"),
        "MAX_DOCUMENT_SIZE": 1024,
        "LOG_LEVEL": "WARNING",
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """An application context for calling services directly."""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_account(app):
    counter = {"n": 0}

    def _make(role="CUSTOMER", name=None, active=True):
        counter["n"] += 1
        email = f"{role.lower()}{counter['n']}@cardoo.com"
        with app.app_context():
            account = Account(name=name or f"{role.title()} {counter['n']}", email=email,
                              role=role, active=active)
            account.set_password(PASSWORD)
            db.session.add(account)
            db.session.commit()
            account_id = account.id
        return SimpleNamespace(id=account_id, email=email, password=PASSWORD, role=role,
                               ctx=AuthContext(account_id=account_id, role=role))

    return _make


@pytest.fixture
def login(app):
    """Return a fresh test client logged in as ``account``."""

    def _login(account):
        client = app.test_client()
        response = client.post("/auth/login", json={"email": account.email, "password": account.password})
        assert response.status_code == 200, response.get_json()
        return client

    return _login


@pytest.fixture
def make_booking(app):
    counter = {"n": 0}

    def _make(owner, days_since_end=5, daily_rate="100.00", rental_days=3, contract_id=None):
        counter["n"] += 1
        end_date = date.today() - timedelta(days=days_since_end)
        data = BookingCreate(
            contract_id=contract_id or f"CT-{owner.id}-{counter['n']}",
            insurance_amount=Decimal("1000.00"),
            rental_days=rental_days,
            rental_type="daily",
            daily_rate=Decimal(daily_rate),
            start_date=end_date - timedelta(days=rental_days),
            end_date=end_date,
        )
        with app.app_context():
            return booking_service.create_booking(owner.ctx, data).id

    return _make


@pytest.fixture
def make_excess(app):
    def _make(owner, booking_id, amount="250.00", type="Scratch"):
        data = ExcessCreate(booking_id=booking_id, type=type, amount=Decimal(amount))
        with app.app_context():
            return excess_service.create_excess(owner.ctx, data).id

    return _make
