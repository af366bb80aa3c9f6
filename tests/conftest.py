import os

# Must be set before warehub.config.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from warehub.config.database import Base, get_db
from warehub.core.auth.service import AuthService
from warehub.main import app
from warehub.shared.database.models import User, Warehouse, Listing
from warehub.shared.enums import ListingStatus, WarehouseStatus
from warehub.shared.services.notification_service import get_notification_service

DEMO_PASSWORD = "Demo@1234"


class RecordingNotifier:
    """Stands in for the email sender and keeps every message"""

    def __init__(self):
        self.sent = []

    def send(self, message):
        self.sent.append(dict(message))
        return True


@pytest.fixture(scope="session")
def password_hash():
    return AuthService.get_password_hash(DEMO_PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(session_factory, notifier):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db, password_hash):
    counter = {"n": 0}

    def _make_user(roles, name=None, email=None, **extra):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password_hash=password_hash,
            roles=list(roles),
            is_active=extra.pop("is_active", True),
            **extra
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_warehouse(db):
    def _make_warehouse(owner, **overrides):
        data = {
            "owner_id": owner.id,
            "name": "Okhla Logistics Hub",
            "address": "A-12, Okhla Phase II",
            "city": "Delhi",
            "state": "DL",
            "pincode": "110020",
            "type": "DRY",
            "description": "Ambient storage with easy truck access.",
            "total_space": 20000,
            "available_space": 14000,
            "price_per_sqft": 22.5,
            "is_approved": True,
            "is_disabled_by_admin": False,
            "status": WarehouseStatus.PUBLISHED.value,
        }
        data.update(overrides)
        warehouse = Warehouse(**data)
        db.add(warehouse)
        db.commit()
        db.refresh(warehouse)
        return warehouse

    return _make_warehouse


@pytest.fixture
def make_listing(db):
    def _make_listing(owner, **overrides):
        data = {
            "owner_id": owner.id,
            "status": ListingStatus.DRAFT.value,
            "title": "Okhla Ambient Storage with Dock Access",
            "description": "Clean ambient storage",
            "address": {"addressLine1": "A-12, Okhla Phase II", "city": "Delhi", "state": "DL", "zip": "110020"},
            "pricing": {"totalSqFt": 20000, "minSqFt": 1000, "ratePerSqFtPerMonth": 22.5},
        }
        data.update(overrides)
        listing = Listing(**data)
        db.add(listing)
        db.commit()
        db.refresh(listing)
        return listing

    return _make_listing


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {AuthService.create_token_for_user(user)}"}

    return _auth_headers


@pytest.fixture
def owner(make_user):
    return make_user(["WAREHOUSE_OWNER"], name="Neha Iyer", email="neha.owner@example.com")


@pytest.fixture
def merchant(make_user):
    return make_user(["MERCHANT"], name="Priya Shah", email="priya.merchant@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(["ADMIN"], name="Admin Singh", email="admin@example.com")
