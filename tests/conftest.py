import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import Settings
from app.database import get_session
from app.main import create_app
from app.models.payment import Payment  # noqa: F401
from app.models.user import User  # noqa: F401
from app.schemas.payment import PaymentCreate
from app.services import auth as auth_service
from app.services import payments as payment_service

PASSWORD = "TestPass123!"


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def app_settings():
    return Settings(app_env="test", completed_payment_policy="keep")


@pytest.fixture
def app(session, app_settings):
    application = create_app(settings=app_settings, init_db=False)

    def override_get_session():
        return session

    application.dependency_overrides[get_session] = override_get_session
    return application


@pytest.fixture
def client(app):
    """Return an unauthenticated API client."""
    return TestClient(app)


@pytest.fixture
def alice_user(session):
    user, _ = auth_service.register(session, "alice@example.com", PASSWORD, "Alice Owner")
    return user


@pytest.fixture
def bob_user(session):
    user, _ = auth_service.register(session, "bob@example.com", PASSWORD, "Bob Other")
    return user


def bearer(user):
    return {"Authorization": f"Bearer {auth_service.create_user_token(user)}"}


@pytest.fixture
def alice_headers(alice_user):
    return bearer(alice_user)


@pytest.fixture
def bob_headers(bob_user):
    return bearer(bob_user)


@pytest.fixture
def make_payment(session):
    """Create a payment through the service layer."""
    def _make(user, **overrides):
        data = {
            "type": "to_pay",
            "person_name": "Alice",
            "amount": 100,
            "due_date": "2025-01-01",
        }
        data.update(overrides)
        return payment_service.create_payment(session, user.id, PaymentCreate(**data))
    return _make
