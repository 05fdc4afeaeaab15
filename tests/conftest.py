"""
Pytest configuration and fixtures
"""
import os

# Must be set before anything imports app.core.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_CHECK_ON_STARTUP"] = "false"
os.environ["SERVICE_CATALOG_URL"] = ""
os.environ["SENDGRID_API_KEY"] = ""
os.environ["NOTIFY_FAILURE_IS_ERROR"] = "false"

import smtplib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.session import Base, get_db
from app.main import app
from app.models.booking import Booking  # noqa: F401
from app.models.email_log import EmailLog  # noqa: F401


@pytest.fixture(scope="session")
def test_engine():
    """In-memory SQLite shared by every session in the test run"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    Base.metadata.create_all(bind=test_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests use the test database"""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP"""
    outbox = []

    def fake_send(to_email, subject, body):
        outbox.append({"to": to_email, "subject": subject, "body": body})

    monkeypatch.setattr("app.services.email_service.send_email", fake_send)
    return outbox


@pytest.fixture
def broken_mail(monkeypatch):
    """Mail transport that always rejects"""

    def fake_send(to_email, subject, body):
        raise smtplib.SMTPException("relay refused")

    monkeypatch.setattr("app.services.email_service.send_email", fake_send)


@pytest.fixture
def booking_payload():
    return {
        "name": "Juan Dela Cruz",
        "email": "juan@example.com",
        "phoneNumber": "09171234567",
        "checkInDate": "2025-12-01",
        "checkOutDate": "2025-12-03",
        "serviceId": 5,
        "serviceName": "Family Cottage",
        "modeOfPayment": "online",
    }
