import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="fraction-logs-"))
os.environ.setdefault("SUPERADMIN_EMAIL", "owner@fraction.test")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.orm import sessionmaker

from app.db.base import Base, import_models
from app.db.session import build_engine
from app.models.admin import Admin
from app.models.amc import AMC, AMCInstallment
from app.models.base.enums import ActorRole, AdminRole, KYCStatus, UserStatus
from app.models.car import Car
from app.models.user import User
from app.core.permissions import Actor
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.utils.email import EmailResult

NOW = datetime(2025, 6, 15, 12, 0, 0)


class RecordingEmailSender:
    """Keeps sent mail in memory; can be told to fail."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send_email(self, to, subject, body):
        if self.fail:
            return EmailResult(success=False, error="SMTP unavailable")
        self.sent.append({"to": to, "subject": subject, "body": body})
        return EmailResult(success=True)

    def recipients(self):
        return [mail["to"] for mail in self.sent]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def engine():
    import_models()
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def email_outbox(monkeypatch):
    """Every dispatcher built without an explicit sender records here instead of using SMTP."""
    sender = RecordingEmailSender()
    monkeypatch.setattr(
        "app.services.base.notification_dispatcher.SMTPEmailSender",
        lambda *args, **kwargs: sender,
    )
    return sender


@pytest.fixture
def dispatcher(db, email_outbox):
    return NotificationDispatcher(db, email_sender=email_outbox)


# -----------------------------------------------------------------------------
# Seed factories
# -----------------------------------------------------------------------------

@pytest.fixture
def make_car(db):
    def _make(**kwargs):
        values = {
            "name": "Mercedes C-Class",
            "brand": "Mercedes",
            "waitlist_tokens_available": 20,
            "book_now_tokens_available": 12,
            "stop_bookings": False,
        }
        values.update(kwargs)
        car = Car(**values)
        db.add(car)
        db.commit()
        return car
    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(**kwargs):
        counter["n"] += 1
        values = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@fraction.test",
            "kyc_status": KYCStatus.APPROVED,
            "status": UserStatus.ACTIVE,
        }
        values.update(kwargs)
        user = User(**values)
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_admin(db):
    counter = {"n": 0}

    def _make(role=AdminRole.ADMIN, **kwargs):
        counter["n"] += 1
        values = {
            "name": f"Admin {counter['n']}",
            "email": f"admin{counter['n']}@fraction.test",
            "role": role,
            "is_active": True,
        }
        values.update(kwargs)
        admin = Admin(**values)
        db.add(admin)
        db.commit()
        return admin
    return _make


@pytest.fixture
def make_amc(db):
    def _make(user, car, installments):
        """``installments``: iterable of ``(amount, due_date, paid)`` tuples."""
        amc = AMC(user_id=user.id, car_id=car.id, ticket_id="ticket-1")
        for year, (amount, due_date, paid) in enumerate(installments, start=1):
            amc.installments.append(AMCInstallment(
                year=year,
                amount=Decimal(str(amount)),
                due_date=due_date,
                paid=paid,
                penalty=Decimal("0.00"),
            ))
        db.add(amc)
        db.commit()
        return amc
    return _make


@pytest.fixture
def car(make_car):
    return make_car()


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_admin):
    return make_admin()


@pytest.fixture
def superadmin(make_admin):
    return make_admin(role=AdminRole.SUPER_ADMIN)


@pytest.fixture
def user_actor(user):
    return Actor(id=user.id, role=ActorRole.USER)


@pytest.fixture
def admin_actor(admin):
    return Actor(id=admin.id, role=ActorRole.ADMIN)


def day(offset, hour=0):
    """Midnight ``offset`` days after NOW's date, plus ``hour``."""
    base = NOW.replace(hour=0, minute=0, second=0, microsecond=0)
    return base + timedelta(days=offset, hours=hour)
