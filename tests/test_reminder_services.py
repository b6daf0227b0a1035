from datetime import timedelta

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.models.base.enums import KYCStatus, NotificationType, UserStatus
from app.models.notification import Notification
from app.models.user import User
from app.services.amc.amc_reminder_service import AMCReminderService
from app.services.users.kyc_reminder_service import KYCReminderService
from app.services.users.user_status_service import UserStatusService


# -----------------------------------------------------------------------------
# AMC reminders
# -----------------------------------------------------------------------------

@pytest.fixture
def amc_reminders(db, dispatcher):
    return AMCReminderService(db, dispatcher=dispatcher)


def test_reminder_window_boundaries(db, amc_reminders, user, car, make_amc, now):
    make_amc(user, car, [
        (10000, now + timedelta(days=31), False),
        (10000, now + timedelta(days=30), False),
        (10000, now - timedelta(days=1), False),
        (10000, now + timedelta(days=5), True),
    ])

    [preview] = amc_reminders.preview(now)
    assert [y.days_until_due for y in preview.unpaid_years] == [30]

    report = amc_reminders.send(now)
    assert report.to_dict() == {"reminders_sent": 1, "total_checked": 1, "error_count": 0}
    [note] = db.query(Notification).filter_by(type=NotificationType.AMC_REMINDER).all()
    assert note.recipient_id == user.id
    assert note.metadata_["days_left"] == 30


def test_reminders_are_sent_again_on_each_run(amc_reminders, user, car, make_amc, now):
    make_amc(user, car, [(10000, now + timedelta(days=3), False)])
    assert amc_reminders.send(now).reminders_sent == 1
    assert amc_reminders.send(now).reminders_sent == 1


def test_send_for_single_amc(amc_reminders, user, car, make_amc, now):
    amc = make_amc(user, car, [(10000, now + timedelta(days=3), False), (10000, now + timedelta(days=20), False)])
    assert amc_reminders.send_for_amc(amc.id, now).reminders_sent == 2
    with pytest.raises(NotFoundError):
        amc_reminders.send_for_amc("missing", now)


def test_preview_does_not_write(db, amc_reminders, user, car, make_amc, now):
    make_amc(user, car, [(10000, now + timedelta(days=3), False)])
    amc_reminders.preview(now)
    assert db.query(Notification).count() == 0


# -----------------------------------------------------------------------------
# KYC reminders
# -----------------------------------------------------------------------------

@pytest.fixture
def kyc_reminders(db, dispatcher):
    return KYCReminderService(db, dispatcher=dispatcher)


def test_kyc_reminders_target_pending_active_users(kyc_reminders, make_user, now, email_outbox):
    pending = make_user(kyc_status=KYCStatus.PENDING, created_at=now - timedelta(days=3))
    make_user(kyc_status=KYCStatus.APPROVED, created_at=now - timedelta(days=3))
    make_user(kyc_status=KYCStatus.PENDING, status=UserStatus.SUSPENDED, created_at=now - timedelta(days=3))

    [preview] = kyc_reminders.preview(now)
    assert preview.user.id == pending.id
    assert preview.days_since_registration == 3

    report = kyc_reminders.send(now)
    assert report.reminders_sent == 1
    assert report.total_checked == 1
    assert report.error_count == 0
    assert email_outbox.recipients() == [pending.email]


def test_kyc_reminder_skips_fresh_registrations(kyc_reminders, make_user, now):
    make_user(kyc_status=KYCStatus.PENDING, created_at=now)
    report = kyc_reminders.send(now)
    assert report.reminders_sent == 0
    assert report.total_checked == 1


def test_kyc_email_opt_out_is_not_a_failure(kyc_reminders, make_user, now, email_outbox):
    user = make_user(
        kyc_status=KYCStatus.PENDING,
        created_at=now - timedelta(days=2),
        email_preferences={"enabled": True, "kyc": False},
    )
    result = kyc_reminders.send_for_user(user.id, now)
    assert result.success
    assert result.email_skipped
    assert not result.email_sent
    assert email_outbox.sent == []


def test_kyc_email_failure_counts_as_error(kyc_reminders, make_user, now, email_outbox):
    make_user(kyc_status=KYCStatus.PENDING, created_at=now - timedelta(days=2))
    email_outbox.fail = True
    report = kyc_reminders.send(now)
    assert report.reminders_sent == 1
    assert report.error_count == 1


def test_kyc_single_user_validation(kyc_reminders, make_user, now):
    approved = make_user(kyc_status=KYCStatus.APPROVED)
    with pytest.raises(ValidationError):
        kyc_reminders.send_for_user(approved.id, now)
    with pytest.raises(NotFoundError):
        kyc_reminders.send_for_user("missing", now)


# -----------------------------------------------------------------------------
# Suspension expiry
# -----------------------------------------------------------------------------

def test_expired_suspensions_are_lifted(db, dispatcher, make_user, now):
    expired = make_user(
        status=UserStatus.SUSPENDED,
        suspension_end_date=now - timedelta(hours=1),
        suspension_reason="Late payment",
    )
    ongoing = make_user(status=UserStatus.SUSPENDED, suspension_end_date=now + timedelta(days=2))

    result = UserStatusService(db, dispatcher=dispatcher).release_expired_suspensions(now)

    assert result == {"reactivated_count": 1, "total_checked": 1}
    assert db.get(User, expired.id).status == UserStatus.ACTIVE
    assert db.get(User, expired.id).suspension_reason is None
    assert db.get(User, ongoing.id).status == UserStatus.SUSPENDED
    assert db.query(Notification).filter_by(type=NotificationType.USER_SUSPENSION_EXPIRED).count() == 1
