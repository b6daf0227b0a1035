from app.models.base.enums import AdminRole, NotificationPriority, NotificationType, RecipientModel
from app.models.notification import Notification
from app.services.base.notification_dispatcher import NotificationDispatcher


class ExplodingSender:
    def send_email(self, to, subject, body):
        raise ConnectionError("smtp down")


def test_notify_user_records_notification(db, dispatcher, user):
    assert dispatcher.notify_user(
        user.id, NotificationType.AMC_REMINDER, "Reminder", "Pay soon", {"year": 1}, "amc-1"
    )
    [note] = db.query(Notification).all()
    assert note.recipient_model == RecipientModel.USER
    assert note.metadata_ == {"year": 1}
    assert note.priority == NotificationPriority.HIGH
    assert note.is_read is False


def test_notify_admins_fans_out_to_active_admins(db, dispatcher, make_admin):
    make_admin()
    make_admin(role=AdminRole.SUPER_ADMIN)
    make_admin(is_active=False)

    assert dispatcher.notify_admins(NotificationType.USER_PAID_AMC, "Paid", "User paid")
    models = sorted(n.recipient_model.value for n in db.query(Notification).all())
    assert models == ["Admin", "SuperAdmin"]


def test_notify_admins_without_admins_is_not_a_failure(dispatcher):
    assert dispatcher.notify_admins(NotificationType.USER_PAID_AMC, "Paid", "User paid")


def test_store_failure_is_reported_not_raised(db, dispatcher, user, monkeypatch):
    def broken_create(entity):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(dispatcher.repository, "create", broken_create)
    assert dispatcher.notify_user(user.id, NotificationType.KYC_REMINDER, "KYC", "Please finish KYC") is False


def test_email_exceptions_become_failed_results(db, user):
    dispatcher = NotificationDispatcher(db, email_sender=ExplodingSender())
    result = dispatcher.send_user_email(user, "kyc", "Subject", "<p>Body</p>")
    assert result.success is False
    assert "smtp down" in result.error


def test_disabled_email_is_skipped(db, dispatcher, make_user, email_outbox):
    user = make_user(email_preferences={"enabled": False})
    result = dispatcher.send_user_email(user, "booking", "Subject", "Body")
    assert result.success and result.skipped
    assert email_outbox.sent == []


def test_missing_recipient_address(dispatcher):
    assert dispatcher.send_email(None, "Subject", "Body") is False


def test_base_services_package_exports_resolve():
    import app.services.base as base

    assert sorted(base.__all__) == [
        "BaseService",
        "NotificationDispatcher",
        "should_send_email",
        "track_performance",
    ]
    for name in base.__all__:
        assert getattr(base, name) is not None
