import smtplib

import pytest

from app.utils.email import EmailError, SMTPConfig, SMTPEmailSender, build_message


class FakeSMTP:
    sent = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.tls = False
        self.login_args = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, username, password):
        self.login_args = (username, password)

    def send_message(self, message):
        FakeSMTP.sent.append((self, message))


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    return FakeSMTP


def config(**overrides):
    values = dict(host="smtp.test", port=2525, username="mailer", password="secret", sender="noreply@fraction.test")
    values.update(overrides)
    return SMTPConfig(**values)


def test_build_message_rejects_bad_recipient():
    with pytest.raises(EmailError):
        build_message("noreply@fraction.test", "not-an-address", "Hello", "<p>Hi</p>")


def test_build_message_rejects_blank_subject():
    with pytest.raises(EmailError):
        build_message("noreply@fraction.test", "rider@fraction.test", "  ", "<p>Hi</p>")


def test_send_email_uses_tls_and_login(fake_smtp):
    result = SMTPEmailSender(config()).send_email("rider@fraction.test", "Booking Confirmed", "<p>ok</p>")

    assert result.success
    [(server, message)] = fake_smtp.sent
    assert (server.host, server.port) == ("smtp.test", 2525)
    assert server.tls
    assert server.login_args == ("mailer", "secret")
    assert message["From"] == "noreply@fraction.test"
    assert message["To"] == "rider@fraction.test"


def test_send_email_without_credentials_skips_login(fake_smtp):
    SMTPEmailSender(config(username="", password="", use_tls=False)).send_email(
        "rider@fraction.test", "Hi", "<p>ok</p>"
    )
    [(server, _)] = fake_smtp.sent
    assert server.login_args is None
    assert not server.tls


def test_from_address_falls_back_to_username():
    assert config(sender=None).from_address == "mailer"


def test_transport_failure_becomes_failed_result(monkeypatch):
    def refuse(host, port):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    result = SMTPEmailSender(config()).send_email("rider@fraction.test", "Hi", "<p>ok</p>")

    assert not result.success
    assert "connection refused" in result.error


def test_invalid_recipient_becomes_failed_result(fake_smtp):
    result = SMTPEmailSender(config()).send_email("", "Hi", "<p>ok</p>")
    assert not result.success
    assert fake_smtp.sent == []
