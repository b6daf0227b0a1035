from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.db.session import get_db
from app.main import app
from app.models.base.enums import KYCStatus
from tests.conftest import day


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def as_user(user):
    return {"X-Actor-Id": user.id, "X-Actor-Role": "user"}


def as_admin(admin):
    return {"X-Actor-Id": admin.id, "X-Actor-Role": "admin"}


def booking_payload(car, start, end):
    return {"carId": car.id, "bookingFrom": start.isoformat(), "bookingTo": end.isoformat()}


def test_create_booking_envelope(client, car, user):
    response = client.post("/api/v1/bookings", json=booking_payload(car, day(1), day(3)), headers=as_user(user))

    assert response.status_code == 201
    payload = response.json()
    assert payload["status"] == "success"
    assert payload["body"]["user_id"] == user.id
    assert payload["body"]["status"] == "accepted"
    assert response.headers["X-Request-ID"]
    assert "X-Process-Time" in response.headers


def test_conflict_uses_failure_envelope(client, car, user):
    client.post("/api/v1/bookings", json=booking_payload(car, day(1), day(3)), headers=as_user(user))
    response = client.post("/api/v1/bookings", json=booking_payload(car, day(2), day(4)), headers=as_user(user))

    assert response.status_code == 409
    payload = response.json()
    assert payload["status"] == "failed"
    assert payload["body"] == {}
    assert payload["error"]["code"] == "BOOKING_CONFLICT"


def test_invalid_range_is_400(client, car, user):
    response = client.post("/api/v1/bookings", json=booking_payload(car, day(3), day(1)), headers=as_user(user))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"


def test_missing_actor_is_401(client, car):
    response = client.post("/api/v1/bookings", json=booking_payload(car, day(1), day(3)))
    assert response.status_code == 401


def test_malformed_body_is_422(client, user):
    response = client.post("/api/v1/bookings", json={"carId": "x"}, headers=as_user(user))
    assert response.status_code == 422
    assert response.json()["status"] == "failed"


def test_check_availability_endpoint(client, car, user):
    client.post("/api/v1/bookings", json=booking_payload(car, day(1), day(3)), headers=as_user(user))
    response = client.post(
        "/api/v1/bookings/check-availability",
        json={"carId": car.id, "startDate": day(3).isoformat(), "endDate": day(5).isoformat()},
    )
    body = response.json()["body"]
    assert body["available"] is False
    assert len(body["conflicting_bookings"]) == 1


def test_blocked_dates_are_admin_only(client, car, user, admin):
    payload = {"carId": car.id, "blockedFrom": day(1).isoformat(), "blockedTo": day(2).isoformat()}

    assert client.post("/api/v1/blocked-dates", json=payload, headers=as_user(user)).status_code == 403
    created = client.post("/api/v1/blocked-dates", json=payload, headers=as_admin(admin))
    assert created.status_code == 201

    listed = client.get(f"/api/v1/blocked-dates/car/{car.id}").json()["body"]
    assert [b["id"] for b in listed] == [created.json()["body"]["id"]]

    deleted = client.delete(f"/api/v1/blocked-dates/{listed[0]['id']}", headers=as_admin(admin))
    assert deleted.json()["body"]["is_active"] is False


def test_token_purchase_and_inventory(client, make_car, user, admin):
    car = make_car(waitlist_tokens_available=0, book_now_tokens_available=1)

    bought = client.post("/api/v1/tokens", json={"carId": car.id, "kind": "book_now_token"}, headers=as_user(user))
    assert bought.status_code == 201

    empty = client.post("/api/v1/tokens", json={"carId": car.id, "kind": "book_now_token"}, headers=as_user(user))
    assert empty.status_code == 409
    assert empty.json()["error"]["code"] == "RESOURCE_EXHAUSTED"

    reopen = client.put(f"/api/v1/cars/{car.id}/stop-bookings", json={"stopBookings": False}, headers=as_admin(admin))
    assert reopen.status_code == 409
    assert reopen.json()["error"]["code"] == "POLICY_VIOLATION"

    edited = client.put(
        f"/api/v1/cars/{car.id}/inventory",
        json={"totalNumberOfWaitListTokens": 5, "stopBookings": False},
        headers=as_admin(admin),
    )
    assert edited.json()["body"]["waitlist_tokens_available"] == 5
    assert edited.json()["body"]["stop_bookings"] is False


def test_amc_endpoints(client, user, admin, car, make_amc, now):
    amc = make_amc(user, car, [(10000, now - timedelta(days=30), False)])

    assert client.post("/api/v1/amc/penalties/sweep", headers=as_user(user)).status_code == 403

    overdue = client.get("/api/v1/amc/overdue", headers=as_admin(admin)).json()["body"]
    assert overdue[0]["amc_id"] == amc.id

    paid = client.put(
        f"/api/v1/amc/{amc.id}/installments/0/payment", json={"paid": True}, headers=as_admin(admin)
    )
    assert paid.status_code == 200
    assert paid.json()["body"]["paid"] is True

    own = client.get(f"/api/v1/amc/{amc.id}", headers=as_user(user))
    assert own.json()["body"]["installments"][0]["paid"] is True


def test_kyc_endpoints(client, make_user, admin, now):
    pending = make_user(kyc_status=KYCStatus.PENDING, created_at=now - timedelta(days=400))

    preview = client.get("/api/v1/kyc/reminders/preview", headers=as_admin(admin)).json()["body"]
    assert [p["user_id"] for p in preview] == [pending.id]

    single = client.post(f"/api/v1/kyc/reminders/users/{pending.id}", headers=as_admin(admin))
    assert single.json()["body"]["success"] is True

    sent = client.post("/api/v1/kyc/reminders/send", headers=as_admin(admin)).json()["body"]
    assert sent["reminders_sent"] == 1
