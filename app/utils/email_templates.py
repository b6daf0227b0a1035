"""
Jinja2 templates for transactional emails.

Each template renders to a ``(subject, html)`` pair.
"""

from datetime import datetime
from typing import Any, Dict, Tuple

from jinja2 import DictLoader, Environment, select_autoescape

from app.config.settings import settings
from app.utils.datetime_utils import ceil_days

_TEMPLATES = {
    "booking_confirmation_user.html": """\
<h2>Booking Confirmed</h2>
<p>Hi {{ user_name }},</p>
<p>Your booking for <strong>{{ car_name }}</strong>{% if car_brand %} ({{ car_brand }}){% endif %} is <strong>{{ booking_status }}</strong>.</p>
<table>
  <tr><td>Booking ID</td><td>{{ booking_id }}</td></tr>
  <tr><td>From</td><td>{{ booking_from | longdate }}</td></tr>
  <tr><td>To</td><td>{{ booking_to | longdate }}</td></tr>
  <tr><td>Duration</td><td>{{ duration }}</td></tr>
  {% if car_location %}<tr><td>Location</td><td>{{ car_location }}</td></tr>{% endif %}
  {% if comments %}<tr><td>Comments</td><td>{{ comments }}</td></tr>{% endif %}
</table>
<p><a href="{{ booking_link }}">View booking</a></p>
""",
    "superadmin_booking_notification.html": """\
<h3>New Booking Received</h3>
<p><strong>{{ user_name }}</strong> ({{ user_email }}, {{ user_phone or 'N/A' }}) booked
<strong>{{ car_name }}</strong>.</p>
<table>
  <tr><td>Booking ID</td><td>{{ booking_id }}</td></tr>
  <tr><td>From</td><td>{{ booking_from | longdate }}</td></tr>
  <tr><td>To</td><td>{{ booking_to | longdate }}</td></tr>
  <tr><td>Duration</td><td>{{ duration }}</td></tr>
  <tr><td>Status</td><td>{{ booking_status }}</td></tr>
  {% if comments %}<tr><td>Comments</td><td>{{ comments }}</td></tr>{% endif %}
</table>
<p><a href="{{ admin_link }}">Open bookings dashboard</a></p>
""",
    "kyc_reminder.html": """\
<h2>Complete Your KYC Verification</h2>
<p>Hi {{ user_name }},</p>
<p>Your account was created {{ days_since_registration }} day{{ 's' if days_since_registration != 1 else '' }} ago,
but your KYC verification is still pending. Complete it to book cars and purchase tokens.</p>
<p><a href="{{ kyc_link }}">Complete KYC</a></p>
""",
}

_SUBJECTS = {
    "booking_confirmation_user.html": "Booking Confirmed - Fraction",
    "superadmin_booking_notification.html": "New Booking Received - Admin Notification",
    "kyc_reminder.html": "Complete Your KYC Verification - Fraction",
}


def _longdate(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%A, %d %B %Y")
    return str(value or "")


_env = Environment(loader=DictLoader(_TEMPLATES), autoescape=select_autoescape(["html", "xml"]))
_env.filters["longdate"] = _longdate


def render(template_name: str, context: Dict[str, Any]) -> Tuple[str, str]:
    """Render a named template into ``(subject, html)``."""
    template = _env.get_template(template_name)
    return _SUBJECTS[template_name], template.render(**context)


def _duration(start: datetime, end: datetime) -> str:
    days = ceil_days(end - start)
    return "1 day" if days == 1 else f"{days} days"


def booking_confirmation(user, booking, car) -> Tuple[str, str]:
    return render("booking_confirmation_user.html", {
        "user_name": user.name,
        "car_name": car.name,
        "car_brand": car.brand,
        "car_location": car.location,
        "booking_id": booking.id,
        "booking_from": booking.booking_from,
        "booking_to": booking.booking_to,
        "duration": _duration(booking.booking_from, booking.booking_to),
        "booking_status": booking.status.value,
        "comments": booking.comments,
        "booking_link": f"{settings.FRONTEND_URL}/bookings/{booking.id}",
    })


def superadmin_booking_notice(user, booking, car) -> Tuple[str, str]:
    return render("superadmin_booking_notification.html", {
        "user_name": user.name,
        "user_email": user.email,
        "user_phone": user.phone,
        "car_name": car.name,
        "booking_id": booking.id,
        "booking_from": booking.booking_from,
        "booking_to": booking.booking_to,
        "duration": _duration(booking.booking_from, booking.booking_to),
        "booking_status": booking.status.value,
        "comments": booking.comments,
        "admin_link": f"{settings.FRONTEND_URL}/admin/bookings",
    })


def kyc_reminder(user, days_since_registration: int) -> Tuple[str, str]:
    return render("kyc_reminder.html", {
        "user_name": user.name,
        "days_since_registration": days_since_registration,
        "kyc_link": f"{settings.FRONTEND_URL}/kyc-verification",
    })
