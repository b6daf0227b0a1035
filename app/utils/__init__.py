"""
Utility package: date helpers, email sending and email templates.
"""

from app.utils.datetime_utils import ceil_days, days_since, days_until, to_naive_utc, utcnow

__all__ = ["ceil_days", "days_since", "days_until", "to_naive_utc", "utcnow"]
