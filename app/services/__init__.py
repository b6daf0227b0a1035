"""
Service layer root package.

Each subpackage implements use-cases on top of SQLAlchemy models
(``app.models``) and repositories (``app.repositories``):

- booking: availability, booking lifecycle, blocked dates
- inventory: token pools and the stop-bookings flag
- amc: penalties, payments and reminders
- users: KYC reminders and suspension expiry
- background: the job scheduling driver
"""
