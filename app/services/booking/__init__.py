"""
Booking, availability and blocked-date services.

Submodules are imported directly; repositories depend on ``overlap`` so this
package does not import its services eagerly.
"""
