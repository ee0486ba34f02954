"""
Top-level package for the Lesson Booking API.

All functionality lives in submodules under ``app``; the ASGI
application is ``lesson_booking_api.app.main:app``.
"""

__all__ = []
