"""
Endpoint modules.

Each module defines an ``APIRouter`` for one area of the API (lesson
listing and reconciliation, order submission, search).  They are
aggregated in ``api/router.py``.
"""
