"""
HTTP layer.

Routers in ``endpoints`` are aggregated by ``router.py`` and mounted at
the application root, matching the paths the front-end app calls.
"""
