"""
Pydantic schema definitions for API payloads.

Lessons and orders are stored as free-form documents; these models give
them a typed shape at the repository boundary and control how they are
serialised in responses (notably the ``_id`` field, which is exposed as
a hex string).
"""
