"""
Application package initializer.

The service is split into ``core`` (configuration, logging, errors and
the document store gateway), ``schemas`` (pydantic models), ``services``
(repositories and the fulfillment engine) and ``api`` (FastAPI
routers).
"""

from .main import app  # noqa: F401
