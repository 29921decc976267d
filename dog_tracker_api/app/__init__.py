"""
Application package initializer.

The application is split into ``core`` (configuration, logging,
database), ``schemas`` (pydantic models), ``services`` (business logic
and stores) and ``api`` (versioned HTTP routers).  HTML templates for
the page views live in ``templates``.
"""

from .main import app  # noqa: F401
