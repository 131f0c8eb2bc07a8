"""
Application package initializer.

``core`` holds configuration, logging, persistence, sessions and
security helpers; ``services`` the business logic; ``api`` the
versioned HTTP routes.
"""

from .main import app  # noqa: F401
