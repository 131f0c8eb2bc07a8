"""
Error taxonomy shared by the service layer.

Services raise these exceptions instead of ``HTTPException`` so that
they stay independent of FastAPI.  Each error carries the HTTP status
it maps to and a message that is safe to show to the client; the
handlers registered in ``main`` turn them into ``{"error": message}``
responses.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str = "") -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Malformed input; the message names the violated constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthError(ServiceError):
    """Bad credentials or missing session.  Deliberately non‑specific."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class UpstreamError(ServiceError):
    """A third‑party API call failed.

    ``message`` stays generic; the upstream detail goes into ``detail``
    and is only logged.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service error"

    def __init__(self, message: str = "", detail: str = "") -> None:
        super().__init__(message)
        self.detail = detail
