"""Error taxonomy shared by services and routers.

Every error carries the HTTP status it maps to; ``portal.main`` installs a
handler that renders them as ``{"error": message}``.
"""

from fastapi import status


class PortalError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class AuthorizationError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class PayloadTooLargeError(PortalError):
    status_code = 413
    default_message = "Upload too large"


class StorageWriteError(PortalError):
    default_message = "Upload failed"
