"""
Typed failures raised by the lead services and translated to HTTP responses in main.py.
"""
from typing import Optional

from fastapi import status


class LeadServiceError(Exception):
    """Base class for failures the HTTP layer reports to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(LeadServiceError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, status_code)
        self.field = field


class NotFoundError(LeadServiceError):
    """Referenced lead or campaign does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(LeadServiceError):
    """Missing credential, or the record belongs to another contractor."""

    status_code = status.HTTP_401_UNAUTHORIZED


class DuplicateError(LeadServiceError):
    """A submission fell inside its dedup window."""

    status_code = status.HTTP_409_CONFLICT


class UpstreamError(LeadServiceError):
    """Geocoding or notification provider failure."""

    status_code = status.HTTP_502_BAD_GATEWAY
