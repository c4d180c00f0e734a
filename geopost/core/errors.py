"""
Error taxonomy shared by every service.

Services raise these; the HTTP layer maps them to responses in one place
(see ``geopost.main``). Each class carries the status code it maps to.
"""

from fastapi import status


class GeoPostError(Exception):
    """Base class for caller-visible failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"detail": self.message}


class BadValuesError(GeoPostError):
    """Malformed input: empty names, self-requests and the like."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(GeoPostError):
    """A referenced request, friendship, group, membership or item is absent."""

    status_code = status.HTTP_404_NOT_FOUND


class NotAllowedError(GeoPostError):
    """The operation would break an invariant or the caller lacks permission."""

    status_code = status.HTTP_403_FORBIDDEN
