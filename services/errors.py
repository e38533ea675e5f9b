# Service-layer error taxonomy
# Each error carries the HTTP status the API layer responds with

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """Base class for business-rule failures raised by the services."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(status_code=type(self).status_code, detail=detail)


class ValidationError(ServiceError):
    """Malformed input the schemas could not catch."""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidState(ServiceError):
    """Operation is illegal given the entity's current status."""
    status_code = status.HTTP_400_BAD_REQUEST


class CapacityExceeded(InvalidState):
    """Campaign has no spots left."""


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT
