"""Mapping of domain errors to HTTP responses."""

import logging
from functools import wraps

from rest_framework import status
from rest_framework.response import Response

from scheduling.domain.errors import (
    CapacityExceededError,
    CommitOutcomeUnknownError,
    ConfigurationError,
    DomainError,
    EditRejectedError,
    InvalidScheduleIdError,
    NotFoundError,
    ScheduleBusyError,
    ValidationFailure,
    VersionConflictError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (InvalidScheduleIdError, status.HTTP_400_BAD_REQUEST),
    (ConfigurationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (VersionConflictError, status.HTTP_409_CONFLICT),
    (EditRejectedError, status.HTTP_409_CONFLICT),
    (CapacityExceededError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ValidationFailure, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ScheduleBusyError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (CommitOutcomeUnknownError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(error: DomainError) -> int:
    for error_class, code in STATUS_BY_ERROR:
        if isinstance(error, error_class):
            return code
    return status.HTTP_400_BAD_REQUEST


def error_response(error: DomainError) -> Response:
    code = status_for(error)
    logger.info("Request rejected with %s (%d)", error.code.value, code)
    return Response(error.to_dict(), status=code)


def maps_domain_errors(handler):
    """Turn domain errors raised by a view method into typed error responses."""

    @wraps(handler)
    def wrapper(*args, **kwargs):
        try:
            return handler(*args, **kwargs)
        except DomainError as error:
            return error_response(error)

    return wrapper
