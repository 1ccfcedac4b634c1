"""Deliveries error types.

Validation, permission and not-found failures use DRF's own exception classes
(ValidationError, PermissionDenied, NotFound). The classes below cover the
cases DRF has no dedicated type for, so clients can tell "pick another job"
(409) apart from "fix your input" (400).
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class DeliveryConflict(APIException):
    """The record is no longer in a state that allows the requested change."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "This request has already been taken."
    default_code = "conflict"


class TransitionNotAllowed(APIException):
    """A status change that the lifecycle tables do not permit."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Status transition not allowed."
    default_code = "invalid_transition"


class StoreError(APIException):
    """Persistence failure; surfaced to the caller as a generic server error."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Server error"
    default_code = "store_error"
