"""Order-specific API errors.

Each carries its own HTTP status and error code so clients can tell a
duplicate submission or a forbidden transition apart from plain field
validation failures.
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class DuplicateOrder(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Duplicate order detected. The same order was placed less than two minutes ago."
    default_code = "duplicate_order"


class InvalidTransition(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "This status change is not allowed."
    default_code = "invalid_transition"


class OrderLocked(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This order can no longer be changed."
    default_code = "order_locked"


class TrackingCodeUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not allocate a tracking code. Please try again."
    default_code = "tracking_code_unavailable"
