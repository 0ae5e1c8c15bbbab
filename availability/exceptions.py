from rest_framework import status
from rest_framework.exceptions import APIException


class ServiceClosed(APIException):
    """Orders are not accepted right now (closed day, past cutoff or temporary closure)."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Service is not available right now."
    default_code = "service_closed"
