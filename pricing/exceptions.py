"""
Domain errors for the request lifecycle and billing engine.

Each error is a DRF ``APIException`` so views can let it propagate and the
client receives the specific error kind together with a readable reason:

    {"error": "invalid_transition", "detail": "Request #4 is completed; ..."}
"""

from rest_framework import status
from rest_framework.exceptions import APIException


class BillingError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The operation could not be completed."
    default_code = "billing_error"


class InvalidTransition(BillingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This transition is not allowed from the current status."
    default_code = "invalid_transition"


class NotFound(BillingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "The referenced record does not exist."
    default_code = "not_found"


class InvalidWeight(BillingError):
    default_detail = "Weight must be a finite, non-negative number."
    default_code = "invalid_weight"


class UnknownCategory(BillingError):
    default_detail = "Unknown waste category."
    default_code = "unknown_category"


class InvalidPeriod(BillingError):
    default_detail = "Invoice period start must be before its end."
    default_code = "invalid_period"


class Unauthorized(BillingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Your role is not allowed to perform this action."
    default_code = "unauthorized"


def api_exception_handler(exc, context):
    """
    DRF exception handler that tags domain errors with their kind.
    Everything else keeps DRF's default response.
    """
    # Deferred: this module is imported while models load
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, BillingError):
        response.data = {
            "error": exc.default_code,
            "detail": response.data.get("detail", str(exc.detail)),
        }
    return response
