"""
Custom exceptions and DRF exception handler for the PLUS+ Calculator.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class InvalidCurrencyError(APIException):
    """Raised when a currency code is not in the exchange rate table."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Unknown currency.'
    default_code = 'invalid_currency'

    def __init__(self, currency_code=None, detail=None):
        if detail is None and currency_code is not None:
            detail = f"Currency '{currency_code}' is not in the exchange rate table."
        super().__init__(detail=detail)
        self.currency_code = currency_code


class InvalidTermError(APIException):
    """Raised when a repayment term is not a positive number of months."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid repayment term.'
    default_code = 'invalid_term'

    def __init__(self, term=None, detail=None):
        if detail is None and term is not None:
            detail = f"Repayment term must be a positive number of months, got {term!r}."
        super().__init__(detail=detail)
        self.term = term


class AmountTooLargeError(APIException):
    """Raised when an amount exceeds the largest supported value."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Amount is too large.'
    default_code = 'amount_too_large'


class RateTableError(Exception):
    """Raised when rate table data is malformed."""

    pass


class UnknownStrategyError(Exception):
    """Raised when a pricing strategy name is not registered."""

    pass


def custom_exception_handler(exc, context):
    """
    Custom DRF exception handler that returns consistent error responses.

    Handles all DRF exceptions and adds logging for server errors.
    """
    response = exception_handler(exc, context)

    if response is not None:
        error_data = {
            'error': True,
            'status_code': response.status_code,
            'detail': response.data,
        }
        response.data = error_data
    else:
        # Unhandled exceptions: log and return 500
        logger.exception(
            "Unhandled exception in %s",
            context.get('view', 'unknown'),
            exc_info=exc,
        )
        response = Response(
            {
                'error': True,
                'status_code': 500,
                'detail': 'An unexpected error occurred. Please try again later.',
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
