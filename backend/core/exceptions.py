"""
Custom exceptions and DRF exception handler for the IPTV subscription platform.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler for DRF.
    Standardizes all API error responses into a consistent format.
    """
    # Model-level validators raise Django's ValidationError; surface them as 400s
    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(detail=_django_error_detail(exc))

    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(response.data, dict) and 'detail' in response.data:
            message = response.data['detail']
        elif isinstance(response.data, dict):
            message = first_error_message(response.data) or 'Invalid input.'
        else:
            message = first_error_message(response.data) or 'A server error occurred.'

        response.data = {
            'error': True,
            'code': response.status_code,
            'message': message,
            'details': response.data,
        }
    else:
        logger.exception('Unhandled exception in %s', context.get('view').__class__.__name__)
        response = Response({
            'error': True,
            'code': status.HTTP_500_INTERNAL_SERVER_ERROR,
            'message': 'Internal server error',
            'details': None,
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return response


def _django_error_detail(exc):
    if hasattr(exc, 'message_dict'):
        return exc.message_dict
    return exc.messages


def first_error_message(data):
    """Dig the first human readable message out of a DRF error structure."""
    if isinstance(data, dict):
        for value in data.values():
            found = first_error_message(value)
            if found:
                return found
        return None
    if isinstance(data, (list, tuple)):
        for value in data:
            found = first_error_message(value)
            if found:
                return found
        return None
    return str(data) if data else None


class OrderStateConflict(APIException):
    """
    Raised when a status transition is attempted on an order that already
    left the pending state.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Order is no longer pending.'
    default_code = 'order_state_conflict'


class OrderNotVerified(APIException):
    """Raised when credentials are issued against an unverified order."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Credentials can only be issued for verified orders.'
    default_code = 'order_not_verified'


class CredentialSlotTaken(APIException):
    """Raised when an order's connection slot already holds a credential."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'A credential already exists for this connection.'
    default_code = 'credential_slot_taken'


class ExistingAccountError(APIException):
    """
    Raised by guest checkout when the email belongs to an account whose
    password does not match.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'An account with this email already exists. Please sign in.'
    default_code = 'existing_account'
