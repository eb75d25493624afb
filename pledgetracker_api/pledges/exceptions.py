import logging
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.exceptions import APIException, AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


class InvalidRole(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Account does not have the required role.'
    default_code = 'invalid_role'


class AlreadyAssigned(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Pledge is already assigned to this follow-up.'
    default_code = 'already_assigned'


def custom_exception_handler(exc, context):
    if isinstance(exc, (InvalidToken, TokenError, AuthenticationFailed)):
        return Response(
            {"detail": "Invalid token."},
            status=401
        )

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else "unknown view",
            exc_info=exc,
        )
        return Response(
            {"detail": "Internal server error."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return response
