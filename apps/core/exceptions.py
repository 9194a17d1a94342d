import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.question_bank.exceptions import QuestionBankError

logger = logging.getLogger(__name__)


def _question_bank_error_response(exc):
    return Response({
        "status": "error",
        "code": exc.status_code,
        "message": exc.message,
        "message_key": exc.message_key,
        "errors": {"detail": exc.message},
    }, status=exc.status_code)


def custom_exception_handler(exc, context):
    if isinstance(exc, QuestionBankError):
        logger.info("Question bank policy refused request: %s (%s)", exc.message_key, exc.message)
        return _question_bank_error_response(exc)

    if isinstance(exc, DjangoValidationError):
        exc = DRFValidationError(detail=exc.message_dict if hasattr(exc, 'message_dict') else exc.messages)

    response = exception_handler(exc, context)

    if response is not None:
        return Response({
            "status": "error",
            "code": response.status_code,
            "message": "Validation Error" if response.status_code == 400 else "Error",
            "errors": response.data
        }, status=response.status_code)

    logger.exception("Unhandled API error", exc_info=exc)
    error_message = "Internal server error"
    if settings.DEBUG:
        error_message = str(exc)

    return Response({
        "status": "error",
        "code": 500,
        "message": error_message,
    }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
