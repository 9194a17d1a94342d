# apps/question_bank/exceptions.py
"""
Policy errors raised by the question bank services. They are definitive
decisions, never retried; the DRF exception handler in apps.core.exceptions
turns them into the standard error envelope.
"""
from rest_framework import status

from .constants import (
    MESSAGES,
    MSG_CANNOT_DELETE_ONLY_CHILD,
    MSG_CANNOT_DELETE_TOP,
    MSG_CONTEXT_MISMATCH,
    MSG_INVALID_MOVE_TARGET,
    MSG_NO_PERMISSIONS,
)


class QuestionBankError(Exception):
    message_key = None
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message=None, **params):
        self.params = params
        if message is None:
            message = MESSAGES.get(self.message_key, "Error").format(**params)
        self.message = message
        super().__init__(message)


class TopCategoryProtected(QuestionBankError):
    message_key = MSG_CANNOT_DELETE_TOP


class OnlyChildProtected(QuestionBankError):
    message_key = MSG_CANNOT_DELETE_ONLY_CHILD


class CapabilityDenied(QuestionBankError):
    """The acting user lacks a required capability in the context."""
    message_key = MSG_NO_PERMISSIONS
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, capability, context=None):
        self.capability = capability
        self.context = context
        super().__init__(capability=capability)


class CategoryNotEmpty(QuestionBankError):
    """Deleting a category that still holds questions needs a target category."""
    message_key = "categorynotempty"

    def __init__(self, remaining):
        self.remaining = remaining
        super().__init__(
            f"This category still contains {remaining} question(s) in use. "
            "Choose a category to move them to."
        )


class InvalidMoveTarget(QuestionBankError):
    """Questions of a deleted category must go to a category outside its subtree."""
    message_key = MSG_INVALID_MOVE_TARGET


class CategoryContextMismatch(QuestionBankError):
    """A parent category must belong to the same context as its child."""
    message_key = MSG_CONTEXT_MISMATCH
