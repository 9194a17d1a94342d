# apps/question_bank/permissions.py

from rest_framework import permissions

from .capabilities import RoleCapabilityChecker
from .constants import (
    CAP_MANAGE_CATEGORY,
    CAP_QUESTION_ADD,
    CAP_QUESTION_EDIT_ALL,
    CAP_QUESTION_USE_ALL,
    CAP_QUIZ_MANAGE,
)
from .models import Question, QuestionCategory, QuestionContext, Quiz


class HasContextCapability(permissions.BasePermission):
    """
    Object-level capability check in the object's context.

    Rules:
    - Safe methods: any capability that lets the user see the bank
      (question:add, question:managecategory, question:editall or question:useall).
    - Write methods on categories: question:managecategory
    - Write methods on questions: question:editall
    - Write methods on quizzes: quiz:manage
    Category deletion is checked again by the deletion guard, which reports
    the top/only-child rules before the capability rule.
    """
    message = "You do not have permission to perform this action."
    checker_class = RoleCapabilityChecker

    read_capabilities = (CAP_QUESTION_ADD, CAP_MANAGE_CATEGORY, CAP_QUESTION_EDIT_ALL, CAP_QUESTION_USE_ALL)

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        checker = self.checker_class()
        context = self._get_context(obj)
        if context is None:
            return False

        if request.method in permissions.SAFE_METHODS:
            return any(checker.has_capability(request.user, cap, context) for cap in self.read_capabilities)

        # The deletion guard owns the destroy decision for categories.
        if isinstance(obj, QuestionCategory) and request.method == "DELETE":
            return True

        return checker.has_capability(request.user, self._write_capability(obj), context)

    @staticmethod
    def _get_context(obj):
        if isinstance(obj, QuestionContext):
            return obj
        if isinstance(obj, (QuestionCategory, Quiz)):
            return obj.context
        if isinstance(obj, Question):
            return obj.category.context
        return None

    @staticmethod
    def _write_capability(obj):
        if isinstance(obj, Question):
            return CAP_QUESTION_EDIT_ALL
        if isinstance(obj, Quiz):
            return CAP_QUIZ_MANAGE
        return CAP_MANAGE_CATEGORY
