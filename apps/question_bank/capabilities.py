# apps/question_bank/capabilities.py
"""
Capability checks per user per context.

Services never consult a global oracle: callers pass a checker object (any
object with has_capability(user, capability, context)). RoleCapabilityChecker
is the default and answers from RoleAssignment rows, with assignments made in
a parent context applying to its descendants. Superusers hold everything.
"""
import logging

from .constants import ROLE_CAPABILITIES
from .exceptions import CapabilityDenied
from .models import QuestionContext, RoleAssignment

logger = logging.getLogger(__name__)


class RoleCapabilityChecker:

    def has_capability(self, user, capability, context):
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        if not getattr(user, "is_active", True):
            return False
        if getattr(user, "is_superuser", False):
            return True

        context_ids = [context.pk] + [c.pk for c in context.get_ancestors()]
        roles = RoleAssignment.objects.filter(
            user_id=user.pk, context_id__in=context_ids
        ).values_list("role", flat=True)
        return any(capability in ROLE_CAPABILITIES.get(role, ()) for role in roles)

    def require_capability(self, user, capability, context):
        if not self.has_capability(user, capability, context):
            logger.warning(
                "Capability %s denied for user %s in context %s",
                capability,
                getattr(user, "pk", None),
                context.pk,
            )
            raise CapabilityDenied(capability, context)


def contexts_with_any_capability(user, capabilities):
    """
    Ids of the contexts in which the user holds at least one of capabilities,
    following inheritance down the context tree. None means every context.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return set()
    if getattr(user, "is_superuser", False):
        return None

    granted = {
        context_id
        for context_id, role in RoleAssignment.objects.filter(user_id=user.pk).values_list("context_id", "role")
        if any(cap in ROLE_CAPABILITIES.get(role, ()) for cap in capabilities)
    }
    if not granted:
        return set()

    children = {}
    for pk, parent_id in QuestionContext.objects.values_list("id", "parent_id"):
        children.setdefault(parent_id, []).append(pk)
    found = set()
    stack = list(granted)
    while stack:
        pk = stack.pop()
        if pk in found:
            continue
        found.add(pk)
        stack.extend(children.get(pk, []))
    return found


def require_capability(user, capability, context, checker=None):
    """Raise CapabilityDenied unless the user holds the capability in context."""
    checker = checker or RoleCapabilityChecker()
    if hasattr(checker, "require_capability"):
        checker.require_capability(user, capability, context)
    elif not checker.has_capability(user, capability, context):
        raise CapabilityDenied(capability, context)


class QuestionEditContexts:
    """
    The context a user is editing questions in, plus its parent contexts.
    Nearest context first.
    """

    def __init__(self, context, checker=None):
        self.context = context
        self.checker = checker or RoleCapabilityChecker()

    def all(self):
        return [self.context] + self.context.get_ancestors()

    def lowest(self):
        return self.context

    def having_cap(self, capability, user):
        """Contexts in which the user holds capability."""
        return [c for c in self.all() if self.checker.has_capability(user, capability, c)]

    def having_one_cap(self, capabilities, user):
        return [
            c for c in self.all()
            if any(self.checker.has_capability(user, cap, c) for cap in capabilities)
        ]

    @classmethod
    def for_context_id(cls, context_id, checker=None):
        context = QuestionContext.objects.select_related("parent").get(pk=context_id)
        return cls(context, checker=checker)
