"""
Fixtures for the question bank app.

Context layout used by most tests:

    System
      └─ Course: Physics 101        (editing teacher assigned here)
          └─ Quiz: Week 1 quiz
"""

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.question_bank.models import (
    Question,
    QuestionContext,
    Quiz,
    RoleAssignment,
)
from apps.question_bank.services import create_category, get_top_category

User = get_user_model()


class FakeChecker:
    """Capability checker granting a fixed set of capabilities everywhere."""

    def __init__(self, *capabilities):
        self.capabilities = set(capabilities)
        self.calls = []

    def has_capability(self, user, capability, context):
        self.calls.append((capability, context.pk))
        return capability in self.capabilities


def _get_error_detail(response):
    """Error message from the standard error envelope."""
    data = getattr(response, "data", None)
    if isinstance(data, dict):
        if "message_key" in data:
            return data["message"]
        errors = data.get("errors", data)
        if isinstance(errors, dict):
            for value in errors.values():
                if isinstance(value, list) and value:
                    return str(value[0])
                return str(value)
    return str(data)


@pytest.fixture
def api_client():
    client = APIClient()
    client.raise_request_exception = True
    return client


@pytest.fixture
def system_context(db):
    return QuestionContext.objects.create(level=QuestionContext.Level.SYSTEM, name="System")


@pytest.fixture
def course_context(system_context):
    return QuestionContext.objects.create(
        level=QuestionContext.Level.COURSE, name="Physics 101", parent=system_context
    )


@pytest.fixture
def module_context(course_context):
    return QuestionContext.objects.create(
        level=QuestionContext.Level.MODULE, name="Week 1 quiz", parent=course_context
    )


@pytest.fixture
def other_course_context(system_context):
    return QuestionContext.objects.create(
        level=QuestionContext.Level.COURSE, name="Chemistry", parent=system_context
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_superuser(
        username="admin", email="admin@example.test", password="Pass12345!"
    )


@pytest.fixture
def editing_teacher(db, course_context):
    user = User.objects.create_user(
        username="editor", email="editor@example.test", password="Pass12345!"
    )
    RoleAssignment.objects.create(
        user=user, context=course_context, role=RoleAssignment.Role.EDITING_TEACHER
    )
    return user


@pytest.fixture
def teacher_user(db, course_context):
    """Non-editing teacher: may use questions but not manage categories."""
    user = User.objects.create_user(
        username="teacher", email="teacher@example.test", password="Pass12345!"
    )
    RoleAssignment.objects.create(
        user=user, context=course_context, role=RoleAssignment.Role.TEACHER
    )
    return user


@pytest.fixture
def plain_user(db):
    return User.objects.create_user(
        username="nobody", email="nobody@example.test", password="Pass12345!"
    )


@pytest.fixture
def course_top(course_context):
    return get_top_category(course_context)


@pytest.fixture
def make_category():
    def _make(context, name, parent=None):
        return create_category(context, name, parent=parent)
    return _make


@pytest.fixture
def make_question():
    def _make(category, name="Question", qtype=Question.QuestionType.SHORT_ANSWER, hidden=False):
        return Question.objects.create(
            category=category,
            name=name,
            question_text=f"{name} text",
            qtype=qtype,
            hidden=hidden,
        )
    return _make


@pytest.fixture
def quiz(module_context):
    return Quiz.objects.create(context=module_context, name="Week 1 quiz")


@pytest.fixture
def api_client_admin(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def api_client_editor(api_client, editing_teacher):
    api_client.force_authenticate(user=editing_teacher)
    return api_client


@pytest.fixture
def api_client_teacher(api_client, teacher_user):
    api_client.force_authenticate(user=teacher_user)
    return api_client


@pytest.fixture
def api_client_plain(api_client, plain_user):
    api_client.force_authenticate(user=plain_user)
    return api_client
