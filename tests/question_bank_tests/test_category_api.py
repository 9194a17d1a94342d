import pytest
from rest_framework import status

from apps.question_bank.constants import (
    MSG_CANNOT_DELETE_ONLY_CHILD,
    MSG_CANNOT_DELETE_TOP,
    MSG_NO_PERMISSIONS,
)
from apps.question_bank.models import Question, QuestionCategory
from apps.question_bank.services import add_quiz_question
from .conftest import _get_error_detail

URL = "/api/v1/question-categories/"


@pytest.mark.django_db
def test_delete_top_category_returns_400(api_client_editor, course_top):
    response = api_client_editor.delete(f"{URL}{course_top.id}/")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["status"] == "error"
    assert response.data["message_key"] == MSG_CANNOT_DELETE_TOP
    assert "top category" in _get_error_detail(response)
    assert QuestionCategory.objects.filter(pk=course_top.pk).exists()


@pytest.mark.django_db
def test_delete_only_child_with_children_returns_400(api_client_admin, course_context, make_category):
    only = make_category(course_context, "Only")
    make_category(course_context, "Nested", parent=only)

    response = api_client_admin.delete(f"{URL}{only.id}/")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["message_key"] == MSG_CANNOT_DELETE_ONLY_CHILD


@pytest.mark.django_db
def test_delete_without_capability_returns_403(api_client_teacher, course_context, make_category):
    category = make_category(course_context, "Ordinary")

    response = api_client_teacher.delete(f"{URL}{category.id}/")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.data["message_key"] == MSG_NO_PERMISSIONS
    assert QuestionCategory.objects.filter(pk=category.pk).exists()


@pytest.mark.django_db
def test_delete_invisible_category_returns_404(api_client_plain, course_context, make_category):
    category = make_category(course_context, "Hidden from plain users")
    response = api_client_plain.delete(f"{URL}{category.id}/")
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
def test_delete_ordinary_category(api_client_editor, course_context, make_category, make_question):
    category = make_category(course_context, "Ordinary")
    make_question(category)

    response = api_client_editor.delete(f"{URL}{category.id}/")

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert not QuestionCategory.objects.filter(pk=category.pk).exists()
    assert not Question.objects.exists()


@pytest.mark.django_db
def test_delete_with_questions_in_use_needs_move_to(api_client_editor, course_context, make_category, make_question, quiz):
    category = make_category(course_context, "Busy")
    target = make_category(course_context, "Target")
    used = make_question(category)
    add_quiz_question(used, quiz)

    blocked = api_client_editor.delete(f"{URL}{category.id}/")
    assert blocked.status_code == status.HTTP_400_BAD_REQUEST
    assert blocked.data["message_key"] == "categorynotempty"

    moved = api_client_editor.delete(f"{URL}{category.id}/?move_to={target.id}")
    assert moved.status_code == status.HTTP_204_NO_CONTENT
    used.refresh_from_db()
    assert used.category_id == target.pk


@pytest.mark.django_db
def test_delete_with_invalid_move_to(api_client_editor, course_context, make_category):
    category = make_category(course_context, "Ordinary")
    response = api_client_editor.delete(f"{URL}{category.id}/?move_to=nope")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "move_to" in response.data["errors"]


@pytest.mark.django_db
def test_delete_move_to_itself_returns_400(api_client_editor, course_context, make_category, make_question):
    category = make_category(course_context, "Ordinary")
    make_category(course_context, "Sibling")
    make_question(category)

    response = api_client_editor.delete(f"{URL}{category.id}/?move_to={category.id}")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["message_key"] == "invalidmovetarget"
    assert QuestionCategory.objects.filter(pk=category.pk).exists()
    assert category.questions.count() == 1


@pytest.mark.django_db
def test_delete_move_to_subcategory_returns_400(api_client_editor, course_context, make_category):
    category = make_category(course_context, "Parent")
    make_category(course_context, "Sibling")
    child = make_category(course_context, "Child", parent=category)

    response = api_client_editor.delete(f"{URL}{category.id}/?move_to={child.id}")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["message_key"] == "invalidmovetarget"
    assert QuestionCategory.objects.filter(pk=child.pk, parent=category).exists()


@pytest.mark.django_db
def test_create_category_defaults_to_top(api_client_editor, course_context, course_top):
    response = api_client_editor.post(URL, {"context": course_context.id, "name": "Mechanics"}, format="json")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.data["parent"] == course_top.pk
    assert response.data["is_top"] is False


@pytest.mark.django_db
def test_create_category_requires_manage_capability(api_client_teacher, course_context):
    response = api_client_teacher.post(URL, {"context": course_context.id, "name": "Nope"}, format="json")
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
def test_create_category_rejects_parent_in_other_context(api_client_admin, course_context, other_course_context, make_category):
    foreign = make_category(other_course_context, "Foreign")
    response = api_client_admin.post(
        URL, {"context": course_context.id, "name": "Mismatch", "parent": foreign.id}, format="json"
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "parent" in response.data["errors"]


@pytest.mark.django_db
def test_duplicate_id_number_rejected(api_client_editor, course_context, make_category):
    first = make_category(course_context, "First")
    first.id_number = "PHY-1"
    first.save()

    response = api_client_editor.post(
        URL, {"context": course_context.id, "name": "Second", "id_number": "PHY-1"}, format="json"
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "id_number" in response.data["errors"]


@pytest.mark.django_db
def test_blank_id_numbers_do_not_collide(api_client_editor, course_context, make_category):
    first = make_category(course_context, "First")
    second = make_category(course_context, "Second")

    responses = [
        api_client_editor.patch(f"{URL}{category.id}/", {"id_number": ""}, format="json")
        for category in (first, second)
    ]

    assert [r.status_code for r in responses] == [status.HTTP_200_OK, status.HTTP_200_OK]
    assert [r.data["id_number"] for r in responses] == [None, None]
    assert QuestionCategory.objects.filter(context=course_context, id_number__isnull=True).count() == 3


@pytest.mark.django_db
def test_cannot_move_category_into_own_subtree(api_client_editor, course_context, make_category):
    parent = make_category(course_context, "Parent")
    child = make_category(course_context, "Child", parent=parent)

    response = api_client_editor.patch(f"{URL}{parent.id}/", {"parent": child.id}, format="json")

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "parent" in response.data["errors"]


@pytest.mark.django_db
def test_list_is_limited_to_visible_contexts(api_client_editor, course_context, other_course_context, make_category):
    make_category(course_context, "Mine")
    make_category(other_course_context, "Theirs")

    response = api_client_editor.get(URL, {"page_size": "all"})

    assert response.status_code == status.HTTP_200_OK
    names = {row["name"] for row in response.data}
    assert "Mine" in names
    assert "Theirs" not in names


@pytest.mark.django_db
def test_options_endpoint_groups_edit_contexts(api_client_editor, course_context, module_context, make_category):
    make_category(course_context, "B course")
    make_category(course_context, "A course")
    make_category(module_context, "Module only")

    response = api_client_editor.get(f"{URL}options/", {"context": module_context.id, "include_top": "true"})

    assert response.status_code == status.HTTP_200_OK
    assert [group["context_id"] for group in response.data] == [module_context.id, course_context.id]

    course_group = response.data[1]
    assert course_group["context"] == "Course: Physics 101"
    labels = [option["label"] for option in course_group["options"]]
    assert labels[0] == "Top for Course: Physics 101"
    assert labels[1].strip() == "A course"
    assert labels[2].strip() == "B course"
    assert "question_count" not in course_group["options"][0]


@pytest.mark.django_db
def test_options_endpoint_with_counts(api_client_editor, course_context, make_category, make_question):
    category = make_category(course_context, "Counted")
    make_question(category)

    response = api_client_editor.get(f"{URL}options/", {"context": course_context.id, "with_counts": "1"})

    [group] = response.data
    [option] = group["options"]
    assert option["question_count"] == 1
    assert option["key"] == f"{category.id},{course_context.id}"


@pytest.mark.django_db
def test_options_endpoint_requires_context(api_client_editor):
    response = api_client_editor.get(f"{URL}options/")
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
def test_options_endpoint_unknown_context(api_client_editor):
    response = api_client_editor.get(f"{URL}options/", {"context": 999999})
    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
def test_prune_stale_endpoint(api_client_editor, course_context, make_category, make_question, quiz):
    category = make_category(course_context, "Prunable")
    make_question(category, hidden=True)
    used = make_question(category)
    add_quiz_question(used, quiz)

    response = api_client_editor.post(f"{URL}{category.id}/prune-stale/", {}, format="json")

    assert response.status_code == status.HTTP_200_OK
    assert response.data == {"removed": 1}
    assert list(category.questions.values_list("id", flat=True)) == [used.pk]


@pytest.mark.django_db
def test_prune_stale_in_background(api_client_editor, course_context, make_category, make_question):
    category = make_category(course_context, "Queued")
    make_question(category)

    response = api_client_editor.post(f"{URL}{category.id}/prune-stale/", {"background": True}, format="json")

    assert response.status_code == status.HTTP_202_ACCEPTED
    assert response.data["task_id"]
    assert category.questions.count() == 0


@pytest.mark.django_db
def test_prune_stale_requires_manage_capability(api_client_teacher, course_context, make_category, make_question):
    category = make_category(course_context, "Protected")
    make_question(category)

    response = api_client_teacher.post(f"{URL}{category.id}/prune-stale/", {}, format="json")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert category.questions.count() == 1
