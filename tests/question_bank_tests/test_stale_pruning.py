import logging

import pytest

from apps.question_bank.models import Question, QuizSlot
from apps.question_bank.services import (
    add_quiz_question,
    add_random_questions,
    prune_stale_questions,
)
from apps.question_bank.tasks import prune_stale_questions_task

RANDOM = Question.QuestionType.RANDOM


@pytest.mark.django_db
def test_prune_removes_hidden_and_random_unused_questions(course_context, make_category, make_question):
    k1 = make_category(course_context, "K1")
    make_question(k1, "Q1a", hidden=True)
    make_question(k1, "Q1b", qtype=RANDOM)

    assert prune_stale_questions(k1.pk) == 2
    assert k1.questions.count() == 0


@pytest.mark.django_db
def test_prune_keeps_questions_referenced_by_quiz_slots(course_context, make_category, make_question, quiz):
    k2 = make_category(course_context, "K2")
    make_question(k2, "Q2a", hidden=True)
    q2b = make_question(k2, "Q2b", hidden=True)
    add_quiz_question(q2b, quiz)
    [random_slot] = add_random_questions(quiz, k2, 1)
    make_question(k2, "Q2c", qtype=RANDOM)

    assert k2.questions.count() == 4
    assert prune_stale_questions(k2.pk) == 2

    remaining = set(k2.questions.values_list("id", flat=True))
    assert remaining == {q2b.pk, random_slot.question_id}


@pytest.mark.django_db
def test_prune_keeps_visible_used_question(course_context, make_category, make_question, quiz):
    category = make_category(course_context, "Used")
    used = make_question(category, "Used", hidden=False)
    add_quiz_question(used, quiz)

    assert prune_stale_questions(category.pk) == 0
    assert Question.objects.filter(pk=used.pk).exists()


@pytest.mark.django_db
def test_prune_unknown_category_is_a_noop(course_context, make_category, make_question):
    category = make_category(course_context, "Untouched")
    make_question(category)

    assert prune_stale_questions(987654) == 0
    assert Question.objects.count() == 1


@pytest.mark.django_db
def test_prune_is_idempotent(course_context, make_category, make_question):
    category = make_category(course_context, "Twice")
    make_question(category, "One")
    make_question(category, "Two", hidden=True)

    assert prune_stale_questions(category.pk) == 2
    assert prune_stale_questions(category.pk) == 0


@pytest.mark.django_db
def test_prune_only_touches_the_given_category(course_context, make_category, make_question):
    target = make_category(course_context, "Target")
    child = make_category(course_context, "Child", parent=target)
    make_question(target)
    kept = make_question(child)

    assert prune_stale_questions(target.pk) == 1
    assert Question.objects.filter(pk=kept.pk).exists()


@pytest.mark.django_db
def test_prune_logs_removed_count(course_context, make_category, make_question, caplog):
    category = make_category(course_context, "Logged")
    make_question(category)

    with caplog.at_level(logging.INFO, logger="apps.question_bank.services"):
        prune_stale_questions(category.pk)

    assert "Pruned 1 stale question(s)" in caplog.text


@pytest.mark.django_db
def test_prune_task_runs_service(course_context, make_category, make_question, quiz):
    category = make_category(course_context, "Task")
    make_question(category)
    used = make_question(category)
    add_quiz_question(used, quiz)

    result = prune_stale_questions_task.delay(category.pk)

    assert result.get() == 1
    assert QuizSlot.objects.filter(question=used).exists()
