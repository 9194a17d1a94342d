import pytest

from apps.question_bank.constants import INDENT
from apps.question_bank.services import (
    category_options,
    category_select_menu,
    get_top_category,
)


@pytest.fixture
def two_contexts_with_categories(course_context, other_course_context, make_category):
    """Three ordinary categories in each of two contexts."""
    for context in (course_context, other_course_context):
        parent = make_category(context, f"{context.name} A")
        make_category(context, f"{context.name} B", parent=parent)
        make_category(context, f"{context.name} C")
    return [course_context, other_course_context]


@pytest.mark.django_db
def test_three_options_per_context_without_top(two_contexts_with_categories):
    grouped = category_options(two_contexts_with_categories)
    assert list(grouped) == two_contexts_with_categories
    for options in grouped.values():
        assert len(options) == 3


@pytest.mark.django_db
def test_four_options_per_context_with_top(two_contexts_with_categories):
    grouped = category_options(two_contexts_with_categories, include_top=True)
    for context, options in grouped.items():
        assert len(options) == 4
        assert options[0].label == f"Top for {context.display_name}"
        assert options[0].category_id == get_top_category(context).pk


@pytest.mark.django_db
def test_options_are_indented_by_depth(course_context, two_contexts_with_categories):
    options = category_options([course_context])[course_context]
    assert [option.label for option in options] == [
        "Physics 101 A",
        INDENT + "Physics 101 B",
        "Physics 101 C",
    ]
    assert options[0].key == f"{options[0].category_id},{course_context.pk}"


@pytest.mark.django_db
def test_counts_ignore_hidden_questions(course_context, make_category, make_question):
    category = make_category(course_context, "Counted")
    make_question(category, "Visible")
    make_question(category, "Hidden", hidden=True)

    [option] = category_options([course_context], with_counts=True)[course_context]
    assert option.question_count == 1
    assert "question_count" in option.as_dict()


@pytest.mark.django_db
def test_exclude_subtree_of(course_context, make_category):
    parent = make_category(course_context, "Parent")
    make_category(course_context, "Child", parent=parent)
    make_category(course_context, "Other")

    options = category_options([course_context], exclude_subtree_of=parent.pk)[course_context]
    assert [option.label for option in options] == ["Other", "Parent"]


@pytest.mark.django_db
def test_select_menu_renders_label_groups_and_names(two_contexts_with_categories):
    html = category_select_menu(two_contexts_with_categories)

    assert "Question category" in html
    assert "<select" in html
    assert "Physics 101 A" in html
    assert "Chemistry C" in html
    assert 'optgroup label="Course: Physics 101"' in html


@pytest.mark.django_db
def test_select_menu_marks_selected_option(course_context, make_category):
    category = make_category(course_context, "Picked")
    key = f"{category.pk},{course_context.pk}"

    html = category_select_menu([course_context], selected=key)

    assert f'value="{key}" selected' in html


@pytest.mark.django_db
def test_select_menu_shows_counts(course_context, make_category, make_question):
    category = make_category(course_context, "Counted")
    make_question(category)
    make_question(category)

    html = category_select_menu([course_context], with_counts=True)
    assert "Counted (2)" in html
