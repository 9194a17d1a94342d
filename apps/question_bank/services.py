# apps/question_bank/services.py
"""
Question bank services: category lifecycle, the deletion guard, stale
question pruning, category option lists and quiz placement helpers.

The deletion guard takes the capability checker as a parameter; nothing in
here reads the acting user from global state.
"""
import logging
from typing import Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Count, Max, Q

from .capabilities import RoleCapabilityChecker, require_capability
from .constants import (
    CAP_MANAGE_CATEGORY,
    DEFAULT_CATEGORY_INFO,
    DEFAULT_CATEGORY_NAME,
    TOP_CATEGORY_NAME,
)
from .exceptions import (
    CategoryContextMismatch,
    CategoryNotEmpty,
    InvalidMoveTarget,
    OnlyChildProtected,
    TopCategoryProtected,
)
from .models import Question, QuestionCategory, QuestionContext, Quiz, QuizSlot
from .tree import CategoryOption, CategoryRecord, build_options

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Category lifecycle
# ---------------------------------------------------------------------------

def get_top_category(context: QuestionContext, create: bool = False) -> Optional[QuestionCategory]:
    """Return the context's top category, creating it when asked."""
    top = QuestionCategory.objects.filter(context=context, parent__isnull=True).first()
    if top is None and create:
        top, _ = QuestionCategory.objects.get_or_create(
            context=context,
            parent=None,
            defaults={"name": TOP_CATEGORY_NAME, "sort_order": 0},
        )
        logger.info("Created top category %s for context %s", top.pk, context.pk)
    return top


def get_default_category(context: QuestionContext) -> QuestionCategory:
    """
    The first ordinary category under the context's top. Created as
    "Default for <context>" when the context has none.
    """
    top = get_top_category(context, create=True)
    default = top.children.order_by("sort_order", "id").first()
    if default is None:
        default = QuestionCategory.objects.create(
            context=context,
            parent=top,
            name=DEFAULT_CATEGORY_NAME.format(context=context.name),
            info=DEFAULT_CATEGORY_INFO.format(context=context.name),
        )
        logger.info("Created default category %s for context %s", default.pk, context.pk)
    return default


def create_category(
    context: QuestionContext,
    name: str,
    parent: Optional[QuestionCategory] = None,
    info: str = "",
    id_number: Optional[str] = None,
) -> QuestionCategory:
    """Create a category; without a parent it goes directly under the top."""
    if parent is None:
        parent = get_top_category(context, create=True)
    elif parent.context_id != context.pk:
        raise CategoryContextMismatch()
    category = QuestionCategory.objects.create(
        context=context,
        parent=parent,
        name=name,
        info=info,
        id_number=id_number or None,
    )
    logger.info("Created question category %s (%s) in context %s", category.pk, name, context.pk)
    return category


def category_subtree_ids(category: QuestionCategory) -> set:
    """Ids of the category and all of its descendants."""
    children = {}
    for pk, parent_id in QuestionCategory.objects.filter(context_id=category.context_id).values_list("id", "parent_id"):
        children.setdefault(parent_id, []).append(pk)
    found = set()
    stack = [category.pk]
    while stack:
        pk = stack.pop()
        if pk in found:
            continue
        found.add(pk)
        stack.extend(children.get(pk, []))
    return found


# ---------------------------------------------------------------------------
# Deletion guard
# ---------------------------------------------------------------------------

def is_top_category(category: QuestionCategory) -> bool:
    return category.parent_id is None


def is_only_child_of_top_with_children(category: QuestionCategory) -> bool:
    """
    True when the top category of the context has exactly one child, this
    category, and the category has at least one child of its own.
    """
    parent = category.parent
    if parent is None or parent.parent_id is not None:
        return False
    siblings = QuestionCategory.objects.filter(context_id=category.context_id, parent_id=parent.pk).count()
    if siblings != 1:
        return False
    return QuestionCategory.objects.filter(parent_id=category.pk).exists()


def ensure_category_deletable(category_id, user, checker=None) -> None:
    """
    Raise unless deleting the category is allowed. Checks, in order:
    top category, only child of the top with children, management capability.
    Side-effect free.
    """
    category = QuestionCategory.objects.select_related("context", "parent").get(pk=category_id)

    if is_top_category(category):
        raise TopCategoryProtected()
    if is_only_child_of_top_with_children(category):
        raise OnlyChildProtected()
    require_capability(user, CAP_MANAGE_CATEGORY, category.context, checker=checker)


def delete_category(category_id, user, move_to=None, checker=None) -> None:
    """
    Delete a category after the guard passes. Questions are moved to move_to
    when given; otherwise stale ones are pruned and any question still in use
    blocks the delete, rolling the prune back. Child categories are
    reattached to the deleted category's parent.
    """
    checker = checker or RoleCapabilityChecker()
    ensure_category_deletable(category_id, user, checker=checker)
    category = QuestionCategory.objects.select_related("context", "parent").get(pk=category_id)

    target = None
    if move_to is not None:
        target = QuestionCategory.objects.select_related("context").get(pk=move_to)
        if target.pk in category_subtree_ids(category):
            raise InvalidMoveTarget()
        require_capability(user, CAP_MANAGE_CATEGORY, target.context, checker=checker)

    with transaction.atomic():
        if target is None:
            prune_stale_questions(category.pk)
        remaining = Question.objects.filter(category_id=category.pk)
        if target is not None:
            moved = remaining.update(category=target)
            if moved:
                logger.info("Moved %s question(s) from category %s to %s", moved, category.pk, target.pk)
        elif remaining.exists():
            raise CategoryNotEmpty(remaining.count())

        QuestionCategory.objects.filter(parent_id=category.pk).update(parent_id=category.parent_id)
        category.delete()
    logger.info("Deleted question category %s from context %s", category_id, category.context_id)


# ---------------------------------------------------------------------------
# Stale question pruning
# ---------------------------------------------------------------------------

def question_ids_in_use(question_ids: Iterable[int]) -> set:
    """Ids from question_ids referenced by at least one quiz slot."""
    question_ids = list(question_ids)
    if not question_ids:
        return set()
    return set(
        QuizSlot.objects.filter(question_id__in=question_ids).values_list("question_id", flat=True).distinct()
    )


def prune_stale_questions(category_id) -> int:
    """
    Remove every question of the category that no quiz slot references.
    Hidden and random questions follow the same rule. Returns the number
    removed; an unknown category id removes nothing.

    Each removal is atomic on its own; the run as a whole is not.
    """
    question_ids = list(Question.objects.filter(category_id=category_id).values_list("id", flat=True))
    if not question_ids:
        return 0

    in_use = question_ids_in_use(question_ids)
    removed = 0
    for question_id in question_ids:
        if question_id in in_use:
            continue
        with transaction.atomic():
            question = Question.objects.select_for_update().filter(pk=question_id).first()
            if question is None or QuizSlot.objects.filter(question_id=question_id).exists():
                continue
            question.delete()
            removed += 1

    logger.info("Pruned %s stale question(s) from category %s", removed, category_id)
    return removed


# ---------------------------------------------------------------------------
# Category options
# ---------------------------------------------------------------------------

def get_categories_for_contexts(contexts: List[QuestionContext], with_counts: bool = False) -> Dict[int, List[CategoryRecord]]:
    """Category records per context id, top categories included."""
    queryset = QuestionCategory.objects.filter(context__in=contexts).order_by("context_id", "sort_order", "name", "id")
    if with_counts:
        queryset = queryset.annotate(
            visible_questions=Count("questions", filter=Q(questions__hidden=False))
        )
    records = {context.pk: [] for context in contexts}
    for category in queryset:
        records[category.context_id].append(
            CategoryRecord(
                id=category.pk,
                parent_id=category.parent_id,
                context_id=category.context_id,
                name=category.name,
                id_number=category.id_number,
                question_count=getattr(category, "visible_questions", 0),
            )
        )
    return records


def category_options(
    contexts: List[QuestionContext],
    include_top: bool = False,
    with_counts: bool = False,
    exclude_subtree_of: Optional[int] = None,
) -> Dict[QuestionContext, List[CategoryOption]]:
    """
    Indented category options for each context, in the given context order.
    Contexts are expected to be filtered for the user already (see
    QuestionEditContexts.having_cap).
    """
    contexts = list(contexts)
    records = get_categories_for_contexts(contexts, with_counts=with_counts)
    names = {context.pk: context.display_name for context in contexts}
    options = build_options(
        records,
        include_top=include_top,
        with_counts=with_counts,
        exclude_subtree_of=exclude_subtree_of,
        context_names=names,
    )
    return {context: options[context.pk] for context in contexts}


def category_select_menu(contexts, include_top=False, selected=None, exclude_subtree_of=None, with_counts=False):
    """Render the category <select> for the given contexts as HTML."""
    from .forms import QuestionCategorySelectForm

    grouped = category_options(
        contexts,
        include_top=include_top,
        with_counts=with_counts,
        exclude_subtree_of=exclude_subtree_of,
    )
    form = QuestionCategorySelectForm(grouped_options=grouped, initial={"category": selected})
    return str(form)


# ---------------------------------------------------------------------------
# Quiz placement
# ---------------------------------------------------------------------------

def _next_slot(quiz: Quiz) -> int:
    last = quiz.slots.aggregate(last=Max("slot"))["last"]
    return (last or 0) + 1


def add_quiz_question(question: Question, quiz: Quiz, max_mark=None) -> QuizSlot:
    """Place a question in the next free slot of the quiz."""
    with transaction.atomic():
        Quiz.objects.select_for_update().filter(pk=quiz.pk).first()
        slot = QuizSlot.objects.create(
            quiz=quiz,
            slot=_next_slot(quiz),
            question=question,
            max_mark=max_mark if max_mark is not None else 1,
        )
    logger.info("Added question %s to quiz %s (slot %s)", question.pk, quiz.pk, slot.slot)
    return slot


def _random_question_name(category, include_subcategories):
    if include_subcategories:
        return f"Random ({category.name} and subcategories)"
    return f"Random ({category.name})"


def add_random_questions(quiz: Quiz, category: QuestionCategory, number: int,
                         include_subcategories: bool = False, created_by_id=None) -> List[QuizSlot]:
    """
    Add number random-selector slots drawing from category. An unused random
    question of the category with the same subcategory flag is reused before
    a new one is created.
    """
    slots = []
    with transaction.atomic():
        for _ in range(number):
            question = (
                Question.objects.filter(
                    category=category,
                    qtype=Question.QuestionType.RANDOM,
                    include_subcategories=include_subcategories,
                )
                .exclude(slots__isnull=False)
                .order_by("id")
                .first()
            )
            if question is None:
                question = Question.objects.create(
                    category=category,
                    name=_random_question_name(category, include_subcategories),
                    question_text="1" if include_subcategories else "0",
                    qtype=Question.QuestionType.RANDOM,
                    include_subcategories=include_subcategories,
                    created_by_id=created_by_id,
                )
            slots.append(add_quiz_question(question, quiz))
    return slots
