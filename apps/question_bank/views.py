# apps/question_bank/views.py
"""
Question bank API views. OpenAPI docs live in apps.question_bank.swagger;
policy decisions (deletion guard, pruning, capability checks) live in
apps.question_bank.services and apps.question_bank.capabilities. Domain
errors are turned into responses by apps.core.exceptions.
"""
import logging

from django.db.models import Count
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .capabilities import (
    QuestionEditContexts,
    RoleCapabilityChecker,
    contexts_with_any_capability,
    require_capability,
)
from .constants import (
    CAP_MANAGE_CATEGORY,
    CAP_QUESTION_ADD,
    CAP_QUESTION_EDIT_ALL,
    CAP_QUESTION_USE_ALL,
    CAP_QUIZ_MANAGE,
)
from .models import Question, QuestionCategory, QuestionContext, Quiz
from .permissions import HasContextCapability
from .serializers import (
    AddQuizQuestionSerializer,
    AddRandomQuestionsSerializer,
    CategoryOptionSerializer,
    PruneStaleSerializer,
    QuestionCategorySerializer,
    QuestionContextSerializer,
    QuestionSerializer,
    QuizSerializer,
    QuizSlotSerializer,
)
from .services import (
    add_quiz_question,
    add_random_questions,
    category_options,
    delete_category,
    prune_stale_questions,
)
from .swagger import (
    question_category_viewset_schema,
    question_context_viewset_schema,
    question_viewset_schema,
    quiz_viewset_schema,
)
from .tasks import prune_stale_questions_task

logger = logging.getLogger(__name__)

READ_CAPABILITIES = HasContextCapability.read_capabilities


def _parse_bool(value):
    return str(value).lower() in ("1", "true", "yes", "on")


def _filter_by_visible_contexts(queryset, user, lookup):
    context_ids = contexts_with_any_capability(user, READ_CAPABILITIES)
    if context_ids is None:
        return queryset
    return queryset.filter(**{f"{lookup}__in": context_ids})


@question_context_viewset_schema
class QuestionContextViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = QuestionContextSerializer
    permission_classes = [IsAuthenticated, HasContextCapability]
    queryset = QuestionContext.objects.all()
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["level", "parent"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return QuestionContext.objects.none()
        queryset = QuestionContext.objects.select_related("parent").order_by("id")
        return _filter_by_visible_contexts(queryset, self.request.user, "id")


@question_category_viewset_schema
class QuestionCategoryViewSet(viewsets.ModelViewSet):
    serializer_class = QuestionCategorySerializer
    permission_classes = [IsAuthenticated, HasContextCapability]
    queryset = QuestionCategory.objects.all()
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["context", "parent"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return QuestionCategory.objects.none()
        queryset = (
            QuestionCategory.objects.select_related("context", "parent")
            .annotate(question_count=Count("questions"))
            .order_by("context_id", "sort_order", "name", "id")
        )
        return _filter_by_visible_contexts(queryset, self.request.user, "context_id")

    def perform_create(self, serializer):
        require_capability(self.request.user, CAP_MANAGE_CATEGORY, serializer.validated_data["context"])
        serializer.save()

    def destroy(self, request, *args, **kwargs):
        """Deletion guard first, then prune/move questions and delete."""
        instance = self.get_object()
        move_to = request.query_params.get("move_to")
        if move_to is not None:
            try:
                move_to = int(move_to)
            except ValueError:
                raise ValidationError({"move_to": "Must be a category id."}) from None
            if not QuestionCategory.objects.filter(pk=move_to).exists():
                raise ValidationError({"move_to": "Category does not exist."})

        delete_category(instance.pk, request.user, move_to=move_to, checker=RoleCapabilityChecker())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"], url_path="options")
    def tree_options(self, request):
        """Indented category options for a context and its parents."""
        context_id = request.query_params.get("context")
        if not context_id:
            raise ValidationError({"context": "This query parameter is required."})
        try:
            edit_contexts = QuestionEditContexts.for_context_id(int(context_id))
        except (ValueError, QuestionContext.DoesNotExist):
            raise NotFound("Context not found.") from None

        contexts = edit_contexts.having_cap(CAP_QUESTION_ADD, request.user)
        grouped = category_options(
            contexts,
            include_top=_parse_bool(request.query_params.get("include_top", False)),
            with_counts=_parse_bool(request.query_params.get("with_counts", False)),
            exclude_subtree_of=self._int_param("exclude_subtree_of"),
        )
        data = [
            {
                "context": context.display_name,
                "context_id": context.pk,
                "options": CategoryOptionSerializer(options, many=True).data,
            }
            for context, options in grouped.items()
        ]
        return Response(data)

    @action(detail=True, methods=["post"], url_path="prune-stale")
    def prune_stale(self, request, pk=None):
        category = self.get_object()
        require_capability(request.user, CAP_MANAGE_CATEGORY, category.context)

        serializer = PruneStaleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if serializer.validated_data["background"]:
            result = prune_stale_questions_task.delay(category.pk)
            logger.info("Queued stale question prune for category %s (task %s)", category.pk, result.id)
            return Response({"task_id": result.id}, status=status.HTTP_202_ACCEPTED)

        removed = prune_stale_questions(category.pk)
        return Response({"removed": removed})

    def _int_param(self, name):
        value = self.request.query_params.get(name)
        if value in (None, ""):
            return None
        try:
            return int(value)
        except ValueError:
            raise ValidationError({name: "Must be an integer."}) from None


@question_viewset_schema
class QuestionViewSet(viewsets.ModelViewSet):
    serializer_class = QuestionSerializer
    permission_classes = [IsAuthenticated, HasContextCapability]
    queryset = Question.objects.all()
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["category", "qtype", "hidden"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Question.objects.none()
        queryset = Question.objects.select_related("category", "category__context").order_by("category", "id")
        return _filter_by_visible_contexts(queryset, self.request.user, "category__context_id")

    def perform_create(self, serializer):
        category = serializer.validated_data["category"]
        require_capability(self.request.user, CAP_QUESTION_ADD, category.context)
        serializer.save(created_by_id=self.request.user.id)

    def perform_update(self, serializer):
        category = serializer.validated_data.get("category")
        if category is not None and category.pk != serializer.instance.category_id:
            require_capability(self.request.user, CAP_QUESTION_EDIT_ALL, category.context)
        serializer.save()

    def perform_destroy(self, instance):
        if instance.slots.exists():
            raise ValidationError({"detail": "This question is used in a quiz and cannot be deleted."})
        instance.delete()


@quiz_viewset_schema
class QuizViewSet(viewsets.ModelViewSet):
    serializer_class = QuizSerializer
    permission_classes = [IsAuthenticated, HasContextCapability]
    queryset = Quiz.objects.all()
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["context"]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Quiz.objects.none()
        queryset = Quiz.objects.select_related("context").prefetch_related("slots").order_by("id")
        return _filter_by_visible_contexts(queryset, self.request.user, "context_id")

    def perform_create(self, serializer):
        require_capability(self.request.user, CAP_QUIZ_MANAGE, serializer.validated_data["context"])
        serializer.save()

    @action(detail=True, methods=["post"], url_path="add-question")
    def add_question(self, request, pk=None):
        quiz = self.get_object()
        require_capability(request.user, CAP_QUIZ_MANAGE, quiz.context)
        serializer = AddQuizQuestionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        require_capability(request.user, CAP_QUESTION_USE_ALL, serializer.validated_data["question"].category.context)
        slot = add_quiz_question(
            serializer.validated_data["question"],
            quiz,
            max_mark=serializer.validated_data.get("max_mark"),
        )
        return Response(QuizSlotSerializer(slot).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="add-random")
    def add_random(self, request, pk=None):
        quiz = self.get_object()
        require_capability(request.user, CAP_QUIZ_MANAGE, quiz.context)
        serializer = AddRandomQuestionsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = serializer.validated_data["category"]
        require_capability(request.user, CAP_QUESTION_USE_ALL, category.context)
        slots = add_random_questions(
            quiz,
            category,
            serializer.validated_data["number"],
            include_subcategories=serializer.validated_data["include_subcategories"],
            created_by_id=request.user.id,
        )
        return Response(QuizSlotSerializer(slots, many=True).data, status=status.HTTP_201_CREATED)
