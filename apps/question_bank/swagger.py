"""
OpenAPI / Swagger documentation for the question_bank app.

================================================================================
HIERARCHY STRUCTURE
================================================================================

QuestionContext (System → Category → Course → Quiz module)
  └─ QuestionCategory "top" (one per context, never shown as a normal option)
      └─ QuestionCategory (any depth)
          └─ Question (shortanswer, multichoice, truefalse, essay, random)

Quiz (module context)
  └─ QuizSlot → Question   (a slot is what keeps a question "in use")

================================================================================
CAPABILITIES
================================================================================

| Capability               | MANAGER | EDITING_TEACHER | TEACHER | STUDENT |
|--------------------------|---------|-----------------|---------|---------|
| question:add             | ✅      | ✅              | ❌      | ❌      |
| question:editall         | ✅      | ✅              | ❌      | ❌      |
| question:useall          | ✅      | ✅              | ✅      | ❌      |
| question:managecategory  | ✅      | ✅              | ❌      | ❌      |
| quiz:manage              | ✅      | ✅              | ❌      | ❌      |

Roles assigned in a context apply to every context below it. Superusers hold
every capability.

================================================================================
CATEGORY DELETION GUARD
================================================================================

Checked in this order, first failure wins:
1. Top category → **400** `cannotdeletetopcat`
2. Only child of the top category that has subcategories → **400** `cannotdeletecate`
3. Missing `question:managecategory` in the category's context → **403** `nopermissions`
"""
from drf_spectacular.utils import (
    OpenApiExample,
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)

from .constants import MESSAGES, MSG_CANNOT_DELETE_ONLY_CHILD, MSG_CANNOT_DELETE_TOP
from .serializers import (
    AddQuizQuestionSerializer,
    AddRandomQuestionsSerializer,
    CategoryOptionsGroupSerializer,
    PruneStaleSerializer,
    QuestionCategorySerializer,
    QuestionContextSerializer,
    QuestionSerializer,
    QuizSerializer,
    QuizSlotSerializer,
)

# -----------------------------------------------------------------------------
# Reusable responses
# -----------------------------------------------------------------------------

RESP_400_GUARD = OpenApiResponse(
    description="Deletion refused by the category guard.",
    examples=[
        OpenApiExample(
            "Top category",
            value={
                "status": "error",
                "code": 400,
                "message": MESSAGES[MSG_CANNOT_DELETE_TOP],
                "message_key": MSG_CANNOT_DELETE_TOP,
                "errors": {"detail": MESSAGES[MSG_CANNOT_DELETE_TOP]},
            },
            response_only=True,
        ),
        OpenApiExample(
            "Only child with subcategories",
            value={
                "status": "error",
                "code": 400,
                "message": MESSAGES[MSG_CANNOT_DELETE_ONLY_CHILD],
                "message_key": MSG_CANNOT_DELETE_ONLY_CHILD,
                "errors": {"detail": MESSAGES[MSG_CANNOT_DELETE_ONLY_CHILD]},
            },
            response_only=True,
        ),
    ],
)
RESP_401 = OpenApiResponse(description="Unauthorized: authentication required.")
RESP_403 = OpenApiResponse(description="Missing capability in the object's context.")
RESP_404 = OpenApiResponse(description="Resource not found or not visible to the user.")


# =============================================================================
# Contexts
# =============================================================================

question_context_viewset_schema = extend_schema_view(
    list=extend_schema(
        tags=["Question Contexts"],
        summary="List contexts",
        description="Contexts in which the user holds any question bank capability.",
        parameters=[
            OpenApiParameter(name="level", type=str, enum=["SYSTEM", "COURSE_CATEGORY", "COURSE", "MODULE"]),
            OpenApiParameter(name="parent", type=int),
        ],
        responses={200: QuestionContextSerializer(many=True), 401: RESP_401},
    ),
    retrieve=extend_schema(
        tags=["Question Contexts"],
        summary="Get context",
        responses={200: QuestionContextSerializer, 401: RESP_401, 404: RESP_404},
    ),
)


# =============================================================================
# Categories
# =============================================================================

CATEGORY_OPTIONS_DESC = """
Indented category options for the given context **and its parent contexts**
in which the user holds `question:add`, nearest context first.

- Siblings are ordered by name (case-insensitive), then id.
- Each level of depth prefixes the label with three non-breaking spaces.
- `include_top=true` adds the context's top category first, labelled
  "Top for <context>"; ordinary categories then start one level deeper.
- `with_counts=true` adds `question_count` (visible questions) to every option.
- `exclude_subtree_of=<id>` drops that category's descendants (used when
  choosing a new parent for it).
- `key` is `"<category id>,<context id>"`.
"""

CATEGORY_DESTROY_DESC = """
Delete a category. The deletion guard runs first (see module docs). Then:

- with `move_to=<category id>`: every question moves to that category
  (`question:managecategory` is required there too; a target inside the
  deleted subtree is refused with **400** `invalidmovetarget`);
- without it: unused questions are pruned and any question still placed in a
  quiz blocks the delete with **400**.

Subcategories are reattached to the deleted category's parent.
"""

CATEGORY_PRUNE_DESC = """
Remove every question of the category that no quiz slot references, hidden
or not, random selectors included. Returns `{"removed": n}`.
`{"background": true}` queues the work on Celery and returns **202** with
`task_id`.
"""

question_category_viewset_schema = extend_schema_view(
    list=extend_schema(
        tags=["Question Categories"],
        summary="List categories",
        parameters=[
            OpenApiParameter(name="context", type=int),
            OpenApiParameter(name="parent", type=int),
        ],
        responses={200: QuestionCategorySerializer(many=True), 401: RESP_401},
    ),
    retrieve=extend_schema(
        tags=["Question Categories"],
        summary="Get category",
        responses={200: QuestionCategorySerializer, 401: RESP_401, 404: RESP_404},
    ),
    create=extend_schema(
        tags=["Question Categories"],
        summary="Create category",
        description="Without `parent` the category is created directly under the context's top category.",
        responses={201: QuestionCategorySerializer, 400: OpenApiResponse(description="Validation error."), 403: RESP_403},
    ),
    update=extend_schema(tags=["Question Categories"], summary="Update category"),
    partial_update=extend_schema(tags=["Question Categories"], summary="Partially update category"),
    destroy=extend_schema(
        tags=["Question Categories"],
        summary="Delete category",
        description=CATEGORY_DESTROY_DESC,
        parameters=[OpenApiParameter(name="move_to", type=int, description="Category receiving the questions")],
        responses={204: None, 400: RESP_400_GUARD, 403: RESP_403, 404: RESP_404},
    ),
    tree_options=extend_schema(
        tags=["Question Categories"],
        summary="Category options tree",
        description=CATEGORY_OPTIONS_DESC,
        parameters=[
            OpenApiParameter(name="context", type=int, required=True),
            OpenApiParameter(name="include_top", type=bool),
            OpenApiParameter(name="with_counts", type=bool),
            OpenApiParameter(name="exclude_subtree_of", type=int),
        ],
        responses={200: CategoryOptionsGroupSerializer(many=True), 404: RESP_404},
    ),
    prune_stale=extend_schema(
        tags=["Question Categories"],
        summary="Prune stale questions",
        description=CATEGORY_PRUNE_DESC,
        request=PruneStaleSerializer,
        responses={
            200: OpenApiResponse(description="Synchronous prune", examples=[
                OpenApiExample("Pruned", value={"removed": 2}, response_only=True),
            ]),
            202: OpenApiResponse(description="Queued on Celery"),
            403: RESP_403,
        },
    ),
)


# =============================================================================
# Questions
# =============================================================================

question_viewset_schema = extend_schema_view(
    list=extend_schema(
        tags=["Questions"],
        summary="List questions",
        parameters=[
            OpenApiParameter(name="category", type=int),
            OpenApiParameter(name="qtype", type=str, enum=["shortanswer", "multichoice", "truefalse", "essay", "random"]),
            OpenApiParameter(name="hidden", type=bool),
        ],
        responses={200: QuestionSerializer(many=True), 401: RESP_401},
    ),
    retrieve=extend_schema(tags=["Questions"], summary="Get question"),
    create=extend_schema(tags=["Questions"], summary="Create question", description="Requires `question:add` in the category's context."),
    update=extend_schema(tags=["Questions"], summary="Update question"),
    partial_update=extend_schema(tags=["Questions"], summary="Partially update question (e.g. toggle `hidden`)"),
    destroy=extend_schema(
        tags=["Questions"],
        summary="Delete question",
        description="Questions placed in a quiz cannot be deleted (**400**).",
    ),
)


# =============================================================================
# Quizzes
# =============================================================================

quiz_viewset_schema = extend_schema_view(
    list=extend_schema(tags=["Quizzes"], summary="List quizzes", responses={200: QuizSerializer(many=True)}),
    retrieve=extend_schema(tags=["Quizzes"], summary="Get quiz"),
    create=extend_schema(tags=["Quizzes"], summary="Create quiz", description="Requires `quiz:manage` in the context."),
    update=extend_schema(tags=["Quizzes"], summary="Update quiz"),
    partial_update=extend_schema(tags=["Quizzes"], summary="Partially update quiz"),
    destroy=extend_schema(tags=["Quizzes"], summary="Delete quiz"),
    add_question=extend_schema(
        tags=["Quizzes"],
        summary="Add a question to the quiz",
        request=AddQuizQuestionSerializer,
        responses={201: QuizSlotSerializer, 403: RESP_403},
    ),
    add_random=extend_schema(
        tags=["Quizzes"],
        summary="Add random questions to the quiz",
        description="Reuses an unused random question of the category before creating a new one.",
        request=AddRandomQuestionsSerializer,
        responses={201: QuizSlotSerializer(many=True), 403: RESP_403},
    ),
)
