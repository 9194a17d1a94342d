#api/v1/routers.py
from rest_framework.routers import DefaultRouter

from apps.question_bank.views import (
    QuestionContextViewSet,
    QuestionCategoryViewSet,
    QuestionViewSet,
    QuizViewSet,
)


api_router = DefaultRouter()

# Contexts
api_router.register(
    r"question-contexts",
    QuestionContextViewSet,
    basename="question-contexts",
)

# Category tree
api_router.register(
    r"question-categories",
    QuestionCategoryViewSet,
    basename="question-categories",
)

# Questions & quizzes
api_router.register(
    r"questions",
    QuestionViewSet,
    basename="questions",
)
api_router.register(
    r"quizzes",
    QuizViewSet,
    basename="quizzes",
)
