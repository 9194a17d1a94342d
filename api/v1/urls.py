#api/v1/urls.py
from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .routers import api_router


urlpatterns = [
    # Router-registered viewsets (contexts, categories, questions, quizzes)
    path("", include(api_router.urls)),

    # JWT tokens
    path("auth/token/", TokenObtainPairView.as_view(), name="token-obtain-pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
]
