# apps/question_bank/apps.py
from django.apps import AppConfig


class QuestionBankConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.question_bank"
    verbose_name = "Question Bank"

    def ready(self):
        from . import signals  # noqa: F401
