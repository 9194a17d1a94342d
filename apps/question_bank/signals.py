# apps/question_bank/signals.py
"""
Signals for the question_bank app.

post_save on QuestionContext: every new context gets its top category right
away, so the tree builder and the deletion guard always find one.
"""
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import QuestionContext
from .services import get_top_category


@receiver(post_save, sender=QuestionContext)
def create_top_category_for_context(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        get_top_category(instance, create=True)
