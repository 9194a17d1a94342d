# apps/question_bank/tasks.py
import logging

from celery import shared_task

from .services import prune_stale_questions

logger = logging.getLogger(__name__)


@shared_task
def prune_stale_questions_task(category_id):
    """Prune unused questions of a category outside the request cycle."""
    removed = prune_stale_questions(category_id)
    logger.info("Background prune of category %s removed %s question(s)", category_id, removed)
    return removed
