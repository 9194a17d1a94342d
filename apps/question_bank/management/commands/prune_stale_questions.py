import logging

from django.core.management.base import BaseCommand, CommandError

from apps.question_bank.models import QuestionCategory
from apps.question_bank.services import prune_stale_questions

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Remove questions that no quiz uses from one category, or from every category of a context."

    def add_arguments(self, parser):
        parser.add_argument("--category", type=int, help="Category id")
        parser.add_argument("--context", type=int, help="Prune every category of this context")

    def handle(self, *args, **options):
        category_id = options.get("category")
        context_id = options.get("context")
        if not category_id and not context_id:
            raise CommandError("Pass --category or --context.")

        if category_id:
            category_ids = [category_id]
        else:
            category_ids = list(
                QuestionCategory.objects.filter(context_id=context_id).values_list("id", flat=True)
            )

        total = 0
        for cid in category_ids:
            removed = prune_stale_questions(cid)
            total += removed
            if removed:
                self.stdout.write(f"Category {cid}: removed {removed} question(s)")

        logger.info("prune_stale_questions command removed %s question(s)", total)
        self.stdout.write(self.style.SUCCESS(f"Removed {total} stale question(s)."))
