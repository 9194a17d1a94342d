"""
Question Bank Models
Structure: QuestionContext -> QuestionCategory (tree) -> Question
Usage:     Quiz -> QuizSlot -> Question
"""
from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from apps.core.models import TimeStampedModel


class QuestionContext(TimeStampedModel):
    """
    Permission scope for categories and capabilities (system, course, quiz module...).
    """
    class Level(models.TextChoices):
        SYSTEM = 'SYSTEM', _('System')
        COURSE_CATEGORY = 'COURSE_CATEGORY', _('Category')
        COURSE = 'COURSE', _('Course')
        MODULE = 'MODULE', _('Quiz')

    level = models.CharField(max_length=20, choices=Level.choices, db_index=True)
    name = models.CharField(max_length=255)
    parent = models.ForeignKey(
        'self', null=True, blank=True, on_delete=models.CASCADE, related_name='children'
    )

    class Meta:
        db_table = 'question_contexts'
        ordering = ['id']

    def __str__(self):
        return self.display_name

    @property
    def display_name(self):
        if self.level == self.Level.SYSTEM:
            return str(self.Level.SYSTEM.label)
        return f"{self.get_level_display()}: {self.name}"

    def get_ancestors(self):
        """Parent contexts, nearest first. Stops on a repeated id."""
        ancestors = []
        seen = {self.pk}
        current = self.parent
        while current is not None and current.pk not in seen:
            ancestors.append(current)
            seen.add(current.pk)
            current = current.parent
        return ancestors


class QuestionCategory(TimeStampedModel):
    """
    Node of the per-context category tree. The parentless node is the
    context's synthetic top category.
    """
    context = models.ForeignKey(QuestionContext, on_delete=models.CASCADE, related_name='categories')
    parent = models.ForeignKey(
        'self', null=True, blank=True, on_delete=models.CASCADE, related_name='children'
    )
    name = models.CharField(max_length=255)
    info = models.TextField(blank=True)
    id_number = models.CharField(max_length=100, null=True, blank=True)
    sort_order = models.PositiveIntegerField(default=999)

    class Meta:
        db_table = 'question_categories'
        ordering = ['context', 'sort_order', 'name']
        verbose_name_plural = 'question categories'
        constraints = [
            models.UniqueConstraint(
                fields=['context'],
                condition=Q(parent__isnull=True),
                name='uniq_top_category_per_context',
            ),
            models.UniqueConstraint(
                fields=['context', 'id_number'],
                name='uniq_category_id_number_per_context',
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def is_top(self):
        return self.parent_id is None


class Question(TimeStampedModel):
    class QuestionType(models.TextChoices):
        SHORT_ANSWER = 'shortanswer', _('Short answer')
        MULTICHOICE = 'multichoice', _('Multiple choice')
        TRUE_FALSE = 'truefalse', _('True/False')
        ESSAY = 'essay', _('Essay')
        RANDOM = 'random', _('Random')

    category = models.ForeignKey(QuestionCategory, on_delete=models.CASCADE, related_name='questions')
    name = models.CharField(max_length=255)
    question_text = models.TextField(blank=True)
    qtype = models.CharField(max_length=20, choices=QuestionType.choices, default=QuestionType.SHORT_ANSWER)
    hidden = models.BooleanField(default=False)

    # Random questions: pick from subcategories too
    include_subcategories = models.BooleanField(default=False)

    created_by_id = models.BigIntegerField(null=True, blank=True)

    class Meta:
        db_table = 'questions'
        ordering = ['category', 'id']

    def __str__(self):
        return f"{self.name} ({self.qtype})"

    @property
    def is_random(self):
        return self.qtype == self.QuestionType.RANDOM


class Quiz(TimeStampedModel):
    context = models.ForeignKey(QuestionContext, on_delete=models.CASCADE, related_name='quizzes')
    name = models.CharField(max_length=255)

    class Meta:
        db_table = 'quizzes'
        ordering = ['id']

    def __str__(self):
        return self.name


class QuizSlot(TimeStampedModel):
    """
    A question placed in a quiz. Slots are the usage references that keep
    questions out of stale-question pruning.
    """
    quiz = models.ForeignKey(Quiz, on_delete=models.CASCADE, related_name='slots')
    slot = models.PositiveIntegerField()
    question = models.ForeignKey(Question, on_delete=models.PROTECT, related_name='slots')
    max_mark = models.DecimalField(max_digits=12, decimal_places=7, default=1)

    class Meta:
        db_table = 'quiz_slots'
        ordering = ['quiz', 'slot']
        constraints = [
            models.UniqueConstraint(fields=['quiz', 'slot'], name='uniq_quiz_slot'),
        ]

    def __str__(self):
        return f"{self.quiz} #{self.slot}"


class RoleAssignment(TimeStampedModel):
    """
    Role held by a user in a context; inherited by descendant contexts.
    """
    class Role(models.TextChoices):
        MANAGER = 'MANAGER', _('Manager')
        EDITING_TEACHER = 'EDITING_TEACHER', _('Editing teacher')
        TEACHER = 'TEACHER', _('Non-editing teacher')
        STUDENT = 'STUDENT', _('Student')

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='role_assignments')
    context = models.ForeignKey(QuestionContext, on_delete=models.CASCADE, related_name='role_assignments')
    role = models.CharField(max_length=20, choices=Role.choices)

    class Meta:
        db_table = 'role_assignments'
        constraints = [
            models.UniqueConstraint(fields=['user', 'context', 'role'], name='uniq_role_assignment'),
        ]

    def __str__(self):
        return f"{self.user_id} {self.role} @ {self.context_id}"
