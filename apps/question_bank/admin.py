from django.contrib import admin

from .models import Question, QuestionCategory, QuestionContext, Quiz, QuizSlot, RoleAssignment


@admin.register(QuestionContext)
class QuestionContextAdmin(admin.ModelAdmin):
    list_display = ("id", "level", "name", "parent")
    list_filter = ("level",)
    search_fields = ("name",)


@admin.register(QuestionCategory)
class QuestionCategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "context", "parent", "sort_order")
    list_filter = ("context",)
    search_fields = ("name", "id_number")


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "qtype", "category", "hidden")
    list_filter = ("qtype", "hidden")
    search_fields = ("name",)


class QuizSlotInline(admin.TabularInline):
    model = QuizSlot
    extra = 0
    raw_id_fields = ("question",)


@admin.register(Quiz)
class QuizAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "context")
    inlines = [QuizSlotInline]


@admin.register(RoleAssignment)
class RoleAssignmentAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "context", "role")
    list_filter = ("role",)
