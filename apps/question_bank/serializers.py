# apps/question_bank/serializers.py
"""
Question bank serializers. Category creation goes through
services.create_category so a missing parent lands under the context's top
category; the parent must live in the same context.
"""
from django.db import transaction
from rest_framework import serializers

from .models import Question, QuestionCategory, QuestionContext, Quiz, QuizSlot
from .services import category_subtree_ids, create_category, is_top_category


class QuestionContextSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = QuestionContext
        fields = ["id", "level", "name", "parent", "display_name", "created_at", "updated_at"]
        read_only_fields = ["id", "display_name", "created_at", "updated_at"]


class QuestionCategorySerializer(serializers.ModelSerializer):
    context = serializers.PrimaryKeyRelatedField(queryset=QuestionContext.objects.all())
    is_top = serializers.BooleanField(read_only=True)
    question_count = serializers.SerializerMethodField()

    class Meta:
        model = QuestionCategory
        fields = [
            "id", "context", "parent", "name", "info", "id_number", "sort_order",
            "is_top", "question_count", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "is_top", "question_count", "created_at", "updated_at"]
        # Uniqueness is checked in validate(); the conditional top-category
        # constraint must not become a field validator.
        validators = []

    def get_question_count(self, obj):
        annotated = getattr(obj, "question_count", None)
        if annotated is not None:
            return annotated
        return obj.questions.count()

    def validate(self, attrs):
        attrs = super().validate(attrs)
        context = attrs.get("context") or getattr(self.instance, "context", None)
        parent = attrs.get("parent")

        if self.instance and "context" in attrs and attrs["context"] != self.instance.context:
            raise serializers.ValidationError({"context": "A category cannot change context."})

        if parent is not None:
            if parent.context_id != context.pk:
                raise serializers.ValidationError({"parent": "Parent category must be in the same context."})
            if self.instance and parent.pk == self.instance.pk:
                raise serializers.ValidationError({"parent": "A category cannot be its own parent."})

        if self.instance and is_top_category(self.instance) and "parent" in attrs and parent is not None:
            raise serializers.ValidationError({"parent": "The top category cannot be moved."})

        if self.instance and parent is not None and not is_top_category(self.instance):
            if parent.pk in category_subtree_ids(self.instance):
                raise serializers.ValidationError({"parent": "A category cannot move into its own subcategory."})

        if self.instance and "parent" in attrs and parent is None and not is_top_category(self.instance):
            raise serializers.ValidationError({"parent": "Only the top category may have no parent."})

        # Blank id numbers are stored as NULL so they never collide.
        if "id_number" in attrs:
            attrs["id_number"] = attrs["id_number"] or None
        id_number = attrs.get("id_number")
        if id_number:
            clash = QuestionCategory.objects.filter(context=context, id_number=id_number)
            if self.instance:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise serializers.ValidationError({"id_number": "This ID number is already used in this context."})

        return attrs

    def create(self, validated_data):
        with transaction.atomic():
            return create_category(
                context=validated_data["context"],
                name=validated_data["name"],
                parent=validated_data.get("parent"),
                info=validated_data.get("info", ""),
                id_number=validated_data.get("id_number"),
            )


class QuestionSerializer(serializers.ModelSerializer):
    in_use = serializers.SerializerMethodField()

    class Meta:
        model = Question
        fields = [
            "id", "category", "name", "question_text", "qtype", "hidden",
            "include_subcategories", "created_by_id", "in_use", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_by_id", "in_use", "created_at", "updated_at"]

    def get_in_use(self, obj):
        return obj.slots.exists()


class QuizSlotSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuizSlot
        fields = ["id", "quiz", "slot", "question", "max_mark"]
        read_only_fields = fields


class QuizSerializer(serializers.ModelSerializer):
    slots = QuizSlotSerializer(many=True, read_only=True)

    class Meta:
        model = Quiz
        fields = ["id", "context", "name", "slots", "created_at", "updated_at"]
        read_only_fields = ["id", "slots", "created_at", "updated_at"]


class AddQuizQuestionSerializer(serializers.Serializer):
    question = serializers.PrimaryKeyRelatedField(queryset=Question.objects.all())
    max_mark = serializers.DecimalField(max_digits=12, decimal_places=7, required=False)


class AddRandomQuestionsSerializer(serializers.Serializer):
    category = serializers.PrimaryKeyRelatedField(queryset=QuestionCategory.objects.all())
    number = serializers.IntegerField(min_value=1, max_value=100)
    include_subcategories = serializers.BooleanField(default=False)


class CategoryOptionSerializer(serializers.Serializer):
    key = serializers.CharField()
    label = serializers.CharField()
    depth = serializers.IntegerField()
    context_id = serializers.IntegerField()
    category_id = serializers.IntegerField()
    is_top = serializers.BooleanField()
    question_count = serializers.IntegerField(required=False)

    def to_representation(self, instance):
        return instance.as_dict()


class CategoryOptionsGroupSerializer(serializers.Serializer):
    context = serializers.CharField()
    context_id = serializers.IntegerField()
    options = CategoryOptionSerializer(many=True)


class PruneStaleSerializer(serializers.Serializer):
    background = serializers.BooleanField(default=False)
