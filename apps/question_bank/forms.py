# apps/question_bank/forms.py
from django import forms

from .constants import CATEGORY_SELECT_LABEL


def grouped_choices(grouped_options, with_counts=False):
    """[(context display name, [(key, label), ...]), ...] for a grouped select."""
    choices = []
    for context, options in grouped_options.items():
        group = []
        for option in options:
            label = option.label
            if with_counts and option.is_enriched and option.question_count:
                label = f"{label} ({option.question_count})"
            group.append((option.key, label))
        choices.append((getattr(context, "display_name", str(context)), group))
    return choices


class QuestionCategorySelectForm(forms.Form):
    """Single <select> of question categories, one option group per context."""

    category = forms.ChoiceField(label=CATEGORY_SELECT_LABEL)

    def __init__(self, *args, grouped_options=None, **kwargs):
        super().__init__(*args, **kwargs)
        grouped_options = grouped_options or {}
        with_counts = any(
            option.is_enriched for options in grouped_options.values() for option in options
        )
        self.fields["category"].choices = grouped_choices(grouped_options, with_counts=with_counts)

    def clean_category(self):
        value = self.cleaned_data["category"]
        category_id, _, context_id = value.partition(",")
        try:
            return {"category_id": int(category_id), "context_id": int(context_id)}
        except ValueError:
            raise forms.ValidationError("Invalid category key.") from None
