from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import NotFound

from apps.core.exceptions import custom_exception_handler
from apps.question_bank.exceptions import (
    CapabilityDenied,
    CategoryNotEmpty,
    TopCategoryProtected,
)


def test_guard_error_envelope():
    response = custom_exception_handler(TopCategoryProtected(), {})

    assert response.status_code == 400
    assert response.data == {
        "status": "error",
        "code": 400,
        "message": "Cannot delete the top category.",
        "message_key": "cannotdeletetopcat",
        "errors": {"detail": "Cannot delete the top category."},
    }


def test_capability_denied_is_403_and_names_capability():
    response = custom_exception_handler(CapabilityDenied("question:managecategory"), {})

    assert response.status_code == 403
    assert response.data["message_key"] == "nopermissions"
    assert "question:managecategory" in response.data["message"]


def test_category_not_empty_reports_count():
    response = custom_exception_handler(CategoryNotEmpty(3), {})
    assert response.status_code == 400
    assert "3 question(s)" in response.data["message"]


def test_django_validation_error_becomes_400():
    response = custom_exception_handler(DjangoValidationError({"name": ["Required."]}), {})

    assert response.status_code == 400
    assert response.data["message"] == "Validation Error"
    assert response.data["errors"]["name"] == ["Required."]


def test_drf_errors_are_wrapped():
    response = custom_exception_handler(NotFound("Context not found."), {})

    assert response.status_code == 404
    assert response.data["status"] == "error"
    assert response.data["message"] == "Error"
    assert response.data["errors"]["detail"] == "Context not found."


def test_unexpected_error_is_500():
    response = custom_exception_handler(RuntimeError("boom"), {})

    assert response.status_code == 500
    assert response.data["code"] == 500
