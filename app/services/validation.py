"""
Validation of raw product submissions.

Submissions arrive as untyped field maps, usually straight from an HTML
form, so every value may be text. ``validate_product_input`` turns such a
map into a ``ProductInput`` or raises ``ProductValidationError`` carrying
one human-readable message per failing field.
"""
import logging
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from app.exceptions import ProductValidationError
from app.schemas.product import ProductInput

logger = logging.getLogger(__name__)

# Fields read from a submission; everything else is ignored
VALIDATED_FIELDS = ("name", "description", "price", "quantity", "category")
ACTIVE_FLAG = "is_active"

FALSY_FLAG_VALUES = {"", "0", "false", "off", "no"}

ERROR_MESSAGES = {
    "missing": "The {field} field is required.",
    "string_type": "The {field} field must be a string.",
    "string_too_long": "The {field} field must not be greater than {max_length} characters.",
    "decimal_parsing": "The {field} field must be a number.",
    "decimal_type": "The {field} field must be a number.",
    "finite_number": "The {field} field must be a number.",
    "int_parsing": "The {field} field must be an integer.",
    "int_from_float": "The {field} field must be an integer.",
    "int_type": "The {field} field must be an integer.",
    "int_parsing_size": "The {field} field must be an integer.",
    "greater_than_equal": "The {field} field must be at least {ge}.",
    "less_than": "The {field} field must be less than {lt}.",
    "less_than_equal": "The {field} field must not be greater than {le}.",
}


def is_flag_set(data: Mapping[str, Any], flag: str) -> bool:
    """
    Checkbox semantics: an omitted flag means False.

    A present flag counts as set unless its value is an explicit "off"
    value such as ``"0"`` or ``"false"``.
    """
    if flag not in data:
        return False
    value = data[flag]
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() not in FALSY_FLAG_VALUES


def _clean(value: Any) -> Any:
    """Trim strings; blank strings count as absent (None)."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _message_for(field: str, error: Dict[str, Any]) -> str:
    template = ERROR_MESSAGES.get(error["type"])
    if template is None:
        return error["msg"]
    ctx = {key: str(value) for key, value in (error.get("ctx") or {}).items()}
    return template.format(field=field, **ctx)


def validate_product_input(data: Mapping[str, Any]) -> ProductInput:
    """
    Validate and normalize a raw product submission.

    Args:
        data: Field name to raw value mapping (form or JSON body)

    Returns:
        Normalized ProductInput with price rounded to 2 decimal places

    Raises:
        ProductValidationError: With a field -> message map of every failure
    """
    candidate = {}
    for field in VALIDATED_FIELDS:
        value = _clean(data.get(field))
        if value is not None:
            candidate[field] = value
    candidate[ACTIVE_FLAG] = is_flag_set(data, ACTIVE_FLAG)

    try:
        return ProductInput.model_validate(candidate)
    except ValidationError as e:
        errors: Dict[str, str] = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "__all__"
            # Keep the first message per field
            errors.setdefault(field, _message_for(field, error))
        logger.debug(f"Product submission rejected: {errors}")
        raise ProductValidationError(errors) from e
