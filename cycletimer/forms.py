"""Schema for the new cycle form."""

from typing import Any, Mapping

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError

MIN_MINUTES = 1
MAX_MINUTES = 60

TASK_SUGGESTIONS = ["Project 1", "Project 2", "Project 3", "Banana"]

# (field, pydantic error type) -> message shown under the input
_MESSAGES = {
    ("task", "string_too_short"): "Enter the task",
    ("minutes_amount", "greater_than_equal"): f"Minimum of {MIN_MINUTES} minute",
    ("minutes_amount", "less_than_equal"): f"Maximum of {MAX_MINUTES} minutes",
}
_FALLBACK = {
    "task": "Enter the task",
    "minutes_amount": "Enter the number of minutes",
}


class NewCycleForm(BaseModel):
    """Validated input for starting a cycle."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    task: str = Field(min_length=1)
    minutes_amount: int = Field(ge=MIN_MINUTES, le=MAX_MINUTES)


def _message(field: str, error_type: str) -> str:
    return _MESSAGES.get((field, error_type), _FALLBACK.get(field, "Invalid value"))


def validate_new_cycle(data: Mapping[str, Any], strict: bool = False) -> NewCycleForm:
    """Validate raw form data.

    Args:
        data: Mapping with ``task`` and ``minutes_amount`` keys. Values may
            be raw strings as typed into the form.
        strict: Accept only a real ``str`` task and a real ``int`` minutes
            value, with no text, float or bool conversion.

    Returns:
        The validated form.

    Raises:
        ValidationError: With one message per failing field.
    """
    try:
        return NewCycleForm.model_validate(dict(data), strict=strict)
    except pydantic.ValidationError as exc:
        errors = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "form"
            # First failure per field wins, same as an inline form message.
            errors.setdefault(field, _message(field, error["type"]))
        raise ValidationError(errors) from exc
