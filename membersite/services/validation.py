"""Form validation: run a pydantic form model and return a typed ok/error result."""

from dataclasses import dataclass
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

FormT = TypeVar("FormT", bound=BaseModel)


@dataclass(frozen=True)
class ValidationResult(Generic[FormT]):
    """Either a validated form (value) or the first validation error message (error)."""

    value: FormT | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def first_error_message(exc: ValidationError) -> str:
    """Human-readable text for the first error, prefixed with the offending field."""
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "input"
    return f"{field}: {err['msg']}"


def validate_form(model: type[FormT], data: Mapping[str, Any]) -> ValidationResult[FormT]:
    """Validate data against model; never raises for bad input."""
    try:
        return ValidationResult(value=model.model_validate(dict(data)))
    except ValidationError as e:
        return ValidationResult(error=first_error_message(e))
