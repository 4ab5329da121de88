# git_providers/source_control/validation.py

"""
Validation of decoded server objects.

An object is valid only when every field its class lists in
``required_fields`` is present and non-empty. Validation fails closed: the
first missing field rejects the object, and one bad element rejects a whole
list.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

from ..core.exceptions import ValidationFailedError

T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    missing_field: str | None = None

    def __bool__(self) -> bool:
        return self.valid


def _lookup(obj: Any, path: str) -> Any:
    current = obj
    for part in path.split("."):
        if current is None:
            return _MISSING
        if isinstance(current, dict):
            current = current.get(part, _MISSING)
        else:
            current = getattr(current, part, _MISSING)
        if current is _MISSING:
            return _MISSING
    return current


def validate(obj: Any) -> ValidationResult:
    """Check an object's required fields without raising."""
    if obj is None:
        return ValidationResult(False, "<object>")
    for field_path in getattr(type(obj), "required_fields", ()):
        value = _lookup(obj, field_path)
        if value is _MISSING or value is None or value == "":
            return ValidationResult(False, field_path)
    return ValidationResult(True)


def validate_api_object(obj: T) -> T:
    """Return ``obj`` if valid, else raise ValidationFailedError."""
    result = validate(obj)
    if not result:
        raise ValidationFailedError(
            f"{type(obj).__name__} is missing required field '{result.missing_field}'",
            field=result.missing_field,
        )
    return obj


def validate_api_objects(objs: Iterable[T]) -> list[T]:
    """Validate every element; the first invalid one fails the list."""
    objs = list(objs)
    for index, obj in enumerate(objs):
        result = validate(obj)
        if not result:
            raise ValidationFailedError(
                f"List element {index} ({type(obj).__name__}) is missing "
                f"required field '{result.missing_field}'",
                field=result.missing_field,
                details={"index": index},
            )
    return objs
