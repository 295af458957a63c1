"""
validator.py — Generic Payload Validation

Interprets any declared shape from shapes.py against a raw payload:

    result = validate(RegisterRequest, payload)
    if result.ok:
        result.value      # validated RegisterRequest, defaults applied
    else:
        result.issues     # [ValidationIssue(path="name", message=...), ...]

Issues come back in field declaration order, one per violated constraint, with
dot-joined wire paths ("items.0.qty"). The function never raises for bad input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import ValidationError

from app.validation.shapes import RequestShape

ShapeT = TypeVar("ShapeT", bound=RequestShape)


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass
class ValidationResult(Generic[ShapeT]):
    value: Optional[ShapeT] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.issues


def validate(schema: Type[ShapeT], payload: Any) -> ValidationResult[ShapeT]:
    """
    Validate `payload` (already-decoded JSON) against `schema`.

    Args:
        schema: a RequestShape subclass
        payload: decoded JSON body; anything other than an object fails

    Returns:
        ValidationResult with either `value` or `issues` populated
    """
    try:
        value = schema.model_validate(payload)
    except ValidationError as exc:
        return ValidationResult(issues=issues_from_error(exc))
    return ValidationResult(value=value)


def issues_from_error(exc: ValidationError) -> List[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in err["loc"]),
            message=err["msg"],
        )
        for err in exc.errors()
    ]
