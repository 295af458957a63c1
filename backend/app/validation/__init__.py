"""
Request payload validation.

Declared shapes live in shapes.py; validator.validate() interprets them.
"""

from app.validation.validator import ValidationIssue, ValidationResult, validate

__all__ = ["ValidationIssue", "ValidationResult", "validate"]
