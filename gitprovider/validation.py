"""
Field validation helpers.

A Validator collects every problem found on an object instead of stopping at
the first one, so callers see the complete set of problems at once.
"""

from typing import Any, Protocol

from gitprovider.exceptions import FieldError, ValidationError

FIELD_REQUIRED = "field is required"
FIELD_INVALID = "field is invalid"
FIELD_ENUM_INVALID = "field value isn't known to this enum"


class ValidateTarget(Protocol):
    """Anything that can register its own field errors into a Validator."""

    def validate_fields(self, validator: "Validator") -> None: ...


class Validator:
    """Accumulates field errors for the object named ``name``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.errors: list[FieldError] = []

    def append(self, reason: str | None, value: Any = None, *field_paths: str) -> None:
        """
        Register a validation error for the given field path.

        Args:
            reason: Why the field is invalid. ``None`` means no error and is ignored.
            value: The offending value, shown in the message when not None
            field_paths: Names of the nested fields leading to the error
        """
        if reason is None:
            return
        path = ".".join([self.name, *field_paths])
        self.errors.append(FieldError(path, reason, value))

    def required(self, *field_paths: str) -> None:
        self.append(FIELD_REQUIRED, None, *field_paths)

    def invalid(self, value: Any, *field_paths: str) -> None:
        self.append(FIELD_INVALID, value, *field_paths)

    def error(self) -> ValidationError | None:
        """Return the aggregated error, or None if nothing was registered."""
        if not self.errors:
            return None
        return ValidationError(list(self.errors))

    def raise_if_errors(self) -> None:
        err = self.error()
        if err is not None:
            raise err


def validate_targets(name: str, *targets: ValidateTarget) -> None:
    """
    Run ``validate_fields`` for every target and raise the aggregate error.

    Raises:
        ValidationError: If any target registered an error
    """
    validator = Validator(name)
    for target in targets:
        target.validate_fields(validator)
    validator.raise_if_errors()
