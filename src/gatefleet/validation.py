"""Instance name validation."""

import re
from dataclasses import dataclass

from .config import MAX_NAME_LENGTH
from .models import Registry

# Names end up in filesystem paths, compose project names and container
# names, so only this whitelist is accepted.
NAME_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an instance name."""

    valid: bool
    error: str | None = None


def validate_name(name: str, registry: Registry) -> ValidationResult:
    """Validate a proposed instance name.

    Args:
        name: Proposed instance name
        registry: Current registry, used for the duplicate check

    Returns:
        ValidationResult with ``error`` set when invalid
    """
    if not name:
        return ValidationResult(False, "Name is required")
    if not NAME_PATTERN.fullmatch(name):
        return ValidationResult(
            False,
            "Name must start with a letter and contain only letters, numbers, "
            "dashes, underscores",
        )
    if len(name) > MAX_NAME_LENGTH:
        return ValidationResult(False, f"Name must be {MAX_NAME_LENGTH} characters or less")
    if name in registry.instances:
        return ValidationResult(False, f"Instance '{name}' already exists")
    return ValidationResult(True)
