"""Value validation shared by states and the state machine definition.

Provides consistent rules for names, labels and numeric limits. The
``validate_*`` functions raise; the ``is_*`` helpers answer without raising
and the ``*_errors`` helpers return messages for ``validate_state()``.
"""

from __future__ import annotations

import re

# Case-insensitive: letters, digits and + ! @ . ( ) - = _ '
STATE_MACHINE_NAME_PATTERN = re.compile(r"^[a-z0-9+!@.()\-=_']+$", re.IGNORECASE)

MAX_STATE_MACHINE_NAME_LENGTH = 80

MAX_LABEL_LENGTH = 40

# Whitespace, wildcard/bracket punctuation, control and C1 characters.
LABEL_FORBIDDEN = re.compile(r"[\s?*<>{}\[\]:;,\\|^~$#%&`\"]|[\u0000-\u001f]|[\u007f-\u009f]")

MAX_SAFE_INTEGER = 2**53 - 1


def validate_state_machine_name(name: str) -> None:
    """Validate an explicit state machine name.

    Rules:
    - 1-80 characters
    - Letters, digits and ``+ ! @ . ( ) - = _ '`` only

    Args:
        name: The name to validate.

    Raises:
        ValueError: If the name is invalid.

    Example:
        >>> validate_state_machine_name("orders-v2")  # OK
        >>> validate_state_machine_name("a" * 81)      # ValueError
        >>> validate_state_machine_name("has space")   # ValueError
    """
    if not 1 <= len(name) <= MAX_STATE_MACHINE_NAME_LENGTH:
        raise ValueError(
            f"State Machine name must be between 1 and {MAX_STATE_MACHINE_NAME_LENGTH} "
            f"characters. Received: {name}"
        )

    if not STATE_MACHINE_NAME_PATTERN.match(name):
        raise ValueError(
            f"State Machine name must match \"^[a-z0-9+!@.()-=_']+$/i\". Received: {name}"
        )


def is_valid_state_machine_name(name: str) -> bool:
    """Check a state machine name without raising."""
    if not name or len(name) > MAX_STATE_MACHINE_NAME_LENGTH:
        return False
    return bool(STATE_MACHINE_NAME_PATTERN.match(name))


def label_errors(label: str | None) -> list[str]:
    """Collect problems with a Distributed Map label.

    A single character label such as "s" is valid.

    Args:
        label: Label to check. None means no label and is always valid.

    Returns:
        Error messages, empty if the label is acceptable.
    """
    if label is None:
        return []

    errors = []
    if not label.strip():
        errors.append("label must contain at least one non-whitespace character")
        return errors
    if len(label) > MAX_LABEL_LENGTH:
        errors.append(f"label must be {MAX_LABEL_LENGTH} characters or less")
    if LABEL_FORBIDDEN.search(label):
        errors.append("label cannot contain any whitespace or special characters")
    return errors


def is_positive_integer(value: float) -> bool:
    """True for whole numbers in [0, 2**53 - 1].

    Zero counts as positive here, matching the range accepted for
    concurrency limits.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        if not value.is_integer():
            return False
    elif not isinstance(value, int):
        return False
    return 0 <= value <= MAX_SAFE_INTEGER
