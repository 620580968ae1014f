"""Error types for state graph construction and rendering.

Every error derives from ``ValueError`` so callers that only care about
"the definition is invalid" can catch the builtin, while callers that want
to tell structural problems apart can catch the specific subclass.
"""

from __future__ import annotations


class StepGraphError(ValueError):
    """Base error for invalid state machine definitions."""


class ChainingError(StepGraphError):
    """Error linking states together.

    Raised when:
    - Continuing a chain whose last state is terminal (Succeed, Fail, Choice)
    - Setting the next state of a state that already has one
    """


class GraphValidationError(StepGraphError):
    """Error found while validating a state graph at render time.

    Raised when:
    - The same state is used in more than one graph (e.g. two Parallel branches)
    - Two distinct states share a state name
    - A state reports property errors from ``validate_state()``

    Attributes:
        errors: The individual messages that were collected.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Invalid graph: {'; '.join(self.errors)}")
