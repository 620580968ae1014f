"""Predicates for Choice state branches.

Conditions form a small expression tree: comparisons of a JSON path
variable against a literal or another path, type checks, and the
``Not`` / ``And`` / ``Or`` combinators. The variable is checked when the
condition is built, so a bad path fails at the call site.

Example:
    >>> cond = Condition.and_(
    ...     Condition.string_equals("$.status", "READY"),
    ...     Condition.number_greater_than("$.retries", 3),
    ... )
    >>> cond.render_condition()["And"][0]
    {'Variable': '$.status', 'StringEquals': 'READY'}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


def validate_variable(variable: str) -> None:
    """Raise ValueError unless the variable is ``$`` or starts with ``$.`` / ``$[``."""
    if not (variable == "$" or variable.startswith(("$.", "$["))):
        raise ValueError(
            f"Variable reference must be '$', start with '$.', or start with '$[', got '{variable}'"
        )


class Condition(ABC):
    """A boolean test evaluated against the state input."""

    @abstractmethod
    def render_condition(self) -> dict[str, Any]:
        """Render to the Choice rule fragment."""

    # Presence and type checks

    @staticmethod
    def is_present(variable: str) -> Condition:
        return VariableComparison(variable, "IsPresent", True)

    @staticmethod
    def is_not_present(variable: str) -> Condition:
        return VariableComparison(variable, "IsPresent", False)

    @staticmethod
    def is_null(variable: str) -> Condition:
        return VariableComparison(variable, "IsNull", True)

    @staticmethod
    def is_not_null(variable: str) -> Condition:
        return VariableComparison(variable, "IsNull", False)

    @staticmethod
    def is_string(variable: str) -> Condition:
        return VariableComparison(variable, "IsString", True)

    @staticmethod
    def is_not_string(variable: str) -> Condition:
        return VariableComparison(variable, "IsString", False)

    @staticmethod
    def is_numeric(variable: str) -> Condition:
        return VariableComparison(variable, "IsNumeric", True)

    @staticmethod
    def is_not_numeric(variable: str) -> Condition:
        return VariableComparison(variable, "IsNumeric", False)

    @staticmethod
    def is_boolean(variable: str) -> Condition:
        return VariableComparison(variable, "IsBoolean", True)

    @staticmethod
    def is_not_boolean(variable: str) -> Condition:
        return VariableComparison(variable, "IsBoolean", False)

    @staticmethod
    def is_timestamp(variable: str) -> Condition:
        return VariableComparison(variable, "IsTimestamp", True)

    @staticmethod
    def is_not_timestamp(variable: str) -> Condition:
        return VariableComparison(variable, "IsTimestamp", False)

    # Booleans

    @staticmethod
    def boolean_equals(variable: str, value: bool) -> Condition:
        return VariableComparison(variable, "BooleanEquals", value)

    @staticmethod
    def boolean_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "BooleanEqualsPath", value)

    # Strings

    @staticmethod
    def string_equals(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringEquals", value)

    @staticmethod
    def string_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringEqualsPath", value)

    @staticmethod
    def string_less_than(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringLessThan", value)

    @staticmethod
    def string_less_than_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringLessThanPath", value)

    @staticmethod
    def string_less_than_equals(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringLessThanEquals", value)

    @staticmethod
    def string_less_than_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringLessThanEqualsPath", value)

    @staticmethod
    def string_greater_than(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringGreaterThan", value)

    @staticmethod
    def string_greater_than_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringGreaterThanPath", value)

    @staticmethod
    def string_greater_than_equals(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringGreaterThanEquals", value)

    @staticmethod
    def string_greater_than_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "StringGreaterThanEqualsPath", value)

    @staticmethod
    def string_matches(variable: str, value: str) -> Condition:
        """Glob match; ``*`` is the only wildcard, escape a literal one as ``\\*``."""
        return VariableComparison(variable, "StringMatches", value)

    # Numbers

    @staticmethod
    def number_equals(variable: str, value: float) -> Condition:
        return VariableComparison(variable, "NumericEquals", value)

    @staticmethod
    def number_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "NumericEqualsPath", value)

    @staticmethod
    def number_less_than(variable: str, value: float) -> Condition:
        return VariableComparison(variable, "NumericLessThan", value)

    @staticmethod
    def number_less_than_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "NumericLessThanPath", value)

    @staticmethod
    def number_less_than_equals(variable: str, value: float) -> Condition:
        return VariableComparison(variable, "NumericLessThanEquals", value)

    @staticmethod
    def number_less_than_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "NumericLessThanEqualsPath", value)

    @staticmethod
    def number_greater_than(variable: str, value: float) -> Condition:
        return VariableComparison(variable, "NumericGreaterThan", value)

    @staticmethod
    def number_greater_than_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "NumericGreaterThanPath", value)

    @staticmethod
    def number_greater_than_equals(variable: str, value: float) -> Condition:
        return VariableComparison(variable, "NumericGreaterThanEquals", value)

    @staticmethod
    def number_greater_than_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "NumericGreaterThanEqualsPath", value)

    # Timestamps (ISO 8601 strings)

    @staticmethod
    def timestamp_equals(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampEquals", value)

    @staticmethod
    def timestamp_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampEqualsPath", value)

    @staticmethod
    def timestamp_less_than(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampLessThan", value)

    @staticmethod
    def timestamp_less_than_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampLessThanPath", value)

    @staticmethod
    def timestamp_less_than_equals(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampLessThanEquals", value)

    @staticmethod
    def timestamp_less_than_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampLessThanEqualsPath", value)

    @staticmethod
    def timestamp_greater_than(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampGreaterThan", value)

    @staticmethod
    def timestamp_greater_than_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampGreaterThanPath", value)

    @staticmethod
    def timestamp_greater_than_equals(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampGreaterThanEquals", value)

    @staticmethod
    def timestamp_greater_than_equals_json_path(variable: str, value: str) -> Condition:
        return VariableComparison(variable, "TimestampGreaterThanEqualsPath", value)

    # Combinators

    @staticmethod
    def and_(*conditions: Condition) -> Condition:
        return CompoundCondition("And", conditions)

    @staticmethod
    def or_(*conditions: Condition) -> Condition:
        return CompoundCondition("Or", conditions)

    @staticmethod
    def not_(condition: Condition) -> Condition:
        return NotCondition(condition)


class VariableComparison(Condition):
    """``{Variable: <path>, <operator>: <value>}``."""

    def __init__(self, variable: str, operator: str, value: Any) -> None:
        validate_variable(variable)
        self.variable = variable
        self.operator = operator
        self.value = value

    def render_condition(self) -> dict[str, Any]:
        return {"Variable": self.variable, self.operator: self.value}

    def __repr__(self) -> str:
        return f"VariableComparison({self.variable!r} {self.operator} {self.value!r})"


class CompoundCondition(Condition):
    """``And`` / ``Or`` over one or more inner conditions."""

    def __init__(self, operator: str, conditions: tuple[Condition, ...] | list[Condition]) -> None:
        if not conditions:
            raise ValueError("Must supply at least one inner condition for a logical combination")
        self.operator = operator
        self.conditions = list(conditions)

    def render_condition(self) -> dict[str, Any]:
        return {self.operator: [c.render_condition() for c in self.conditions]}


class NotCondition(Condition):
    def __init__(self, condition: Condition) -> None:
        self.condition = condition

    def render_condition(self) -> dict[str, Any]:
        return {"Not": self.condition.render_condition()}
