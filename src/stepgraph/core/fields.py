"""JSON path references, intrinsic functions and payload rendering.

Values that should be resolved from the execution input are represented as
``JsonPathToken`` instances. A token is still a ``str`` holding the path, so
it can be used anywhere a path string is accepted; ``render_object`` uses
the type to decide which keys get the ``.$`` suffix.

Example:
    >>> render_object({"id": JsonPath.string_at("$.order.id"), "kind": "order"})
    {'id.$': '$.order.id', 'kind': 'order'}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

INTRINSIC_PREFIX = "States."

INTRINSIC_FUNCTIONS = (
    "States.Array",
    "States.ArrayPartition",
    "States.ArrayContains",
    "States.ArrayRange",
    "States.ArrayGetItem",
    "States.ArrayLength",
    "States.ArrayUnique",
    "States.Base64Encode",
    "States.Base64Decode",
    "States.Hash",
    "States.JsonMerge",
    "States.MathRandom",
    "States.MathAdd",
    "States.StringSplit",
    "States.UUID",
    "States.Format",
    "States.StringToJson",
    "States.JsonToString",
)


class JsonPathToken(str):
    """A string that refers to a location in the state input or context."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"JsonPathToken({str.__repr__(self)})"


def is_json_path(value: Any) -> bool:
    """True for strings that read from the input/context object."""
    if not isinstance(value, str):
        return False
    return value in ("$", "$$") or value.startswith(("$.", "$$.", "$["))


def is_intrinsic(value: Any) -> bool:
    """True for strings that call a known intrinsic function."""
    return isinstance(value, str) and any(value.startswith(f"{fn}(") for fn in INTRINSIC_FUNCTIONS)


def validate_json_path(path: str) -> None:
    """Raise ValueError unless ``path`` is a JSON path or intrinsic call."""
    if not (is_json_path(path) or is_intrinsic(path)):
        raise ValueError(
            "JSON path values must be exactly '$', '$$', start with '$.', start with '$$.', "
            f"start with '$[', or start with an intrinsic function. Received: {path}"
        )


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("'", "\\'")


def _render_argument(value: Any) -> str:
    if isinstance(value, JsonPathToken):
        return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return f"'{_escape(value)}'"
    if value is None:
        return "null"
    return f"'{_escape(json.dumps(value, separators=(',', ':')))}'"


def _intrinsic(name: str, *args: Any) -> JsonPathToken:
    return JsonPathToken(f"{INTRINSIC_PREFIX}{name}({', '.join(_render_argument(a) for a in args)})")


class JsonPath:
    """Factory for path references and intrinsic function calls."""

    DISCARD = "DISCARD"

    entire_payload = JsonPathToken("$")
    entire_context = JsonPathToken("$$")
    task_token = JsonPathToken("$$.Task.Token")
    execution_id = JsonPathToken("$$.Execution.Id")
    state_machine_name = JsonPathToken("$$.StateMachine.Name")

    @staticmethod
    def _at(path: str) -> JsonPathToken:
        validate_json_path(path)
        return JsonPathToken(path)

    @staticmethod
    def string_at(path: str) -> JsonPathToken:
        return JsonPath._at(path)

    @staticmethod
    def number_at(path: str) -> JsonPathToken:
        return JsonPath._at(path)

    @staticmethod
    def list_at(path: str) -> JsonPathToken:
        return JsonPath._at(path)

    @staticmethod
    def object_at(path: str) -> JsonPathToken:
        return JsonPath._at(path)

    @staticmethod
    def is_encoded_json_path(value: Any) -> bool:
        return isinstance(value, JsonPathToken)

    # Intrinsic functions

    @staticmethod
    def format(template: str, *values: Any) -> JsonPathToken:
        """``States.Format``; each ``{}`` in the template takes the next value."""
        placeholders = template.count("{}")
        if placeholders != len(values):
            raise ValueError(
                f"Format template has {placeholders} placeholders but {len(values)} values were given"
            )
        return _intrinsic("Format", template, *values)

    @staticmethod
    def json_to_string(value: Any) -> JsonPathToken:
        return _intrinsic("JsonToString", value)

    @staticmethod
    def string_to_json(value: Any) -> JsonPathToken:
        return _intrinsic("StringToJson", value)

    @staticmethod
    def array(*values: Any) -> JsonPathToken:
        return _intrinsic("Array", *values)

    @staticmethod
    def array_partition(array: Any, chunk_size: Any) -> JsonPathToken:
        return _intrinsic("ArrayPartition", array, chunk_size)

    @staticmethod
    def array_contains(array: Any, value: Any) -> JsonPathToken:
        return _intrinsic("ArrayContains", array, value)

    @staticmethod
    def array_range(start: Any, end: Any, step: Any) -> JsonPathToken:
        return _intrinsic("ArrayRange", start, end, step)

    @staticmethod
    def array_get_item(array: Any, index: Any) -> JsonPathToken:
        return _intrinsic("ArrayGetItem", array, index)

    @staticmethod
    def array_length(array: Any) -> JsonPathToken:
        return _intrinsic("ArrayLength", array)

    @staticmethod
    def array_unique(array: Any) -> JsonPathToken:
        return _intrinsic("ArrayUnique", array)

    @staticmethod
    def base64_encode(value: Any) -> JsonPathToken:
        return _intrinsic("Base64Encode", value)

    @staticmethod
    def base64_decode(value: Any) -> JsonPathToken:
        return _intrinsic("Base64Decode", value)

    @staticmethod
    def hash(data: Any, algorithm: str) -> JsonPathToken:
        return _intrinsic("Hash", data, algorithm)

    @staticmethod
    def json_merge(first: Any, second: Any) -> JsonPathToken:
        # Deep merge is not supported by the service, so the flag is always false.
        return _intrinsic("JsonMerge", first, second, False)

    @staticmethod
    def math_random(start: Any, end: Any) -> JsonPathToken:
        return _intrinsic("MathRandom", start, end)

    @staticmethod
    def math_add(first: Any, second: Any) -> JsonPathToken:
        return _intrinsic("MathAdd", first, second)

    @staticmethod
    def string_split(value: Any, delimiter: str) -> JsonPathToken:
        return _intrinsic("StringSplit", value, delimiter)

    @staticmethod
    def uuid() -> JsonPathToken:
        return _intrinsic("UUID")


def render_json_path(path: str | None) -> str | None:
    """Map ``JsonPath.DISCARD`` to JSON null; pass other values through."""
    if path == JsonPath.DISCARD:
        return None
    return path


def render_path_fields(fields: dict[str, str | None]) -> dict[str, str | None]:
    """Render the set path fields (InputPath, ResultPath, ...) of a state."""
    return {key: render_json_path(value) for key, value in fields.items() if value is not None}


def render_object(obj: dict[str, Any] | None) -> dict[str, Any] | None:
    """Render a payload template, suffixing keys whose value is a path with ``.$``.

    Nested dicts are rendered recursively. A list containing paths is
    turned into a ``States.Array(...)`` call.
    """
    if obj is None:
        return None

    rendered: dict[str, Any] = {}
    for key, value in obj.items():
        if isinstance(value, JsonPathToken):
            rendered[f"{key}.$"] = str(value)
        elif isinstance(value, dict):
            rendered[key] = render_object(value)
        elif isinstance(value, list):
            if any(isinstance(item, JsonPathToken) for item in value):
                rendered[f"{key}.$"] = str(JsonPath.array(*value))
            else:
                rendered[key] = [render_object(item) if isinstance(item, dict) else item for item in value]
        else:
            rendered[key] = value
    return rendered


def find_referenced_paths(obj: Any) -> set[str]:
    """All path tokens used anywhere in a payload template."""
    found: set[str] = set()
    pending = [obj]
    while pending:
        value = pending.pop()
        if isinstance(value, JsonPathToken):
            found.add(str(value))
        elif isinstance(value, dict):
            pending.extend(value.values())
        elif isinstance(value, list):
            pending.extend(value)
    return found


def contains_task_token(obj: Any) -> bool:
    """True if the payload passes the task token (or the whole context) along."""
    return any(path.startswith("$$.Task") or path == "$$" for path in find_referenced_paths(obj))


@dataclass(frozen=True)
class Result:
    """A literal result for a Pass state."""

    value: Any

    @classmethod
    def from_string(cls, value: str) -> Result:
        return cls(value)

    @classmethod
    def from_number(cls, value: float) -> Result:
        return cls(value)

    @classmethod
    def from_boolean(cls, value: bool) -> Result:
        return cls(value)

    @classmethod
    def from_object(cls, value: dict[str, Any]) -> Result:
        return cls(value)

    @classmethod
    def from_array(cls, value: list[Any]) -> Result:
        return cls(value)


@dataclass(frozen=True)
class TaskInput:
    """Payload handed to a task integration.

    Attributes:
        value: A payload template (dict), literal text, or a path token.
    """

    value: Any

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> TaskInput:
        return cls(obj)

    @classmethod
    def from_text(cls, text: str) -> TaskInput:
        return cls(text)

    @classmethod
    def from_json_path_at(cls, path: str) -> TaskInput:
        return cls(JsonPath.string_at(path))
