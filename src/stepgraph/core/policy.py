"""Retry and Catch rules attached to states.

RetryProps and CatchProps describe how a state reacts to errors raised
while it runs:

- Retry: re-run the state with an interval that grows by ``backoff_rate``
- Catch: route the error output to a handler state

Rules added programmatically are evaluated before rules declared inline in
a raw state declaration; ``merge_rules`` is the one place that order is
defined.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from stepgraph.core.duration import Duration
from stepgraph.core.fields import render_json_path
from stepgraph.core.types import Errors, JitterType

if TYPE_CHECKING:
    from stepgraph.core.states.state import State

T = TypeVar("T")


def _check_errors(errors: list[str]) -> None:
    if Errors.ALL in errors and len(errors) > 1:
        raise ValueError(f"{Errors.ALL} must appear alone in an error list")


@dataclass
class RetryProps:
    """Retry policy for a state.

    Attributes:
        errors: Error names this rule matches. Defaults to ``States.ALL``.
        interval: Delay before the first retry.
        max_attempts: How many times to retry. 0 disables retries for these errors.
        backoff_rate: Multiplier applied to the interval after each attempt.
            E.g., 2.0 means delays are 1s, 2s, 4s, 8s...
        max_delay: Upper bound on the computed interval.
        jitter_strategy: Randomization applied to the interval.

    Example:
        # Retry throttling up to 5 times with exponential backoff
        retry = RetryProps(
            errors=["Lambda.TooManyRequestsException"],
            interval=Duration.seconds(1),
            max_attempts=5,
            backoff_rate=2.0,
        )
    """

    errors: list[str] = field(default_factory=lambda: [Errors.ALL])
    interval: Duration | None = None
    max_attempts: int | None = None
    backoff_rate: float | None = None
    max_delay: Duration | None = None
    jitter_strategy: JitterType | None = None

    def __post_init__(self) -> None:
        """Validate retry configuration."""
        _check_errors(self.errors)

        if self.max_attempts is not None and self.max_attempts < 0:
            raise ValueError("max_attempts cannot be negative")

        if self.backoff_rate is not None and self.backoff_rate < 1:
            raise ValueError("backoff_rate must be >= 1")

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"ErrorEquals": list(self.errors)}
        if self.interval is not None:
            rendered["IntervalSeconds"] = self.interval.to_seconds()
        if self.max_attempts is not None:
            rendered["MaxAttempts"] = self.max_attempts
        if self.backoff_rate is not None:
            rendered["BackoffRate"] = self.backoff_rate
        if self.max_delay is not None:
            rendered["MaxDelaySeconds"] = self.max_delay.to_seconds()
        if self.jitter_strategy is not None:
            rendered["JitterStrategy"] = self.jitter_strategy.value
        return rendered


@dataclass
class CatchProps:
    """Which errors a catch handler receives, and where the error goes.

    Attributes:
        errors: Error names this rule matches. Defaults to ``States.ALL``.
        result_path: Where to place the error in the handler's input.
            ``JsonPath.DISCARD`` passes the original input through.
    """

    errors: list[str] = field(default_factory=lambda: [Errors.ALL])
    result_path: str | None = None

    def __post_init__(self) -> None:
        _check_errors(self.errors)


@dataclass
class CatchRule:
    """A CatchProps bound to its handler state."""

    handler: State = field(repr=False)
    props: CatchProps = field(default_factory=CatchProps)

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            "ErrorEquals": list(self.props.errors),
            "Next": self.handler.state_name,
        }
        if self.props.result_path is not None:
            rendered["ResultPath"] = render_json_path(self.props.result_path)
        return rendered


def merge_rules(programmatic: list[T], declared: list[T]) -> list[T]:
    """Combine programmatic rules with rules from a raw declaration.

    Pure: neither input is modified. Programmatic rules come first so they
    are evaluated before the declared ones.
    """
    return [*programmatic, *declared]
