"""Time amounts used by Wait, Retry and Task states."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Duration:
    """A non-negative length of time, stored in milliseconds.

    Example:
        >>> Duration.minutes(2).to_seconds()
        120
    """

    millis_amount: int

    def __post_init__(self) -> None:
        if self.millis_amount < 0:
            raise ValueError(f"Duration amounts cannot be negative. Received: {self.millis_amount}ms")

    @classmethod
    def millis(cls, amount: float) -> Duration:
        return cls(int(amount))

    @classmethod
    def seconds(cls, amount: float) -> Duration:
        return cls(int(amount * 1000))

    @classmethod
    def minutes(cls, amount: float) -> Duration:
        return cls(int(amount * 60_000))

    @classmethod
    def hours(cls, amount: float) -> Duration:
        return cls(int(amount * 3_600_000))

    @classmethod
    def days(cls, amount: float) -> Duration:
        return cls(int(amount * 86_400_000))

    def to_millis(self) -> int:
        return self.millis_amount

    def to_seconds(self) -> int:
        """Whole seconds.

        Raises:
            ValueError: If the duration is not a whole number of seconds.
        """
        seconds, remainder = divmod(self.millis_amount, 1000)
        if remainder:
            raise ValueError(f"'{self.millis_amount}ms' cannot be converted into a whole number of seconds.")
        return seconds

    def __str__(self) -> str:
        return f"{self.millis_amount}ms"


@dataclass(frozen=True)
class Timeout:
    """Task timeout given either as a fixed duration or as a JSON path.

    Use ``Timeout.duration()`` or ``Timeout.at()`` rather than the constructor.
    """

    seconds: int | None = None
    path: str | None = None

    def __post_init__(self) -> None:
        if (self.seconds is None) == (self.path is None):
            raise ValueError("Timeout needs exactly one of seconds or path")

    @classmethod
    def duration(cls, duration: Duration) -> Timeout:
        return cls(seconds=duration.to_seconds())

    @classmethod
    def at(cls, path: str) -> Timeout:
        """Read the timeout in seconds from the state input."""
        return cls(path=path)
