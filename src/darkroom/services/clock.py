"""Time and randomness sources."""

import random
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current instant and of uniform random numbers."""

    def now(self) -> datetime:
        """Return the current aware UTC instant."""

    def random(self) -> float:
        """Return a float in [0, 1)."""


@dataclass
class SystemClock(Clock):
    """Wall clock backed by the process random generator."""

    def now(self) -> datetime:
        return datetime.now(tz=UTC)

    def random(self) -> float:
        return random.random()  # noqa: S311
