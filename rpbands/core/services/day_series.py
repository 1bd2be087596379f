"""Daily normalisation of time-stamped series with forward-fill lookup."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from rpbands.core.models.series import RawPoint

MS_PER_DAY = 86_400_000


def day_key(timestamp_ms: int) -> int:
    """Truncate an epoch-millisecond timestamp to its UTC midnight."""

    return timestamp_ms - timestamp_ms % MS_PER_DAY


def lookup_nearest_or_exact(
    series: Mapping[int, float],
    sorted_keys: Sequence[int],
    timestamp_ms: int,
) -> float | None:
    """Return the value for the day of ``timestamp_ms`` or the nearest earlier day.

    ``None`` when the timestamp predates every key.
    """

    target = day_key(timestamp_ms)
    exact = series.get(target)
    if exact is not None:
        return exact

    index = bisect_right(sorted_keys, target) - 1
    if index < 0:
        return None
    return series.get(sorted_keys[index])


@dataclass(frozen=True)
class DayIndexedSeries:
    """Read-only mapping of UTC day-key to value, with its ascending key index."""

    values: Mapping[int, float]
    sorted_keys: tuple[int, ...]

    @classmethod
    def build(cls, points: Iterable[RawPoint]) -> DayIndexedSeries:
        """Normalise ``points`` to one value per day; later observations win."""

        by_day: dict[int, float] = {}
        for point in points:
            by_day[day_key(point.timestamp_ms)] = point.value
        return cls(values=MappingProxyType(by_day), sorted_keys=tuple(sorted(by_day)))

    def lookup(self, timestamp_ms: int) -> float | None:
        return lookup_nearest_or_exact(self.values, self.sorted_keys, timestamp_ms)

    def latest(self) -> tuple[int, float] | None:
        """Return ``(day_key, value)`` for the most recent day, if any."""

        if not self.sorted_keys:
            return None
        last = self.sorted_keys[-1]
        return last, self.values[last]

    @property
    def first_day(self) -> int | None:
        return self.sorted_keys[0] if self.sorted_keys else None

    @property
    def last_day(self) -> int | None:
        return self.sorted_keys[-1] if self.sorted_keys else None

    def __len__(self) -> int:
        return len(self.sorted_keys)

    def __contains__(self, timestamp_ms: object) -> bool:
        return isinstance(timestamp_ms, int) and day_key(timestamp_ms) in self.values


def build_day_series(points: Iterable[RawPoint] | None) -> DayIndexedSeries | None:
    """Build a series from an optional feed payload; absence stays absence."""

    if not points:
        return None
    series = DayIndexedSeries.build(points)
    return series if len(series) else None


__all__ = [
    "DayIndexedSeries",
    "MS_PER_DAY",
    "build_day_series",
    "day_key",
    "lookup_nearest_or_exact",
]
