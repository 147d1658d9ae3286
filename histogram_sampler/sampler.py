"""
Sample values from a distribution approximated by a histogram.

The histogram is a list of ``(label, count)`` pairs produced by rounding
every original value to the nearest multiple of ``bin_width`` and counting
how many values landed on each label. A sampler built from it picks a bin
with probability proportional to its count, then a value uniformly from the
range of raw values that would have rounded to that bin's label.

Bias with small bin widths: the zero bin only holds ``[0, bin_width // 2)``,
so the histograms this is usually fed tend to under-count bin 0 and
over-count bin 1 by a few percentage points when the width is small. The
weights are sampled exactly as supplied.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from itertools import accumulate
from typing import Iterable, Iterator, Protocol

import numpy as np
from numpy.typing import NDArray


logger = logging.getLogger(__name__)

_INT64_MAX = int(np.iinfo(np.int64).max)


class InvalidInput(ValueError):
    """Raised when a histogram cannot be turned into a sampler."""


class RandomSource(Protocol):
    """Uniform integer source. ``numpy.random.Generator`` satisfies this."""

    def integers(self, low: int, high: int) -> int: ...


@dataclass(frozen=True, slots=True)
class Bin:
    label: int
    count: int

    def range(self, bin_width: int) -> tuple[int, int]:
        """Half-open range of raw values that round to this bin's label."""
        half = bin_width // 2
        if self.label == 0:
            return 0, half
        low = self.label - half
        return low, low + bin_width


def _check_int(name: str, value: object, minimum: int) -> int:
    # bool is an int subclass but never a meaningful label, count or width
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise InvalidInput(f"{name} must be an integer, got {value!r}.")
    if value < minimum:
        raise InvalidInput(f"{name} must be at least {minimum}, got {value}.")
    return int(value)


def _as_bin(entry: Bin | tuple[int, int]) -> Bin:
    if isinstance(entry, Bin):
        label, count = entry.label, entry.count
    else:
        try:
            label, count = entry
        except (TypeError, ValueError) as error:
            raise InvalidInput(f"Bins must be (label, count) pairs, got {entry!r}.") from error
    return Bin(label=_check_int("Bin label", label, 0), count=_check_int("Bin count", count, 0))


@dataclass(frozen=True, slots=True)
class HistogramSampler:
    """Immutable two-stage sampler over a histogram.

    Build it with :meth:`from_bins`. Bin labels are expected to be multiples
    of ``bin_width`` so that the bin ranges tile the non-negative integers;
    this is trusted, not checked. Duplicate labels are rejected, as are
    counted bins whose range reaches below zero.

    Values are drawn with numpy's int64 ``Generator.integers``, so the total
    weight and every bin's upper bound must fit in int64.
    """

    bins: tuple[Bin, ...]
    bin_width: int
    total_weight: int
    cumulative: tuple[int, ...]

    @classmethod
    def from_bins(
        cls, bins: Iterable[Bin | tuple[int, int]], bin_width: int
    ) -> HistogramSampler:
        bin_width = _check_int("Bin width", bin_width, 1)
        table = tuple(sorted((_as_bin(entry) for entry in bins), key=lambda b: b.label))
        if not table:
            raise InvalidInput("At least one bin is required.")

        for previous, current in zip(table, table[1:]):
            if previous.label == current.label:
                raise InvalidInput(f"Duplicate bin label {current.label}.")

        for entry in table:
            low, high = entry.range(bin_width)
            if high > _INT64_MAX:
                raise InvalidInput(f"Bin {entry.label} range exceeds the int64 limit.")
            if not entry.count:
                continue
            if high <= low:
                raise InvalidInput(
                    f"Bin {entry.label} has count {entry.count} but an empty range "
                    f"for bin width {bin_width}."
                )
            if low < 0:
                raise InvalidInput(
                    f"Bin {entry.label} reaches below zero for bin width {bin_width}."
                )

        cumulative = tuple(accumulate(entry.count for entry in table))
        total_weight = cumulative[-1]
        if total_weight == 0:
            raise InvalidInput("Total weight must be positive; every bin has count 0.")
        if total_weight > _INT64_MAX:
            raise InvalidInput(f"Total weight {total_weight} exceeds the int64 limit.")

        logger.debug(
            "built sampler: %d bins, width %d, total weight %d",
            len(table),
            bin_width,
            total_weight,
        )
        return cls(
            bins=table,
            bin_width=bin_width,
            total_weight=total_weight,
            cumulative=cumulative,
        )

    @property
    def value_limit(self) -> int:
        """Exclusive upper bound on every value :meth:`sample` can return."""
        return max(
            entry.range(self.bin_width)[1] for entry in self.bins if entry.count > 0
        )

    def select_bin(self, r: int) -> Bin:
        """Stage 1: the bin whose cumulative count first exceeds ``r``."""
        if not 0 <= r < self.total_weight:
            raise IndexError(f"Draw {r} outside [0, {self.total_weight}).")
        return self.bins[bisect_right(self.cumulative, r)]

    def sample(self, rng: RandomSource) -> int:
        chosen = self.select_bin(int(rng.integers(0, self.total_weight)))
        low, high = chosen.range(self.bin_width)
        return int(rng.integers(low, high))

    def samples(self, rng: RandomSource, n: int | None = None) -> Iterator[int]:
        """Yield ``n`` samples, or an endless stream when ``n`` is None."""
        drawn = 0
        while n is None or drawn < n:
            yield self.sample(rng)
            drawn += 1

    def sample_array(self, rng: np.random.Generator, size: int) -> NDArray[np.int64]:
        """Vectorised draw with the same distribution as repeated :meth:`sample`.

        Draws all bin selections first and then all values, so the sequence
        differs from calling :meth:`sample` ``size`` times on the same
        generator.
        """
        if size < 0:
            raise ValueError("Size must be non-negative.")
        cumulative = np.asarray(self.cumulative, dtype=np.int64)
        ranges = np.array([entry.range(self.bin_width) for entry in self.bins], dtype=np.int64)

        draws = rng.integers(0, self.total_weight, size=size)
        indices = np.searchsorted(cumulative, draws, side="right")
        return rng.integers(ranges[indices, 0], ranges[indices, 1])

    def probabilities(self) -> dict[int, float]:
        return {entry.label: entry.count / self.total_weight for entry in self.bins}
