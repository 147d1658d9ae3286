from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Mapping

from .sampler import InvalidInput


_SEPARATOR = re.compile(r"[\s,]+")


def parse_bins(text: str) -> list[tuple[int, int]]:
    """Read ``label count`` lines (whitespace or comma separated).

    Blank lines and ``#`` comments are skipped.
    """
    bins: list[tuple[int, int]] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        fields = _SEPARATOR.split(line)
        if len(fields) != 2:
            raise InvalidInput(f"Line {lineno}: expected 'label count', got {line!r}.")
        try:
            label, count = int(fields[0]), int(fields[1])
        except ValueError as error:
            raise InvalidInput(f"Line {lineno}: non-integer field in {line!r}.") from error
        bins.append((label, count))
    return bins


def rebin(values: Iterable[int], bin_width: int) -> dict[int, int]:
    """Round each value to the nearest multiple of ``bin_width`` and count."""
    if bin_width < 1:
        raise InvalidInput("Bin width must be positive.")
    half = bin_width // 2
    counts = Counter(bin_width * ((int(value) + half) // bin_width) for value in values)
    return dict(sorted(counts.items()))


def bin_proportions(bins: Mapping[int, int] | Iterable[tuple[int, int]]) -> dict[int, float]:
    pairs = list(bins.items()) if isinstance(bins, Mapping) else list(bins)
    total = sum(count for _, count in pairs)
    if total == 0:
        raise InvalidInput("Cannot normalise a histogram with no observations.")
    return {label: count / total for label, count in pairs}


def compare_histograms(
    expected: Mapping[int, int] | Iterable[tuple[int, int]],
    observed: Mapping[int, int] | Iterable[tuple[int, int]],
) -> dict[int, float]:
    """Per-label difference of proportions, observed minus expected."""
    expected_props = bin_proportions(expected)
    observed_props = bin_proportions(observed)
    labels = sorted(set(expected_props) | set(observed_props))
    return {
        label: observed_props.get(label, 0.0) - expected_props.get(label, 0.0)
        for label in labels
    }
