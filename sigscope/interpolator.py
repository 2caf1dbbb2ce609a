"""Upsampling of a channel by zero stuffing and a low-pass FIR filter."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from os import PathLike
from pathlib import Path
from typing import Iterable, Sequence

# Beyond this many samples per upsampling step interpolation is not worth it.
_MAX_SAMPLES = 2000


def fir_filter(x: Sequence[float], h: Sequence[float]) -> list[float]:
    """Convolve ``x`` with ``h``, keeping only outputs where ``h`` fully overlaps ``x``.

    The first and last ``len(h) - 1`` transient samples are dropped, so the
    result has ``len(x) - len(h) + 1`` samples.
    """
    x = list(x)
    h = list(h)
    m = len(h)
    return [
        sum(a * b for a, b in zip(reversed(x[n - m + 1 : n + 1]), h)) for n in range(m - 1, len(x))
    ]


def _to_float(field: str) -> float:
    try:
        return float(field.strip())
    except ValueError:
        return 0.0


class Interpolator:
    """Smooths a channel for display by upsampling it through a FIR filter."""

    def __init__(self) -> None:
        self.coefficients: list[float] = []
        self.upsampling = 8

    def load_filter(self, coefficients: Iterable[float], upsampling: int) -> None:
        """Use ``coefficients`` as the low-pass filter for ``upsampling``-times upsampling."""
        if upsampling < 1:
            raise ValueError("upsampling must be at least 1")
        self.upsampling = upsampling
        self.coefficients = [float(c) for c in coefficients]

    def load_filter_file(self, path: str | PathLike[str], upsampling: int) -> None:
        """Load comma-separated coefficients; a name without a dot gets ``.csv`` added.

        Fields that are not numbers count as zero.
        """
        self.load_filter([], upsampling)
        path = Path(path)
        if "." not in path.name:
            path = path.with_name(path.name + ".csv")
        text = path.read_text()
        self.coefficients = [_to_float(field) for field in text.split(",")]

    def interpolate(
        self, data: Iterable[tuple[float, float]], visible_range: tuple[float, float]
    ) -> list[tuple[float, float]]:
        """Return the upsampled part of key-sorted ``data`` around ``visible_range``.

        When too few or too many samples fall in that part, a copy of ``data``
        is returned unchanged.
        """
        if not self.coefficients:
            raise ValueError("no interpolation filter loaded")
        samples = [(float(k), float(v)) for k, v in data]
        if len(samples) < 2:
            raise ValueError("at least two samples are needed")

        keys = [k for k, _ in samples]
        up = self.upsampling
        m = len(self.coefficients) - 1
        half = m // 2
        period = (keys[-1] - keys[0]) / (len(samples) - 1) / up

        lower, upper = visible_range
        sample_padding = half // up
        time_padding = (upper - lower) / 2

        begin = bisect_left(keys, lower - time_padding)
        if begin > 0:
            begin -= 1
        begin = max(0, begin - sample_padding)
        end = bisect_right(keys, upper + time_padding)
        if end < len(keys):
            end += 1
        end = min(len(keys), end + sample_padding)

        stuffed: list[float] = []
        for _, value in samples[begin:end]:
            stuffed.append(value)
            stuffed.extend([0.0] * (up - 1))

        if len(stuffed) < len(self.coefficients) or len(stuffed) > _MAX_SAMPLES * up:
            return list(samples)

        filtered = fir_filter(stuffed, self.coefficients)
        return [
            (keys[begin + (i + half) // up] + ((i + half) % up) * period, value * up)
            for i, value in enumerate(filtered)
        ]