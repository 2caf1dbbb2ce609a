"""Pairing two channels into an XY curve."""

from __future__ import annotations

from typing import Iterable


def calculate_xy(
    in1: Iterable[tuple[float, float]],
    in2: Iterable[tuple[float, float]],
    remove_dc: bool,
) -> list[tuple[float, float, float]]:
    """Return ``(time, x, y)`` triples from two key-sorted channels.

    Channels of different length are cut to the time range they share. With
    ``remove_dc`` each channel's mean is subtracted from its values.
    """
    first = [(float(k), float(v)) for k, v in in1]
    second = [(float(k), float(v)) for k, v in in2]

    if len(first) != len(second):
        if not first or not second:
            raise ValueError("cannot pair an empty channel with a non-empty one")
        min_t = max(first[0][0], second[0][0])
        max_t = min(first[-1][0], second[-1][0])
        first = [p for p in first if min_t <= p[0] <= max_t]
        second = [p for p in second if min_t <= p[0] <= max_t]
        if len(first) != len(second):
            raise ValueError("channels have a different number of samples in their common range")

    dc1 = dc2 = 0.0
    if remove_dc and first:
        dc1 = sum(v for _, v in first) / len(first)
        dc2 = sum(v for _, v in second) / len(second)

    return [(k, x - dc1, y - dc2) for (k, x), (_, y) in zip(first, second)]