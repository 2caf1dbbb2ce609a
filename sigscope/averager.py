"""Running averages of repeated waveforms and of single rolling points."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from sigscope.channels import ANALOG_COUNT

DEFAULT_COUNT = 8


@dataclass
class _ChannelState:
    count: int = DEFAULT_COUNT
    vectors: deque[list[float]] = field(default_factory=deque)
    sums: list[float] = field(default_factory=list)
    sampling_period: float | None = None
    points: deque[tuple[float, float]] = field(default_factory=deque)
    point_sum: float = 0.0

    def clear(self) -> None:
        self.vectors.clear()
        self.sums = []
        self.points.clear()
        self.point_sum = 0.0


class Averager:
    """Averages the last N waveforms (or points) received on each analog channel."""

    def __init__(self, channels: int = ANALOG_COUNT) -> None:
        self._channels = [_ChannelState() for _ in range(channels)]

    def reset(self) -> None:
        """Forget everything collected on every channel."""
        for state in self._channels:
            state.clear()

    def set_count(self, chid: int, count: int) -> None:
        """Set how many waveforms or points channel ``chid`` averages over."""
        if count < 1:
            raise ValueError("average count must be at least 1")
        state = self._channels[chid]
        state.count = count
        while len(state.vectors) > count:
            oldest = state.vectors.popleft()
            state.sums = [s - o for s, o in zip(state.sums, oldest)]
        while len(state.points) > count:
            state.point_sum -= state.points.popleft()[1]

    def new_data_vector(
        self, chid: int, time_step: float, data: Iterable[tuple[float, float]]
    ) -> list[tuple[float, float]]:
        """Add a whole waveform and return it with each value replaced by the running mean.

        A waveform of a different length or sampling period than the previous one
        starts the average afresh.
        """
        state = self._channels[chid]
        samples = [(float(k), float(v)) for k, v in data]
        if len(samples) != len(state.sums) or time_step != state.sampling_period:
            state.sums = []
            state.vectors.clear()
        state.sampling_period = time_step
        if not state.sums:
            state.sums = [0.0] * len(samples)

        values = [v for _, v in samples]
        state.vectors.append(values)
        if len(state.vectors) == state.count + 1:
            oldest = state.vectors.popleft()
            state.sums = [s - o for s, o in zip(state.sums, oldest)]

        state.sums = [s + v for s, v in zip(state.sums, values)]
        depth = len(state.vectors)
        return [(key, total / depth) for (key, _), total in zip(samples, state.sums)]

    def new_data_point(
        self, chid: int, time: float, value: float, append: bool
    ) -> tuple[float, float]:
        """Add one point and return ``(mid_time, mean)`` of the points averaged.

        With ``append`` false the points collected so far are dropped first.
        """
        state = self._channels[chid]
        if not append:
            state.points.clear()
            state.point_sum = 0.0

        state.points.append((float(time), float(value)))
        if len(state.points) == state.count + 1:
            state.point_sum -= state.points.popleft()[1]
        state.point_sum += value

        mid_time = (state.points[0][0] + state.points[-1][0]) / 2.0
        return mid_time, state.point_sum / len(state.points)