"""Simulated input: data frames generated from expressions, as a device would send them."""

from __future__ import annotations

import math
import random
import struct

from sigscope.expressions import ExpressionEngine, ExpressionError, VariableExpressionParser

ROLLING_DEFAULTS = (
    "5*sin(2*Pi*t)",
    "2*cos(2*Pi*t) + 0.1*random()*sin(100*t)",
)
OSC_DEFAULTS = (
    "5*sin(2*Pi*1e3*t)",
    "2*cos(2*Pi*2e3*t + time)",
    'sin(time) // "time" counts seconds since start of simulation',
)


def _number(value: float, precision: int = 6) -> str:
    return f"{value:.{precision}g}"


def _float32(value: float) -> bytes:
    try:
        return struct.pack("<f", value)
    except OverflowError:
        return struct.pack("<f", math.copysign(math.inf, value))


def logic_test_frame() -> bytes:
    """A logic channel frame carrying the byte values 0..255 twice."""
    length = 256 * 2
    payload = bytes(i & 0xFF for i in range(length))
    return f"$$L,1,{length};U1".encode("ascii") + payload + b";"


def clear_all_frame() -> bytes:
    """The command frame that clears every channel."""
    return b"$$Sclearall;"


class _Generator:
    def __init__(self, defaults: tuple[str, ...], rng: random.Random | None) -> None:
        self.engine = ExpressionEngine(rng)
        self.engine.set_variable("t", 0.0)
        self.timestamp = 0.0
        self._evaluators: list[VariableExpressionParser] = []
        self.statuses: list[str] = []
        self.set_rows(len(defaults))
        for index, text in enumerate(defaults):
            self.set_expression(index, text)

    @property
    def channels(self) -> int:
        """Number of expression channels."""
        return len(self._evaluators)

    def set_rows(self, rows: int) -> None:
        """Grow or shrink the list of channels; new channels have no expression."""
        if rows < 1:
            raise ValueError("at least one channel is needed")
        del self._evaluators[rows:]
        del self.statuses[rows:]
        while len(self._evaluators) < rows:
            self._evaluators.append(VariableExpressionParser())
            self.statuses.append("Empty")

    def set_expression(self, index: int, text: str) -> None:
        """Set channel ``index`` to ``text``; raise ExpressionError if it is not usable.

        The channel's status becomes ``OK``, ``Empty`` or ``Error``.
        """
        evaluator = self._evaluators[index]
        try:
            evaluator.set_expression(self.engine, text)
        except ExpressionError:
            self.statuses[index] = "Empty" if not text else "Error"
            raise
        self.statuses[index] = "OK"


class RollingGenerator(_Generator):
    """Produces one point per channel per tick, with a running time ``t``."""

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(ROLLING_DEFAULTS, rng)

    def set_rows(self, rows: int) -> None:
        """Grow or shrink the list of channels; new channels have no expression."""
        super().set_rows(rows)

    def set_expression(self, index: int, text: str) -> None:
        """Set channel ``index`` to ``text``; raise ExpressionError if it is not usable."""
        super().set_expression(index, text)

    def reset_time(self) -> None:
        """Start the time ``t`` from zero again."""
        self.timestamp = 0.0

    def tick(self, interval: int, time_scale: float) -> bytes:
        """Advance by ``interval`` ms scaled by ``time_scale`` and return a point frame.

        A channel that cannot be evaluated is sent as ``-``.
        """
        self.timestamp += interval / 1000.0 * time_scale
        self.engine.set_variable("t", self.timestamp)
        fields = ["$$P" + _number(self.timestamp, 10)]
        for evaluator in self._evaluators:
            try:
                fields.append(_number(evaluator.evaluate(self.engine)))
            except ExpressionError:
                fields.append("-")
        return (",".join(fields) + ";").encode("ascii")


class OscGenerator(_Generator):
    """Produces whole waveforms: ``t`` runs over the samples, ``time`` over the ticks."""

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(OSC_DEFAULTS, rng)

    def _reset_engine_time(self) -> None:
        self.engine.set_variable("time", self.timestamp)

    def set_rows(self, rows: int) -> None:
        """Grow or shrink the list of channels; new channels have no expression."""
        if not hasattr(self, "_time_set"):
            self.engine.set_variable("time", 0.0)
            self._time_set = True
        super().set_rows(rows)

    def set_expression(self, index: int, text: str) -> None:
        """Set channel ``index`` to ``text``; raise ExpressionError if it is not usable."""
        super().set_expression(index, text)

    def restart(self) -> None:
        """Start the time ``time`` from zero again."""
        self.timestamp = 0.0

    def tick(self, interval: int, length: int, sample_rate_khz: float) -> list[bytes]:
        """Advance ``time`` by ``interval`` ms and return one waveform frame per channel.

        Each frame holds ``length`` little-endian float32 samples taken at
        ``sample_rate_khz``. A channel whose last sample cannot be evaluated
        sends no frame.
        """
        if length < 1:
            raise ValueError("waveform length must be at least 1")
        self.timestamp += interval / 1000.0
        fs = sample_rate_khz * 1000.0
        self.engine.set_variable("time", self.timestamp)

        frames: list[bytes] = []
        for number, evaluator in enumerate(self._evaluators, start=1):
            header = f"$$C{number},{_number(1.0 / fs)},{length};f4".encode("ascii")
            samples = bytearray()
            ok = False
            for i in range(length):
                self.engine.set_variable("t", i / fs)
                try:
                    value = evaluator.evaluate(self.engine)
                    ok = True
                except ExpressionError:
                    value = math.nan
                    ok = False
                samples += _float32(value)
            if ok:
                frames.append(header + bytes(samples) + b";")
        return frames