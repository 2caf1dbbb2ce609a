"""Math channels: a sample-by-sample operation on two scaled operands."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from sigscope.channels import ANALOG_COUNT, MATH_COUNT

Samples = Sequence[tuple[float, float]]


class MathOperation(IntEnum):
    ADD = 0
    SUBTRACT = 1
    MULTIPLY = 2
    DIVIDE = 3


class MathError(ValueError):
    """The operands of a math channel cannot be combined."""


@dataclass(frozen=True)
class MathResult:
    """Samples computed for a math channel and the channel id they belong to."""

    channel: int
    data: list[tuple[float, float]]


def _divide(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


@dataclass
class _MathSlot:
    operation: MathOperation = MathOperation.ADD
    first: list[tuple[float, float]] | None = None
    second: list[tuple[float, float]] | None = None
    first_is_const: bool = False
    second_is_const: bool = False
    scale_first: float = 1.0
    scale_second: float = 1.0

    def clear(self) -> None:
        self.first = None
        self.second = None


class PlotMath:
    """Collects both operands of each math channel and computes the result."""

    def __init__(self) -> None:
        self._slots = [_MathSlot() for _ in range(MATH_COUNT)]

    def add_math_data(self, math_number: int, is_first: bool, data: Samples | None) -> MathResult | None:
        """Supply one operand of math channel ``math_number`` (counted from 0).

        Returns the result once every needed operand is present, otherwise None.
        Raises MathError when two channel operands differ in length.
        """
        slot = self._slots[math_number]
        samples = None if data is None else [(float(k), float(v)) for k, v in data]
        if is_first:
            slot.first = samples
        else:
            slot.second = samples

        if slot.first is None and not slot.first_is_const:
            return None
        if slot.second is None and not slot.second_is_const:
            return None

        if not slot.first_is_const and not slot.second_is_const:
            if len(slot.first) != len(slot.second):
                slot.clear()
                raise MathError("Channels have different length, can not use math")

        if not slot.first_is_const:
            keys_from = slot.first
        elif not slot.second_is_const:
            keys_from = slot.second
        else:
            keys_from = slot.first if slot.first is not None else slot.second
        if keys_from is None:
            return None

        result = []
        for i, (key, _) in enumerate(keys_from):
            a = (1.0 if slot.first_is_const else slot.first[i][1]) * slot.scale_first
            b = (1.0 if slot.second_is_const else slot.second[i][1]) * slot.scale_second
            if slot.operation is MathOperation.ADD:
                value = a + b
            elif slot.operation is MathOperation.SUBTRACT:
                value = a - b
            elif slot.operation is MathOperation.MULTIPLY:
                value = a * b
            else:
                value = _divide(a, b)
            result.append((key, value))

        slot.clear()
        return MathResult(ANALOG_COUNT + math_number, result)

    def clear_math(self, math: int) -> None:
        """Drop the operands collected for math channel ``math`` (counted from 1)."""
        self._slots[math - 1].clear()

    def reset_math(
        self,
        math_number: int,
        mode: MathOperation,
        in1: Samples | None,
        in2: Samples | None,
        first_is_const: bool,
        second_is_const: bool,
        scale_first: float,
        scale_second: float,
    ) -> MathResult | None:
        """Reconfigure math channel ``math_number`` (counted from 1) and compute it."""
        slot = self._slots[math_number - 1]
        slot.operation = MathOperation(mode)
        slot.second = None
        slot.first_is_const = first_is_const
        slot.second_is_const = second_is_const
        slot.scale_first = scale_first
        slot.scale_second = scale_second
        slot.first = None if in1 is None else [(float(k), float(v)) for k, v in in1]
        return self.add_math_data(math_number - 1, False, in2)