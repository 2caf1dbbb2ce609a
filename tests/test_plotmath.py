import math

import pytest

from sigscope.channels import ANALOG_COUNT
from sigscope.plotmath import MathError, MathOperation, PlotMath

A = [(0.0, 1.0), (1.0, 2.0), (2.0, 4.0)]
B = [(0.0, 3.0), (1.0, -1.0), (2.0, 0.5)]


def _values(result):
    return [v for _, v in result.data]


@pytest.mark.parametrize(
    "op, combine",
    [
        (MathOperation.ADD, lambda a, b: a + b),
        (MathOperation.SUBTRACT, lambda a, b: a - b),
        (MathOperation.MULTIPLY, lambda a, b: a * b),
        (MathOperation.DIVIDE, lambda a, b: a / b),
    ],
)
def test_operations_with_scales(op, combine):
    pm = PlotMath()
    result = pm.reset_math(1, op, A, B, False, False, 2.0, 3.0)
    expected = [combine(a * 2.0, b * 3.0) for (_, a), (_, b) in zip(A, B)]
    assert _values(result) == pytest.approx(expected)
    assert [k for k, _ in result.data] == [k for k, _ in A]


def test_result_channel_follows_math_number():
    pm = PlotMath()
    assert pm.reset_math(1, MathOperation.ADD, A, B, False, False, 1.0, 1.0).channel == ANALOG_COUNT
    assert pm.reset_math(3, MathOperation.ADD, A, B, False, False, 1.0, 1.0).channel == ANALOG_COUNT + 2


def test_constant_second_operand():
    pm = PlotMath()
    result = pm.reset_math(1, MathOperation.ADD, A, None, False, True, 1.0, 5.0)
    assert _values(result) == pytest.approx([v + 5.0 for _, v in A])


def test_constant_first_operand_takes_keys_from_second():
    pm = PlotMath()
    result = pm.reset_math(2, MathOperation.SUBTRACT, None, B, True, False, 10.0, 1.0)
    assert result.data == pytest.approx([(k, 10.0 - v) for k, v in B])


def test_waits_for_both_operands():
    pm = PlotMath()
    pm.reset_math(1, MathOperation.MULTIPLY, None, None, False, False, 1.0, 1.0)
    assert pm.add_math_data(0, True, A) is None
    result = pm.add_math_data(0, False, B)
    assert _values(result) == pytest.approx([a * b for (_, a), (_, b) in zip(A, B)])


def test_operands_are_consumed_after_result():
    pm = PlotMath()
    pm.reset_math(1, MathOperation.ADD, A, B, False, False, 1.0, 1.0)
    assert pm.add_math_data(0, True, A) is None


def test_different_lengths_raise_and_clear():
    pm = PlotMath()
    with pytest.raises(MathError):
        pm.reset_math(1, MathOperation.ADD, A, B[:2], False, False, 1.0, 1.0)
    assert pm.add_math_data(0, False, B) is None


def test_clear_math_drops_pending_operand():
    pm = PlotMath()
    pm.reset_math(1, MathOperation.ADD, None, None, False, False, 1.0, 1.0)
    pm.add_math_data(0, True, A)
    pm.clear_math(1)
    assert pm.add_math_data(0, False, B) is None


def test_division_by_zero_gives_infinity():
    pm = PlotMath()
    result = pm.reset_math(1, MathOperation.DIVIDE, [(0.0, 1.0), (1.0, 0.0)], [(0.0, 0.0), (1.0, 0.0)],
                           False, False, 1.0, 1.0)
    values = _values(result)
    assert values[0] == math.inf
    assert math.isnan(values[1])


def test_invalid_math_number_raises():
    with pytest.raises(IndexError):
        PlotMath().clear_math(10)