import pytest

from sigscope.xymode import calculate_xy


def test_equal_length_pairs_values():
    a = [(0.0, 1.0), (1.0, 2.0), (2.0, 3.0)]
    b = [(0.0, -1.0), (1.0, -2.0), (2.0, -3.0)]
    result = calculate_xy(a, b, False)
    assert result == [(0.0, 1.0, -1.0), (1.0, 2.0, -2.0), (2.0, 3.0, -3.0)]


def test_remove_dc_centres_both_axes():
    a = [(0.0, 5.0), (1.0, 7.0), (2.0, 9.0), (3.0, 3.0)]
    b = [(0.0, 1.0), (1.0, 4.0), (2.0, 2.0), (3.0, 8.0)]
    result = calculate_xy(a, b, True)
    assert sum(x for _, x, _ in result) == pytest.approx(0.0)
    assert sum(y for _, _, y in result) == pytest.approx(0.0)
    assert [t for t, _, _ in result] == [0.0, 1.0, 2.0, 3.0]


def test_remove_dc_keeps_differences():
    a = [(0.0, 5.0), (1.0, 7.0)]
    b = [(0.0, 1.0), (1.0, 4.0)]
    result = calculate_xy(a, b, True)
    assert result[1][1] - result[0][1] == pytest.approx(7.0 - 5.0)
    assert result[1][2] - result[0][2] == pytest.approx(4.0 - 1.0)


def test_different_lengths_cut_to_common_range():
    a = [(0.0, 0.0), (1.0, 10.0), (2.0, 20.0), (3.0, 30.0)]
    b = [(1.0, 1.0), (2.0, 2.0), (3.0, 3.0)]
    result = calculate_xy(a, b, False)
    assert result == [(1.0, 10.0, 1.0), (2.0, 20.0, 2.0), (3.0, 30.0, 3.0)]


def test_mismatch_after_cut_raises():
    a = [(0.0, 0.0), (0.5, 1.0), (1.0, 2.0)]
    b = [(0.0, 0.0), (1.0, 1.0)]
    with pytest.raises(ValueError):
        calculate_xy(a, b, False)


def test_empty_channels_give_empty_curve():
    assert calculate_xy([], [], True) == []