import pytest

from sigscope.averager import Averager


def _wave(values, step=0.1):
    return [(i * step, v) for i, v in enumerate(values)]


def test_single_vector_is_returned_unchanged():
    avg = Averager()
    data = _wave([1.0, -2.0, 3.5])
    assert avg.new_data_vector(0, 0.1, data) == pytest.approx(data)


def test_two_vectors_are_averaged():
    avg = Averager()
    a = [1.0, 2.0, 3.0]
    b = [3.0, 6.0, -1.0]
    avg.new_data_vector(2, 0.1, _wave(a))
    result = avg.new_data_vector(2, 0.1, _wave(b))
    assert [k for k, _ in result] == pytest.approx([k for k, _ in _wave(b)])
    assert [v for _, v in result] == pytest.approx([(x + y) / 2 for x, y in zip(a, b)])


def test_window_keeps_only_last_count_vectors():
    avg = Averager()
    avg.set_count(1, 2)
    avg.new_data_vector(1, 0.1, _wave([100.0, 100.0]))
    avg.new_data_vector(1, 0.1, _wave([2.0, 4.0]))
    result = avg.new_data_vector(1, 0.1, _wave([4.0, 8.0]))
    assert [v for _, v in result] == pytest.approx([3.0, 6.0])


def test_changed_sampling_period_restarts_average():
    avg = Averager()
    avg.new_data_vector(0, 0.1, _wave([10.0, 10.0]))
    fresh = _wave([1.0, 2.0], step=0.2)
    assert avg.new_data_vector(0, 0.2, fresh) == pytest.approx(fresh)


def test_changed_length_restarts_average():
    avg = Averager()
    avg.new_data_vector(0, 0.1, _wave([10.0, 10.0]))
    fresh = _wave([1.0, 2.0, 3.0])
    assert avg.new_data_vector(0, 0.1, fresh) == pytest.approx(fresh)


def test_set_count_drops_oldest_vectors():
    avg = Averager()
    avg.new_data_vector(0, 0.1, _wave([50.0]))
    avg.new_data_vector(0, 0.1, _wave([7.0]))
    avg.set_count(0, 1)
    result = avg.new_data_vector(0, 0.1, _wave([9.0]))
    assert result == pytest.approx(_wave([9.0]))


def test_set_count_rejects_zero():
    with pytest.raises(ValueError):
        Averager().set_count(0, 0)


def test_channels_are_independent():
    avg = Averager()
    avg.new_data_vector(0, 0.1, _wave([10.0]))
    data = _wave([1.0])
    assert avg.new_data_vector(1, 0.1, data) == pytest.approx(data)


def test_reset_forgets_vectors():
    avg = Averager()
    avg.new_data_vector(0, 0.1, _wave([10.0, 20.0]))
    avg.reset()
    data = _wave([1.0, 2.0])
    assert avg.new_data_vector(0, 0.1, data) == pytest.approx(data)


def test_first_point_is_returned_as_is():
    avg = Averager()
    assert avg.new_data_point(0, 1.5, 4.0, False) == pytest.approx((1.5, 4.0))


def test_points_average_and_mid_time():
    avg = Averager()
    avg.new_data_point(0, 0.0, 1.0, False)
    mid, value = avg.new_data_point(0, 2.0, 3.0, True)
    assert mid == pytest.approx((0.0 + 2.0) / 2)
    assert value == pytest.approx((1.0 + 3.0) / 2)


def test_point_without_append_restarts():
    avg = Averager()
    avg.new_data_point(0, 0.0, 100.0, False)
    assert avg.new_data_point(0, 5.0, 2.0, False) == pytest.approx((5.0, 2.0))


def test_point_window_limited_by_count():
    avg = Averager()
    avg.set_count(0, 2)
    avg.new_data_point(0, 0.0, 100.0, False)
    avg.new_data_point(0, 1.0, 2.0, True)
    mid, value = avg.new_data_point(0, 2.0, 4.0, True)
    assert mid == pytest.approx((1.0 + 2.0) / 2)
    assert value == pytest.approx((2.0 + 4.0) / 2)