import numpy as np
import pytest

from ecgsim.core import SampleBuffer, buffer_capacity
from ecgsim.types import Sample


def test_capacity():
    assert buffer_capacity(500, 8) == 4000
    assert buffer_capacity(5, 1) == 64
    assert buffer_capacity(333, 0.5) == 166
    with pytest.raises(ValueError):
        buffer_capacity(0, 8)
    with pytest.raises(ValueError):
        buffer_capacity(500, 0)


def test_starts_zero_filled():
    buf = SampleBuffer(8)
    values, times = buf.snapshot()
    assert len(buf) == 8
    assert values.shape == (8,) and times.shape == (8,)
    assert not values.any() and not times.any()


def test_fifo_eviction_and_order():
    buf = SampleBuffer(4)
    for i in range(1, 7):
        buf.append(float(i), i / 10)
        assert len(buf) == 4
    values, times = buf.snapshot()
    np.testing.assert_array_equal(values, [3.0, 4.0, 5.0, 6.0])
    np.testing.assert_allclose(times, [0.3, 0.4, 0.5, 0.6])
    assert buf.latest() == Sample(6.0, 0.6)


def test_partial_fill_keeps_leading_zeros():
    buf = SampleBuffer(5)
    buf.append(1.0, 0.1)
    buf.append(2.0, 0.2)
    np.testing.assert_array_equal(buf.amplitudes(), [0, 0, 0, 1.0, 2.0])


def test_snapshot_is_a_copy():
    buf = SampleBuffer(3)
    buf.append(1.0, 0.0)
    values, _ = buf.snapshot()
    values[:] = 99
    assert buf.latest().amplitude == 1.0


def test_clear():
    buf = SampleBuffer(3)
    for i in range(5):
        buf.append(1.0, float(i))
    buf.clear()
    values, times = buf.snapshot()
    assert not values.any() and not times.any()


def test_rejects_empty_capacity():
    with pytest.raises(ValueError):
        SampleBuffer(0)
