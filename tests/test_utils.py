import logging

import numpy as np
import pytest

from ecgsim.types import Sample, TimeSeries
from ecgsim.utils.logging import get_logger, level_for


def test_types():
    s = Sample(0.5, 1.25)
    assert s.amplitude == 0.5 and s.timestamp == 1.25
    ts = TimeSeries([0.0, 0.5, 1.5], [1, 2, 3])
    assert len(ts) == 3
    assert ts.duration == 1.5
    assert ts.values.dtype == float
    with pytest.raises(ValueError):
        TimeSeries([0, 1], [1])


def test_concatenate():
    a = TimeSeries([0.0, 1.0], [1.0, 2.0])
    b = TimeSeries([2.0], [3.0])
    joined = TimeSeries.concatenate([a, TimeSeries.empty(), b])
    np.testing.assert_array_equal(joined.times, [0.0, 1.0, 2.0])
    np.testing.assert_array_equal(joined.values, [1.0, 2.0, 3.0])
    assert len(TimeSeries.concatenate([])) == 0
    assert TimeSeries.empty().duration == 0.0


def test_level_for():
    assert level_for(0) == logging.WARNING
    assert level_for(1) == logging.INFO
    assert level_for(2) == logging.DEBUG
    assert level_for(7) == logging.DEBUG
    assert level_for(-1) == logging.WARNING


def test_logging():
    logger = get_logger("ecgsim-test")
    logger2 = get_logger("ecgsim-test", logging.DEBUG)
    assert logger is logger2
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    logger.debug("debug message")
