import random

import pytest

from crop_studio.core import TrimRange
from crop_studio.trim import TrimEngine


@pytest.fixture
def trim():
    engine = TrimEngine()
    engine.load(120.0)
    return engine


def test_load_selects_full_range(trim):
    assert (trim.start, trim.end) == (0.0, 120.0)
    assert trim.payload() is None


def test_start_near_end_is_pulled_back(trim):
    trim.set_start(119.95)
    assert trim.start == pytest.approx(119.9)
    assert trim.end == 120.0


def test_end_before_start_is_pushed_forward(trim):
    trim.set_start(30.0)
    trim.set_end(20.0)
    assert trim.start == 30.0
    assert trim.end == pytest.approx(30.1)


def test_end_near_zero_keeps_minimum_gap(trim):
    trim.set_end(0.02)
    assert trim.start == 0.0
    assert trim.end == pytest.approx(0.1)


def test_setters_clamp_to_timeline(trim):
    trim.set_start(-5)
    trim.set_end(500)
    assert (trim.start, trim.end) == (0.0, 120.0)


def test_non_finite_values_are_ignored(trim):
    trim.set_start(float("nan"))
    trim.set_end(float("inf"))
    assert (trim.start, trim.end) == (0.0, 120.0)


def test_payload_reports_partial_trim(trim):
    trim.set_start(10.0)
    trim.set_end(20.0)
    assert trim.payload() == TrimRange(10.0, 20.0)


def test_reset_to_full_clears_payload(trim):
    trim.set_start(10.0)
    trim.reset_to_full()
    assert trim.payload() is None


def test_payload_treats_near_full_range_as_no_trim(trim):
    trim.set_end(119.9995)
    assert trim.payload() is None


def test_random_edits_never_invert_the_range(trim):
    rng = random.Random(5)
    for _ in range(2000):
        value = rng.uniform(-10, 130)
        if rng.random() < 0.5:
            trim.set_start(value)
        else:
            trim.set_end(value)
        assert 0.0 <= trim.start < trim.end <= 120.0
        assert trim.end - trim.start >= 0.1 - 1e-9


def test_without_duration_everything_is_a_no_op():
    engine = TrimEngine()
    engine.load(0.0)
    engine.set_start(3.0)
    engine.set_end(1.0)
    engine.reset_to_full()
    assert not engine.enabled
    assert (engine.start, engine.end) == (0.0, 0.0)
    assert engine.payload() is None


def test_clip_shorter_than_step_uses_duration_as_gap():
    engine = TrimEngine()
    engine.load(0.05)
    engine.set_start(0.04)
    assert (engine.start, engine.end) == (0.0, 0.05)
