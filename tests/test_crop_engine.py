import random

import pytest

from crop_studio.core import MIN_CROP_PX, Rect
from crop_studio.crop_engine import (
    fit_rect_to_ratio,
    fit_size_to_ratio,
    move_rect,
    resize_rect,
)


FRAME = Rect(0, 0, 1920, 1080)
CORNERS = ("ne", "nw", "se", "sw")
TOL = 1e-6


def assert_contained(rect: Rect, bounds: Rect = FRAME) -> None:
    assert rect.x >= bounds.x - TOL
    assert rect.y >= bounds.y - TOL
    assert rect.right <= bounds.right + TOL
    assert rect.bottom <= bounds.bottom + TOL


def random_rect(rng: random.Random, bounds: Rect = FRAME) -> Rect:
    w = rng.uniform(MIN_CROP_PX, bounds.w)
    h = rng.uniform(MIN_CROP_PX, bounds.h)
    return Rect(rng.uniform(0, bounds.w - w), rng.uniform(0, bounds.h - h), w, h)


def test_moves_keep_rect_inside_and_unchanged_in_size():
    rng = random.Random(42)
    for _ in range(100):
        rect = random_rect(rng)
        for _ in range(20):
            moved = move_rect(rect, rng.uniform(-3000, 3000), rng.uniform(-3000, 3000), FRAME)
            assert (moved.w, moved.h) == (rect.w, rect.h)
            assert_contained(moved)
            assert moved.w >= MIN_CROP_PX and moved.h >= MIN_CROP_PX
            rect = moved


def test_move_clamps_each_axis_independently():
    moved = move_rect(Rect(100, 100, 200, 200), 5000, -10, FRAME)
    assert moved == Rect(1720, 90, 200, 200)


def test_full_frame_se_drag_at_max_is_a_no_op():
    ratio = 16 / 9
    result = resize_rect(Rect(0, 0, 1920, 1080), "se", 100, 10, FRAME, ratio)
    assert result.x == 0 and result.y == 0
    assert result.w == pytest.approx(1920)
    assert result.h == pytest.approx(1080)
    assert_contained(result)


def test_nw_corner_moves_while_se_anchor_stays():
    result = resize_rect(Rect(100, 100, 200, 200), "nw", -50, -20, FRAME, 1.0)
    assert result == Rect(50, 50, 250, 250)


def test_height_drives_when_vertical_delta_dominates():
    result = resize_rect(Rect(420, 0, 1080, 1080), "nw", 100, 120, FRAME, 1.0)
    assert result.w == pytest.approx(960)
    assert result.h == pytest.approx(960)
    assert (result.x, result.y) == pytest.approx((540, 120))


def test_edge_handles_ignore_ratio_and_other_axis():
    result = resize_rect(Rect(0, 0, 100, 100), "e", 50, 999, FRAME, 1.0)
    assert result == Rect(0, 0, 150, 100)
    result = resize_rect(Rect(500, 500, 100, 100), "n", 999, -40, FRAME, 1.0)
    assert result == Rect(500, 460, 100, 140)


def test_unlocked_shrink_stops_at_minimum():
    result = resize_rect(Rect(0, 0, 100, 100), "se", -500, 0, FRAME)
    assert result == Rect(0, 0, MIN_CROP_PX, 100)


def test_locked_shrink_keeps_both_axes_at_or_above_minimum():
    result = resize_rect(Rect(0, 0, 200, 100), "se", -1000, 0, FRAME, 2.0)
    assert result.w == pytest.approx(72)
    assert result.h == pytest.approx(36)


def test_west_drag_cannot_cross_left_bound():
    result = resize_rect(Rect(100, 100, 200, 200), "w", -500, 0, FRAME)
    assert result == Rect(0, 100, 300, 200)


def test_unknown_handle_is_rejected():
    with pytest.raises(ValueError):
        resize_rect(Rect(0, 0, 100, 100), "x", 1, 1, FRAME)


@pytest.mark.parametrize("ratio", [16 / 9, 1.0, 9 / 16, 2.39, 4 / 3])
def test_locked_corner_resizes_keep_ratio_and_anchor(ratio):
    rng = random.Random(hash(ratio) & 0xFFFF)
    for _ in range(300):
        handle = rng.choice(CORNERS)
        rect = random_rect(rng)
        dx = rng.uniform(-2500, 2500)
        dy = rng.uniform(-2500, 2500)
        result = resize_rect(rect, handle, dx, dy, FRAME, ratio)

        assert result.w / result.h == pytest.approx(ratio, rel=1e-6)
        assert_contained(result)
        anchor_x = rect.right if "w" in handle else rect.x
        anchor_y = rect.bottom if "n" in handle else rect.y
        result_x = result.right if "w" in handle else result.x
        result_y = result.bottom if "n" in handle else result.y
        assert result_x == pytest.approx(anchor_x, abs=TOL)
        assert result_y == pytest.approx(anchor_y, abs=TOL)


def test_unlocked_resizes_keep_invariants():
    rng = random.Random(3)
    for _ in range(500):
        handle = rng.choice(("n", "s", "e", "w") + CORNERS)
        rect = random_rect(rng)
        result = resize_rect(rect, handle, rng.uniform(-2500, 2500), rng.uniform(-2500, 2500), FRAME)
        assert_contained(result)
        assert result.w >= MIN_CROP_PX - TOL
        assert result.h >= MIN_CROP_PX - TOL


@pytest.mark.parametrize(
    "max_w, max_h, ratio, expected",
    [
        (1920, 1080, 1.0, (1080, 1080)),
        (1920, 1080, 16 / 9, (1920, 1080)),
        (1920, 1080, 9 / 16, (608, 1080)),
        (1921, 1081, 16 / 9, (1920, 1080)),
        (1280, 720, 2.39, (1280, 536)),
    ],
)
def test_fit_size_to_ratio(max_w, max_h, ratio, expected):
    assert fit_size_to_ratio(max_w, max_h, ratio) == expected


def test_fit_size_to_ratio_is_even_bounded_and_close():
    rng = random.Random(11)
    for _ in range(500):
        max_w = rng.randint(200, 4000)
        max_h = rng.randint(200, 4000)
        ratio = rng.choice([16 / 9, 9 / 16, 1.0, 4 / 3, 3 / 4, 2.39, 21 / 9])
        w, h = fit_size_to_ratio(max_w, max_h, ratio)
        assert w % 2 == 0 and h % 2 == 0
        assert 2 <= w <= max_w
        assert 2 <= h <= max_h
        assert w / h == pytest.approx(ratio, rel=0.03)


def test_fit_rect_to_ratio_recentres_square():
    assert fit_rect_to_ratio(Rect(0, 0, 1920, 1080), 1.0, 1920, 1080) == Rect(420, 0, 1080, 1080)


def test_fit_rect_to_ratio_clamps_near_edge():
    result = fit_rect_to_ratio(Rect(1800, 0, 100, 50), 0.5, 1920, 1080)
    assert (result.w, result.h) == (100, 200)
    assert result.y == 0
    assert result.x == 1800


def test_fit_rect_to_ratio_grows_minimum_crop_to_keep_both_axes():
    result = fit_rect_to_ratio(Rect(1464, 1044, 36, 36), 16 / 9, 1920, 1080)
    assert (result.w, result.h) == pytest.approx((64, 36))
    assert result.w / result.h == pytest.approx(16 / 9)
    assert_contained(result)


def test_fit_rect_to_ratio_gives_up_ratio_before_minimum_or_frame():
    result = fit_rect_to_ratio(Rect(0, 0, 1920, 1080), 2 / 1080, 1920, 1080)
    assert (result.w, result.h) == (MIN_CROP_PX, 1080)
    assert result.x == pytest.approx(960 - MIN_CROP_PX / 2)
    assert_contained(result)


def test_fit_rect_to_ratio_never_drops_below_minimum():
    rng = random.Random(17)
    for _ in range(500):
        rect = random_rect(rng)
        ratio = rng.choice([16 / 9, 9 / 16, 1.0, 2.39, 1 / 2.39, 4 / 3, 2 / 1080, 1920 / 2])
        result = fit_rect_to_ratio(rect, ratio, 1920, 1080)
        assert result.w >= MIN_CROP_PX - TOL
        assert result.h >= MIN_CROP_PX - TOL
        assert_contained(result)
