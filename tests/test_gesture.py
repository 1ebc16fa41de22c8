import pytest

from crop_studio.core import Rect, VideoIntrinsics
from crop_studio.gesture import CropGesture
from crop_studio.mapper import CoordinateMapper


@pytest.fixture
def mapper():
    # Letterboxed: scale 0.5 with a 90px band above and below.
    return CoordinateMapper(VideoIntrinsics(1920, 1080), 960, 720)


def test_move_is_relative_to_drag_start(mapper):
    gesture = CropGesture(lambda: None, 36)
    start = Rect(100, 100, 400, 300)
    assert gesture.pointer_down(100, 150, None, start, mapper)
    assert gesture.drag.mode == "move"
    assert gesture.pointer_move(110, 150, mapper) == Rect(120, 100, 400, 300)
    # Measured from the drag-start pointer, not the previous move.
    assert gesture.pointer_move(120, 140, mapper) == Rect(140, 80, 400, 300)


def test_ratio_is_read_on_every_move(mapper):
    ratio = {"value": None}
    gesture = CropGesture(lambda: ratio["value"], 36)
    start = Rect(0, 0, 400, 200)
    gesture.pointer_down(200, 190, "se", start, mapper)
    assert gesture.pointer_move(250, 190, mapper) == Rect(0, 0, 500, 200)
    ratio["value"] = 2.0
    result = gesture.pointer_move(250, 190, mapper)
    assert (result.w, result.h) == pytest.approx((500, 250))


def test_cancel_behaves_like_release(mapper):
    gesture = CropGesture(lambda: None, 36)
    gesture.pointer_down(0, 90, "nw", Rect(0, 0, 100, 100), mapper)
    assert gesture.active
    gesture.cancel()
    assert not gesture.active
    assert gesture.pointer_move(50, 50, mapper) is None


def test_unknown_handle_does_not_start_a_drag(mapper):
    gesture = CropGesture(lambda: None, 36)
    with pytest.raises(ValueError):
        gesture.pointer_down(0, 0, "middle", Rect(0, 0, 100, 100), mapper)
    assert not gesture.active
