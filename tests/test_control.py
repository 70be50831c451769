"""Test the spiral controller.

Tests for spirals.control:
    - construction: buffer size, single and four-spiral layouts
    - advance_frame: pixels written in color with alpha 255, off-canvas dropped
    - stopping at the first frame with negative speed
    - branching driven by a mocked random source
    - start/stop through the scheduler
    - bounds, color, size and sign helpers

Run:
    pytest tests/test_control.py -v
"""

import logging
import math
import random
from unittest import mock

import pytest

from spirals.config import SpiralConfig
from spirals.control import SpiralControl
from spirals.raster import rasterize_line
from spirals.scheduler import IntervalScheduler
from spirals.surface import MemorySurface

COLOR = (10, 20, 30)


def pixel(control, x, y):
    i = (y * control.width + x) * 4
    return tuple(control.image_data[i:i + 4])


def written_pixels(control):
    out = set()
    for i in range(0, len(control.image_data), 4):
        if any(control.image_data[i:i + 4]):
            p = i // 4
            out.add((p % control.width, p // control.width))
    return out


def stub_rng(value):
    rng = mock.Mock()
    rng.random.return_value = value
    rng.uniform.return_value = 0.32
    return rng


# ---------------------------------------------------------------------------
# construction
# ---------------------------------------------------------------------------

def test_buffer_is_zeroed_rgba(surface):
    control = SpiralControl(surface, cfg=SpiralConfig(seed=1))
    assert len(control.image_data) == 100 * 100 * 4
    assert not any(control.image_data)
    assert control.mspf == pytest.approx(1000 / 60)


def test_single_layout(surface):
    control = SpiralControl(surface, cfg=SpiralConfig(seed=3, initial_color=COLOR))
    assert len(control.spirals) == 1
    s = control.spirals[0]
    assert s.root == (50.0, 100.0)
    assert s.dir == 0.0
    assert s.angular_accel == pytest.approx(-0.05)
    assert 0.30 <= s.size <= 0.34
    assert s.color == COLOR
    assert s.speed == pytest.approx(3 * s.size)


def test_four_layout_staggers_creation(surface, scheduler):
    control = SpiralControl(surface, cfg=SpiralConfig(seed=3), scheduler=scheduler, layout="four")
    assert len(control.spirals) == 1
    scheduler.tick(999)
    assert len(control.spirals) == 1
    scheduler.tick(1)
    assert len(control.spirals) == 2
    scheduler.tick(500)
    assert len(control.spirals) == 3
    scheduler.tick(500)
    assert len(control.spirals) == 4
    scheduler.tick(5000)
    assert len(control.spirals) == 4

    assert all(s.root == (50.0, 50.0) for s in control.spirals)
    assert [math.copysign(1, s.angular_accel) for s in control.spirals] == [1, -1, 1, -1]
    assert [s.dir for s in control.spirals] == pytest.approx([0, math.pi / 2, math.pi, 3 * math.pi / 2])


def test_unknown_layout(surface):
    with pytest.raises(ValueError):
        SpiralControl(surface, layout="spiral-galaxy")


def test_fps_must_be_positive(surface):
    with pytest.raises(ValueError):
        SpiralControl(surface, 0, layout="empty")


def test_same_seed_same_animation():
    a = SpiralControl(MemorySurface(80, 60), cfg=SpiralConfig(seed=42))
    b = SpiralControl(MemorySurface(80, 60), cfg=SpiralConfig(seed=42))
    for _ in range(60):
        a.advance_frame()
        b.advance_frame()
    assert a.image_data == b.image_data


# ---------------------------------------------------------------------------
# frames
# ---------------------------------------------------------------------------

def test_one_frame_from_bottom_edge_writes_nothing(surface):
    # the single layout starts on row 100, one past the last row
    control = SpiralControl(surface, cfg=SpiralConfig(seed=5, initial_color=COLOR))
    s = control.spirals[0]
    start_speed = s.speed
    control.advance_frame()
    segment = rasterize_line((50.0, 100.0), (50.0 + start_speed, 100.0), COLOR)
    assert segment
    assert all(not control.in_canvas(x, y) for x, y, _ in segment)
    assert not any(control.image_data)
    assert surface.present_count == 1


def test_one_frame_writes_exactly_the_segment(empty_control, surface):
    s = empty_control.add_spiral(50, 50, 0.0, -0.05, size=0.32, color=COLOR)
    empty_control.advance_frame()

    expected = {(x, y) for x, y, _ in rasterize_line((50.0, 50.0), (s.tip[0], s.tip[1]), COLOR)}
    assert expected == {(50, 50), (51, 50)}
    assert written_pixels(empty_control) == expected
    for x, y in expected:
        assert pixel(empty_control, x, y) == COLOR + (255,)
        assert surface.get_at(x, y) == COLOR + (255,)
    assert s.updated == []
    assert surface.frame == bytes(empty_control.image_data)


def test_off_canvas_pixels_are_dropped(empty_control):
    s = empty_control.add_spiral(99, 10, 0.0, 0.0, size=0.34, color=COLOR)
    empty_control.advance_frame()
    assert written_pixels(empty_control) <= {(99, 10)}
    assert s.updated == []


def test_debug_channel_reports_drops(empty_control, caplog):
    empty_control.debug_messages = True
    empty_control.add_spiral(50, 100, 0.0, 0.0, size=0.32, color=COLOR)
    with caplog.at_level(logging.DEBUG, logger="spirals"):
        empty_control.advance_frame()
    assert "off-canvas" in caplog.text


def test_debug_channel_silent_by_default(empty_control, caplog):
    empty_control.add_spiral(50, 100, 0.0, 0.0, size=0.32, color=COLOR)
    with caplog.at_level(logging.DEBUG, logger="spirals"):
        empty_control.advance_frame()
    assert caplog.text == ""


def test_func_debug(empty_control, caplog):
    empty_control.func_debug_messages = True
    with caplog.at_level(logging.DEBUG, logger="spirals"):
        empty_control.advance_frame()
    assert "Function advance_frame was called." in caplog.text


def test_spiral_stops_at_first_negative_speed(empty_control):
    size = 0.3
    s = empty_control.add_spiral(50, 50, 0.0, -0.05, size=size, color=COLOR)
    speed = 3 * size
    expected_frames = 0
    while speed >= 0:
        speed = speed * 0.993 - 0.0016 * size
        expected_frames += 1

    for _ in range(expected_frames - 1):
        empty_control.advance_frame()
    assert not s.stopped
    empty_control.advance_frame()
    assert s.stopped
    assert s.speed < 0

    tip = list(s.tip)
    empty_control.advance_frame()
    assert s.tip == tip
    assert s in empty_control.spirals


# ---------------------------------------------------------------------------
# branching
# ---------------------------------------------------------------------------

def test_branch_spawns_on_first_eligible_frame(surface):
    control = SpiralControl(surface, cfg=SpiralConfig(), rng=stub_rng(0.0), layout="empty")
    parent = control.add_spiral(50, 50, 0.0, -0.05, size=0.32, color=COLOR)
    for _ in range(25):
        control.advance_frame()
    assert len(control.spirals) == 1

    control.advance_frame()
    assert len(control.spirals) == 2
    assert parent.branch_point is None
    child = control.spirals[1]
    assert child.root == (parent.tip[0], parent.tip[1])
    assert child.dir == parent.dir
    assert child.angular_accel == pytest.approx(0.05)
    assert child.size == 0.32
    assert child.color == COLOR
    assert child.updated == []

    # one branch per recorded point
    for _ in range(30):
        control.advance_frame()
    assert len(control.spirals) == 2 + 1  # the child's own branch


def test_branch_never_spawns_when_random_is_one(surface):
    control = SpiralControl(surface, rng=stub_rng(1.0), layout="empty")
    parent = control.add_spiral(50, 50, 0.0, -0.05, size=0.32, color=COLOR)
    for _ in range(300):
        control.advance_frame()
    assert len(control.spirals) == 1
    assert parent.branch_point is not None


def test_stopped_spiral_can_still_branch(surface):
    rng = stub_rng(1.0)
    control = SpiralControl(surface, rng=rng, layout="empty")
    parent = control.add_spiral(50, 50, 0.0, -0.05, size=0.32, color=COLOR)
    for _ in range(30):
        control.advance_frame()
    parent.stopped = True
    rng.random.return_value = 0.0
    control.advance_frame()
    assert len(control.spirals) == 2


# ---------------------------------------------------------------------------
# refresh loop
# ---------------------------------------------------------------------------

def test_start_and_stop(surface, scheduler):
    control = SpiralControl(surface, cfg=SpiralConfig(seed=1), scheduler=scheduler)
    assert not control.running
    control.start()
    assert control.running
    scheduler.tick(17)
    scheduler.tick(17)
    assert control.frame == 2
    control.stop()
    assert not control.running
    scheduler.tick(1000)
    assert control.frame == 2
    control.stop()


def test_start_with_custom_callback(surface, scheduler):
    calls = []
    control = SpiralControl(surface, 10, scheduler=scheduler, layout="empty")
    control.start(lambda: calls.append(scheduler.now))
    scheduler.tick(100)
    scheduler.tick(50)
    scheduler.tick(50)
    assert calls == [100, 200]
    assert control.frame == 0


def test_frame_rate_holds_with_engine_tick_size(surface, scheduler):
    control = SpiralControl(surface, 60, scheduler=scheduler, layout="empty")
    control.start()
    for i in range(120):
        scheduler.tick(9 if i % 3 == 2 else 8)
    assert 59 <= control.frame <= 60


def test_restart_replaces_registration(surface, scheduler, caplog):
    control = SpiralControl(surface, scheduler=scheduler, layout="empty")
    control.start()
    with caplog.at_level(logging.WARNING, logger="spirals"):
        control.start()
    assert "restarting" in caplog.text
    assert scheduler.pending == 1
    scheduler.tick(17)
    assert control.frame == 1


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("w, h", [(1, 1), (100, 100), (640, 480)])
def test_in_canvas(w, h):
    control = SpiralControl(MemorySurface(w, h), layout="empty")
    assert control.in_canvas(w - 1, h - 1)
    assert control.in_canvas(0, 0)
    assert not control.in_canvas(w, 0)
    assert not control.in_canvas(-1, 0)
    assert not control.in_canvas(0, h)
    assert control.in_x_range(w - 1) and not control.in_x_range(w)
    assert control.in_y_range(h - 1) and not control.in_y_range(h)
    assert SpiralControl.in_range(3, 3, 4)


def test_set_pixel_offset(empty_control):
    empty_control.set_pixel(3, 2, 1, 2, 3)
    offset = (2 * 100 + 3) * 4
    assert empty_control.image_data[offset:offset + 4] == bytearray([1, 2, 3, 255])
    empty_control.set_pixel(0, 0, 9, 9, 9, alpha=7)
    assert pixel(empty_control, 0, 0) == (9, 9, 9, 7)


def test_random_color_and_size(surface):
    control = SpiralControl(surface, rng=random.Random(11), layout="empty")
    for _ in range(200):
        color = control.random_color()
        assert len(color) == 3
        assert all(isinstance(c, int) and 0 <= c <= 255 for c in color)
        assert 0.30 <= control.random_size() <= 0.34


@pytest.mark.parametrize("x, expected", [(-0.05, -1), (0, 0), (0.05, 1)])
def test_sign(x, expected):
    assert SpiralControl.sign(x) == expected


def test_update_alias(empty_control):
    empty_control.update()
    assert empty_control.frame == 1


def test_scheduler_default(surface):
    control = SpiralControl(surface, layout="empty")
    assert isinstance(control.scheduler, IntervalScheduler)
