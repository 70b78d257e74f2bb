#!/usr/bin/env python3
"""
Test script for the per-tick simulation pipeline.

Verifies:
1. Deterministic grid (re)initialization and resolution handling
2. Tick ordering: pause, skipped ticks on invalid params, random drops
3. Frame raster layout and color refresh
"""

import numpy as np
import pytest

from reaction_diffusion.params import ParameterError, ParameterSet
from reaction_diffusion.simulator import RDSimulator, rasterize


def _sim(**params):
    return RDSimulator("coral", display_size=60, params=ParameterSet(**params), seed=1)


def test_initial_grid_is_seeded():
    print("Testing initialization...")
    sim = _sim(resolution=3)
    assert sim.grid.dimensions() == (20, 20)
    assert np.all(sim.grid.a == 1.0)
    # One central drop of radius 10
    assert sim.grid.b[10, 10] == 1.0
    assert sim.grid.b[0, 0] == 0.0
    assert sim.grid.generation == 0
    print("  ✓ grid seeded")


def test_reinitialize_is_idempotent():
    sim = _sim(resolution=2)
    for _ in range(5):
        sim.tick(now=0.0)
    sim.reinitialize()
    a1, b1 = sim.grid.a.copy(), sim.grid.b.copy()
    sim.reinitialize()
    assert np.array_equal(sim.grid.a, a1)
    assert np.array_equal(sim.grid.b, b1)

    other = _sim(resolution=2)
    assert np.array_equal(other.grid.b, b1)


def test_resolution_change_rebuilds_grid():
    sim = _sim(resolution=3)
    old_grid = sim.grid
    sim.set_params(resolution=2)
    assert sim.grid is not old_grid
    assert sim.grid.dimensions() == (30, 30)

    frame = sim.tick(now=0.0)
    assert frame.shape == (60, 60, 4)


def test_direct_resolution_edit_is_pulled_on_tick():
    sim = _sim(resolution=3)
    sim.params.resolution = 4
    frame = sim.tick(now=0.0)
    assert sim.grid.dimensions() == (15, 15)
    assert frame.shape == (60, 60, 4)
    assert sim.grid.generation == 1


def test_invalid_update_rejected():
    sim = _sim()
    grid = sim.grid
    with pytest.raises(ParameterError):
        sim.set_params(resolution=0)
    with pytest.raises(ParameterError):
        sim.set_params(time_step=0)
    assert sim.grid is grid
    assert sim.params.resolution == 3


def test_invalid_params_skip_whole_tick():
    print("Testing skipped ticks...")
    sim = _sim()
    first = sim.tick(now=0.0)
    a_before = sim.grid.a.copy()

    sim.params.time_step = 0
    out = sim.tick(now=0.1)

    assert out is first
    assert sim.skipped_ticks == 1
    assert sim.grid.generation == 1
    assert np.array_equal(sim.grid.a, a_before)

    sim.params.time_step = 0.7
    sim.tick(now=0.2)
    assert sim.grid.generation == 2
    print("  ✓ invalid ticks skipped")


def test_pause_still_renders():
    sim = _sim()
    sim.toggle_pause()
    a_before = sim.grid.a.copy()
    frame = sim.tick(now=0.0)
    assert frame is not None
    assert sim.grid.generation == 0
    assert np.array_equal(sim.grid.a, a_before)

    assert sim.toggle_pause() is False
    sim.tick(now=0.1)
    assert sim.grid.generation == 1


def test_frame_layout():
    sim = _sim(resolution=3, smoothing_factor=0.0)
    frame = sim.tick(now=0.0)
    assert frame.dtype == np.uint8
    assert frame.shape == (60, 60, 4)
    assert np.all(frame[..., 3] == 255)
    # Far corner is untouched background (color A = black)
    assert tuple(frame[0, 0, :3]) == (0, 0, 0)


def test_color_change_refreshes_background():
    sim = _sim(smoothing_factor=0.0)
    sim.tick(now=0.0)
    sim.set_params(color_a="#ff0000")
    frame = sim.tick(now=0.1)
    assert tuple(frame[0, 0, :3]) == (255, 0, 0)

    # Direct edits are picked up before the next color pass
    sim.params.color_a = (0, 255, 0)
    frame = sim.tick(now=0.2)
    assert tuple(frame[0, 0, :3]) == (0, 255, 0)


def test_apply_preset_resets_grid():
    sim = _sim()
    for _ in range(3):
        sim.tick(now=0.0)
    sim.apply_preset("maze")
    assert sim.preset_key == "maze"
    assert sim.grid.generation == 0
    assert sim.params.feed == 0.083
    with pytest.raises(KeyError):
        sim.apply_preset("nope")


def test_add_drop_uses_default_radius():
    sim = RDSimulator("coral", display_size=60,
                      params=ParameterSet(resolution=1, drop_radius=5))
    # Lattice points strictly inside a radius-5 disk
    assert sim.add_drop(45, 45) == 69
    assert sim.add_drop(45, 45, radius=1) == 1


def test_add_drop_non_positive_radius_uses_default():
    sim = RDSimulator("coral", display_size=60,
                      params=ParameterSet(resolution=1, drop_radius=5))
    assert sim.add_drop(45, 45, radius=0) == 69
    assert sim.add_drop(45, 45, radius=-3) == 69


def test_random_drops_follow_interval():
    sim = _sim(random_drops=True, drop_interval=0.5)
    sim.tick(now=0.0)
    assert sim.dropper.last_drop == 0.0
    sim.tick(now=0.4)
    assert sim.dropper.last_drop == 0.0
    sim.tick(now=0.6)
    assert sim.dropper.last_drop == 0.6


def test_cycle_visualization_mode():
    sim = _sim()
    seen = [sim.cycle_visualization_mode().value for _ in range(4)]
    assert seen == ["subtract", "a", "b", "blend"]


def test_boundedness_through_ticks():
    sim = _sim(resolution=2, random_drops=True, drop_interval=0.01)
    for t in range(30):
        sim.tick(now=t * 0.02)
        assert 0.0 <= sim.grid.a.min() and sim.grid.a.max() <= 1.0
        assert 0.0 <= sim.grid.b.min() and sim.grid.b.max() <= 1.0


def test_render_float():
    sim = _sim(resolution=2)
    out = sim.render_float(now=0.0)
    assert out.shape == (60, 60, 3)
    assert out.dtype == np.float32
    assert 0.0 <= out.min() and out.max() <= 1.0


def test_rasterize_blocks():
    rgb = np.zeros((2, 3, 3), dtype=np.uint8)  # 2 cols x 3 rows
    rgb[1, 2] = (9, 8, 7)
    frame = rasterize(rgb, 2)
    assert frame.shape == (6, 4, 4)
    # Cell (i=1, j=2) covers x in [2, 4), y in [4, 6)
    assert np.all(frame[4:6, 2:4, :3] == (9, 8, 7))
    assert np.all(frame[:4, :, :3] == 0)
    assert np.all(frame[..., 3] == 255)


if __name__ == "__main__":
    print("\n=== Testing Simulation Pipeline ===\n")

    test_initial_grid_is_seeded()
    test_reinitialize_is_idempotent()
    test_invalid_params_skip_whole_tick()

    print("\n✓ All tests passed!\n")
