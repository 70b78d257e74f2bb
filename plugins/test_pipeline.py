"""
Tests for the Scope video-source pipeline (local fallback class).
"""

import pytest

torch = pytest.importorskip("torch")

from reaction_diffusion.params import VisualizationMode  # noqa: E402
from reaction_diffusion.pipeline import RDPipeline, PresetEnum  # noqa: E402


def _pipeline(**kwargs):
    return RDPipeline(display_size=64, resolution=2, **kwargs)


def test_video_tensor_shape():
    pipe = _pipeline()
    out = pipe()
    video = out["video"]
    assert isinstance(video, torch.Tensor)
    assert tuple(video.shape) == (1, 64, 64, 3)
    assert video.dtype == torch.float32
    assert float(video.min()) >= 0.0 and float(video.max()) <= 1.0


def test_each_call_is_one_tick():
    pipe = _pipeline()
    pipe()
    pipe()
    assert pipe.simulator.grid.generation == 2


def test_preset_switch_accepts_enum():
    pipe = _pipeline(preset="coral")
    pipe(preset=PresetEnum.maze)
    assert pipe.simulator.preset_key == "maze"
    assert pipe.simulator.params.kill == 0.186
    # Fresh grid plus the tick that produced this frame
    assert pipe.simulator.grid.generation == 1


def test_runtime_params_applied():
    pipe = _pipeline()
    pipe(feed=0.05, visualization_mode=VisualizationMode.SUBTRACT, paused=True)
    params = pipe.simulator.params
    assert params.feed == 0.05
    assert params.visualization_mode is VisualizationMode.SUBTRACT
    assert pipe.simulator.grid.generation == 0


def test_invalid_runtime_params_rejected():
    pipe = _pipeline()
    out = pipe(feed=2.0, kill=0.05)
    # Whole update rejected, frame still produced
    assert pipe.simulator.params.feed == 0.031
    assert pipe.simulator.params.kill == 0.048
    assert tuple(out["video"].shape) == (1, 64, 64, 3)


def test_resolution_and_reseed():
    pipe = _pipeline()
    pipe(resolution=4)
    assert pipe.simulator.grid.dimensions() == (16, 16)
    pipe(reseed=True)
    assert pipe.simulator.grid.generation == 1


def test_preset_switch_wins_over_slider_values():
    pipe = _pipeline(preset="coral")
    # The UI sends current slider values alongside the new preset
    pipe(preset="maze", feed=0.031, kill=0.048, diffusion_a=1.54, time_step=0.5)
    params = pipe.simulator.params
    assert (params.feed, params.kill) == (0.083, 0.186)
    assert params.diffusion_a == 1.53
    # Non-preset fields still apply
    assert params.time_step == 0.5

    # Once the preset is current, sliders edit it as usual
    pipe(preset="maze", feed=0.05)
    assert params.feed == 0.05


def test_unknown_preset_keeps_streaming():
    pipe = _pipeline(preset="coral")
    out = pipe(preset="lava", feed=0.04)
    assert pipe.simulator.preset_key == "coral"
    assert pipe.simulator.params.feed == 0.04
    assert tuple(out["video"].shape) == (1, 64, 64, 3)


def test_drop_adds_chemical_b():
    pipe = _pipeline()
    pipe(paused=True)
    pipe.simulator.grid.reset()
    assert pipe.simulator.stats["mass"] == 0.0
    pipe(drop=True, paused=True)
    assert pipe.simulator.stats["mass"] > 0.0


def test_color_params_applied():
    pipe = _pipeline()
    pipe(color_a="#ff0000", color_b="#00ff00")
    params = pipe.simulator.params
    assert params.color_a == (255, 0, 0)
    assert params.color_b == (0, 255, 0)


def test_ui_exposes_runtime_controls():
    if hasattr(RDPipeline, "ui_field_config"):
        fields = RDPipeline.ui_field_config()
    else:
        fields = RDPipeline.get_config_class().model_fields
    for key in ("drop", "reseed", "color_a", "color_b", "diffusion_a",
                "diffusion_b", "drop_radius", "drop_interval"):
        assert key in fields, key
