"""
Reaction-Diffusion Pipeline for DayDream Scope

Text-only pipeline that renders the Gray-Scott simulation as video frames.
No video input needed, the simulation is the video source.

Each __call__ is one cooperative tick: runtime params are applied, the
simulator steps once, and the rendered frame is returned as a tensor.

Uses BasePipelineConfig + Pipeline ABC when Scope's formal API is available.
Falls back to plain class for local dev without Scope.
"""

import enum
import torch
import numpy as np

from .params import ParameterError, ParameterSet, VisualizationMode
from .presets import PRESET_FIELDS, PRESET_ORDER
from .simulator import RDSimulator


class PresetEnum(str, enum.Enum):
    """All presets. Scope renders enum fields as dropdowns."""
    coral = "coral"
    wormhole = "wormhole"
    eddy = "eddy"
    swirl = "swirl"
    maze = "maze"


# Runtime kwargs that map 1:1 onto ParameterSet fields
_PARAM_KEYS = (
    "diffusion_a", "diffusion_b", "feed", "kill", "time_step",
    "visualization_mode", "color_a", "color_b", "drop_radius",
    "color_threshold", "smoothing_factor", "paused", "random_drops",
    "drop_interval",
)


# ── Shared __init__ and __call__ logic (used by both API branches) ────────

def _rd_init(self, display_size: int = 512, resolution: int = 2,
             preset: str = "coral", warmup_steps: int = 0, **kwargs):
    """Shared __init__ body for both formal and fallback RDPipeline.

    Args:
        display_size: Output frame side length in pixels.
        resolution: Pixels per grid cell.
        preset: Initial preset key (e.g. 'coral', 'maze').
        warmup_steps: Steps to run before the first frame.
    """
    preset = getattr(preset, 'value', preset)
    self.simulator = RDSimulator(
        preset_key=preset, display_size=display_size,
        params=ParameterSet(resolution=int(resolution)),
    )
    if warmup_steps:
        self.simulator.run_warmup(warmup_steps)


def _rd_call(self, prompt: str = "", **kwargs) -> dict:
    """Shared __call__ body for both formal and fallback RDPipeline.

    Args:
        prompt: Ignored (text-only pipeline, no prompt needed).
        **kwargs: Runtime parameters from Scope UI:
            preset (PresetEnum|str): preset key, switching resets the grid
            reseed (bool): reinitialize the grid with the current params
            drop (bool): add one random drop this tick
            resolution (int): pixels per cell, reinitializes on change
            feed, kill, diffusion_a, ... : any ParameterSet field

    Returns:
        {"video": tensor} where tensor is (1, H, W, 3) float32 [0,1]
    """
    sim = self.simulator

    # --- Preset change detection ---
    preset = kwargs.get("preset", None)
    if preset is not None:
        preset = getattr(preset, 'value', preset)
    switched = False
    if preset is not None and preset != sim.preset_key:
        try:
            sim.apply_preset(preset)
            switched = True
        except KeyError:
            print(f"[RD] Unknown preset: {preset!r}")

    if kwargs.get("reseed", False):
        sim.reinitialize()

    changes = {k: getattr(kwargs[k], 'value', kwargs[k])
               for k in _PARAM_KEYS if k in kwargs}
    if switched:
        # Slider values sent alongside a preset switch are stale
        for key in PRESET_FIELDS:
            changes.pop(key, None)
    if "resolution" in kwargs:
        changes["resolution"] = int(kwargs["resolution"])
    if changes:
        try:
            sim.set_params(**changes)
        except ParameterError as e:
            print(f"[RD] Rejected runtime params: {e}")

    if kwargs.get("drop", False):
        sim.add_random_drop()

    frame_np = sim.render_float()
    tensor = torch.from_numpy(np.ascontiguousarray(frame_np)).unsqueeze(0)
    return {"video": tensor}


# ── Try formal Scope API (BasePipelineConfig + Pipeline ABC) ──────────────

try:
    from pydantic import Field
    from scope.core.pipelines.base_schema import (
        BasePipelineConfig, ModeDefaults, UsageType, ui_field_config,
    )
    from scope.core.pipelines.interface import Pipeline
    _HAS_SCOPE_API = True
except ImportError:
    _HAS_SCOPE_API = False


if _HAS_SCOPE_API:
    # ── Formal Scope API branch ───────────────────────────────────────

    class RDPipelineConfig(BasePipelineConfig):
        pipeline_id = "reaction-diffusion"
        pipeline_name = "Reaction Diffusion"
        pipeline_description = "Gray-Scott reaction-diffusion as video source"
        supports_prompts = False
        usage = [UsageType.PREPROCESSOR]
        modes = {"video": ModeDefaults(default=True)}

        # Load-time
        display_size: int = Field(
            default=512,
            description="Output frame size in pixels",
            json_schema_extra=ui_field_config(
                order=1, label="Frame Size", is_load_param=True,
            ),
        )
        # Runtime
        preset: PresetEnum = Field(
            default=PresetEnum.coral,
            description="Reaction preset to run",
            json_schema_extra=ui_field_config(order=1, label="Preset"),
        )
        resolution: int = Field(
            default=2, ge=1, le=10,
            json_schema_extra=ui_field_config(order=2, label="Resolution"),
        )
        feed: float = Field(
            default=0.031, gt=0.0, lt=0.4,
            json_schema_extra=ui_field_config(order=3, label="Feed (F)"),
        )
        kill: float = Field(
            default=0.048, gt=0.0, lt=0.4,
            json_schema_extra=ui_field_config(order=4, label="Kill (k)"),
        )
        time_step: float = Field(
            default=0.7, ge=0.01, le=1.0,
            json_schema_extra=ui_field_config(order=5, label="Animation Speed"),
        )
        visualization_mode: VisualizationMode = Field(
            default=VisualizationMode.BLEND,
            json_schema_extra=ui_field_config(order=6, label="View Mode"),
        )
        smoothing_factor: float = Field(
            default=0.2, ge=0.0, le=0.95,
            json_schema_extra=ui_field_config(order=7, label="Temporal Smoothing"),
        )
        color_threshold: float = Field(
            default=0.2, ge=0.0, le=0.8,
            json_schema_extra=ui_field_config(order=8, label="Color Threshold"),
        )
        paused: bool = Field(
            default=False,
            json_schema_extra=ui_field_config(order=9, label="Pause"),
        )
        random_drops: bool = Field(
            default=False,
            json_schema_extra=ui_field_config(order=10, label="Random Drops"),
        )
        diffusion_a: float = Field(
            default=1.54, gt=0.0, le=2.0,
            json_schema_extra=ui_field_config(order=11, label="Diffusion A"),
        )
        diffusion_b: float = Field(
            default=1.99, gt=0.0, le=2.0,
            json_schema_extra=ui_field_config(order=12, label="Diffusion B"),
        )
        color_a: str = Field(
            default="#000000",
            description="Background / chemical A color (hex)",
            json_schema_extra=ui_field_config(order=13, label="Color A"),
        )
        color_b: str = Field(
            default="#0000ff",
            description="Chemical B color (hex)",
            json_schema_extra=ui_field_config(order=14, label="Color B"),
        )
        drop_radius: float = Field(
            default=5, ge=1, le=20,
            json_schema_extra=ui_field_config(order=15, label="Drop Size"),
        )
        drop_interval: float = Field(
            default=1.0, ge=0.1, le=10.0,
            description="Seconds between random drops",
            json_schema_extra=ui_field_config(order=16, label="Drop Interval"),
        )
        drop: bool = Field(
            default=False,
            description="Add one random drop this frame",
            json_schema_extra=ui_field_config(order=17, label="Add Drop"),
        )
        reseed: bool = Field(
            default=False,
            json_schema_extra=ui_field_config(order=18, label="Reseed"),
        )

    class RDPipeline(Pipeline):
        """Formal Scope pipeline using BasePipelineConfig + Pipeline ABC."""

        @classmethod
        def get_config_class(cls):
            return RDPipelineConfig

        __init__ = _rd_init
        __call__ = _rd_call

else:
    # ── Fallback for local dev without Scope installed ────────────────

    class RDPipeline:
        """Fallback pipeline (plain class, no Scope API dependency)."""

        __init__ = _rd_init
        __call__ = _rd_call

        @staticmethod
        def ui_field_config():
            """Configure how parameters appear in Scope UI.

            Returns:
                dict: UI configuration for each parameter.
                      Load-time params go in 'settings' panel.
                      Runtime params go in 'controls' panel.
            """
            return {
                # --- Load-time (Settings panel, requires pipeline reload) ---
                "display_size": {
                    "order": 1, "panel": "settings", "label": "Frame Size",
                    "choices": [256, 512, 800], "is_load_param": True,
                },
                # --- Runtime (Controls panel, updates live per-frame) ---
                "preset": {
                    "order": 1, "panel": "controls", "label": "Preset",
                    "choices": list(PRESET_ORDER),
                },
                "resolution": {
                    "order": 2, "panel": "controls", "label": "Resolution",
                    "min": 1, "max": 10, "step": 1,
                },
                "feed": {
                    "order": 3, "panel": "controls", "label": "Feed (F)",
                    "min": 0.001, "max": 0.4, "step": 0.001,
                },
                "kill": {
                    "order": 4, "panel": "controls", "label": "Kill (k)",
                    "min": 0.001, "max": 0.4, "step": 0.001,
                },
                "time_step": {
                    "order": 5, "panel": "controls", "label": "Animation Speed",
                    "min": 0.01, "max": 1.0, "step": 0.01,
                },
                "visualization_mode": {
                    "order": 6, "panel": "controls", "label": "View Mode",
                    "choices": [m.value for m in VisualizationMode],
                },
                "smoothing_factor": {
                    "order": 7, "panel": "controls", "label": "Temporal Smoothing",
                    "min": 0.0, "max": 0.95, "step": 0.05,
                },
                "color_threshold": {
                    "order": 8, "panel": "controls", "label": "Color Threshold",
                    "min": 0.0, "max": 0.8, "step": 0.01,
                },
                "paused": {
                    "order": 9, "panel": "controls", "label": "Pause",
                    "type": "toggle",
                },
                "random_drops": {
                    "order": 10, "panel": "controls", "label": "Random Drops",
                    "type": "toggle",
                },
                "diffusion_a": {
                    "order": 11, "panel": "controls", "label": "Diffusion A",
                    "min": 0.01, "max": 2.0, "step": 0.01,
                },
                "diffusion_b": {
                    "order": 12, "panel": "controls", "label": "Diffusion B",
                    "min": 0.01, "max": 2.0, "step": 0.01,
                },
                "color_a": {
                    "order": 13, "panel": "controls", "label": "Color A",
                    "type": "color",
                },
                "color_b": {
                    "order": 14, "panel": "controls", "label": "Color B",
                    "type": "color",
                },
                "drop_radius": {
                    "order": 15, "panel": "controls", "label": "Drop Size",
                    "min": 1, "max": 20, "step": 1,
                },
                "drop_interval": {
                    "order": 16, "panel": "controls", "label": "Drop Interval",
                    "min": 0.1, "max": 10.0, "step": 0.1,
                },
                "drop": {
                    "order": 17, "panel": "controls", "label": "Add Drop",
                    "type": "toggle",
                },
                "reseed": {
                    "order": 18, "panel": "controls", "label": "Reseed",
                    "type": "toggle",
                },
            }
