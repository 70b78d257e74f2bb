"""
RDSimulator - Headless Gray-Scott simulation core

Owns the concentration grid, stepper, drop injector, color mapper and
temporal smoother, and runs them in order once per tick:

    step -> random drop (if due) -> color map -> raster -> smooth

Zero pygame dependency. Used by viewer.py (which adds the window), by
the Scope pipeline and by the headless CLI.

Usage:
    from reaction_diffusion.simulator import RDSimulator
    sim = RDSimulator("coral", display_size=600)
    frame = sim.tick()  # (H, W, 4) uint8 RGBA
"""

import time
import numpy as np

from .colormaps import ColorMapper
from .drops import PerturbationInjector, RandomDropper
from .gray_scott import Stepper
from .grid import ConcentrationGrid
from .params import ParameterError, ParameterSet, VisualizationMode, MODE_ORDER
from .presets import PRESETS, apply_preset
from .smoothing import TemporalSmoother

DEFAULT_DISPLAY_SIZE = 800
SEED_RADIUS = 10


class RDSimulator:

    def __init__(self, preset_key="coral", display_size=DEFAULT_DISPLAY_SIZE,
                 params=None, seed=None):
        self.display_size = display_size
        self.params = params if params is not None else ParameterSet()
        self.params.validate()

        self.stepper = Stepper(self.params)
        self.mapper = ColorMapper(self.params)
        self.smoother = TemporalSmoother()
        self.dropper = RandomDropper(self.params.drop_interval,
                                     rng=np.random.default_rng(seed))

        self.grid = None
        self.injector = None
        self.last_frame = None
        self.skipped_ticks = 0

        self.preset_key = None
        if preset_key is not None:
            self.apply_preset(preset_key)
        else:
            self.reinitialize()

    # -----------------------------------------------------------------------
    # Grid lifecycle
    # -----------------------------------------------------------------------

    def grid_dimensions(self, resolution=None):
        res = resolution if resolution is not None else self.params.resolution
        side = max(1, self.display_size // res)
        return side, side

    def reinitialize(self):
        """Build a fresh grid (a=1, b=0) with one central drop of radius 10.

        Deterministic: two calls with the same parameters give identical
        grid contents. Also clears the retained smoothing frame.
        """
        cols, rows = self.grid_dimensions()
        self._resolution = self.params.resolution
        self.grid = ConcentrationGrid(cols, rows)
        self.injector = PerturbationInjector(self.grid)
        self.grid.reset(seed=lambda g: self.injector.inject(cols / 2, rows / 2, SEED_RADIUS))
        self.smoother.reset()
        self.last_frame = None
        print(f"[RD] Grid {cols}x{rows} @ resolution {self._resolution}")

    def restart(self):
        """Full reinitialization plus random-drop timer reset."""
        self.reinitialize()
        self.dropper.reset(time.perf_counter())

    def apply_preset(self, key):
        """Overwrite the four reaction constants, then reset the grid."""
        if key not in PRESETS:
            raise KeyError(f"Unknown preset: {key}")
        apply_preset(self.params, key)
        self.preset_key = key
        print(f"[RD] Preset: {PRESETS[key]['name']}")
        self.reinitialize()

    # -----------------------------------------------------------------------
    # Control surface
    # -----------------------------------------------------------------------

    def set_params(self, **changes):
        """Validated parameter update. Raises ParameterError, applying nothing.

        A resolution change reinitializes the grid; color changes refresh
        the mapper's cached colors.
        """
        changed = self.params.update(**changes)
        if "resolution" in changed:
            self.reinitialize()
        if changed & {"color_a", "color_b"}:
            self.mapper.refresh_colors()
        if "drop_interval" in changed:
            self.dropper.interval = self.params.drop_interval
        return changed

    def add_drop(self, x, y, radius=None):
        """Drop chemical B at grid-cell coordinates (x, y).

        A missing or non-positive radius falls back to params.drop_radius.
        """
        if radius is None or radius <= 0:
            radius = self.params.drop_radius
        return self.injector.inject(x, y, radius)

    def add_random_drop(self):
        return self.dropper.drop(self.injector)

    def toggle_pause(self):
        self.params.paused = not self.params.paused
        return self.params.paused

    def cycle_visualization_mode(self):
        idx = MODE_ORDER.index(VisualizationMode(self.params.visualization_mode))
        mode = MODE_ORDER[(idx + 1) % len(MODE_ORDER)]
        self.params.visualization_mode = mode
        return mode

    # -----------------------------------------------------------------------
    # Tick
    # -----------------------------------------------------------------------

    def tick(self, now=None):
        """Advance one animation tick and return the RGBA frame.

        If the ParameterSet fails validation the whole tick is skipped: the
        grid is left untouched and the previous frame is returned.
        Paused ticks skip the step and random drops but still render.

        Args:
            now: Timestamp in seconds (defaults to time.perf_counter())

        Returns:
            (rows*res, cols*res, 4) uint8 RGBA frame
        """
        if now is None:
            now = time.perf_counter()

        try:
            self.params.validate()
        except ParameterError as e:
            self.skipped_ticks += 1
            print(f"[RD] Skipping tick: {e}")
            return self.last_frame

        # Pull-model change detection for externally mutated params
        if self.params.resolution != self._resolution:
            self.reinitialize()
        self.dropper.interval = self.params.drop_interval

        if not self.params.paused:
            self.stepper.step(self.grid)
            if self.params.random_drops and self.dropper.due(now):
                self.dropper.drop(self.injector, now)

        return self.render()

    def render(self):
        """Color-map the current grid, expand to pixels and smooth."""
        self.mapper.sync()
        rgb = self.mapper.map_cells(self.grid.a, self.grid.b)
        frame = rasterize(rgb, self._resolution)
        frame = self.smoother.apply(frame, self.params.smoothing_factor)
        self.last_frame = frame
        return frame

    def render_float(self, now=None) -> np.ndarray:
        """Tick and return (H, W, 3) float32 in [0, 1] (no alpha)."""
        frame = self.tick(now)
        if frame is None:
            # First tick was skipped - nothing rendered yet
            h = self.grid.rows * self._resolution
            w = self.grid.cols * self._resolution
            return np.zeros((h, w, 3), dtype=np.float32)
        return frame[..., :3].astype(np.float32) / 255.0

    def run_warmup(self, steps=200):
        """Step without rendering so the first frames show developed structure."""
        self.stepper.step_n(self.grid, steps)

    @property
    def stats(self):
        return self.grid.stats


def rasterize(rgb, resolution):
    """Expand a (cols, rows, 3) cell color array into an RGBA pixel raster.

    Each cell becomes a resolution x resolution block. Output is indexed
    [y, x] like an image: shape (rows*res, cols*res, 4), alpha = 255.
    """
    cols, rows = rgb.shape[:2]
    frame = np.empty((rows * resolution, cols * resolution, 4), dtype=np.uint8)
    pixels = rgb.transpose(1, 0, 2)
    if resolution > 1:
        pixels = np.repeat(np.repeat(pixels, resolution, axis=0), resolution, axis=1)
    frame[..., :3] = pixels
    frame[..., 3] = 255
    return frame
