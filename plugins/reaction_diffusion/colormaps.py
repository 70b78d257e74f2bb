"""
Concentration-to-Color Mapping

Maps a pair of concentrations (a, b) to an RGB color.

Both channels are gamma-compressed (x^0.3) so low concentrations land in
the visible range. Cells where either compressed value is at or below the
color threshold, or where either raw value is exactly 1 (untouched or fully
reacted regions), render as the flat chemical-A background color. All
other cells combine color_a and color_b according to the visualization
mode, one mapping function per mode.
"""

import numpy as np

from .params import VisualizationMode

GAMMA = 0.3
SUBTRACT_STRENGTH = 0.8


def _map_a(ga, gb, color_a, color_b):
    return ga[..., None] * color_a


def _map_b(ga, gb, color_a, color_b):
    return gb[..., None] * color_b


def _map_blend(ga, gb, color_a, color_b):
    return ga[..., None] * color_a + gb[..., None] * color_b


def _map_subtract(ga, gb, color_a, color_b):
    # Blue comes straight from B, ignoring A
    out = np.empty(ga.shape + (3,), dtype=np.float64)
    erosion = ga * (1.0 - SUBTRACT_STRENGTH * gb)
    out[..., 0] = color_a[0] * erosion
    out[..., 1] = color_a[1] * erosion
    out[..., 2] = gb * color_b[2]
    return out


MODE_FUNCS = {
    VisualizationMode.A: _map_a,
    VisualizationMode.B: _map_b,
    VisualizationMode.BLEND: _map_blend,
    VisualizationMode.SUBTRACT: _map_subtract,
}


class ColorMapper:
    """Converts concentrations to RGB using the live ParameterSet.

    color_a / color_b are cached as float arrays; refresh_colors() (or
    sync(), which only refreshes when the params changed) must run before
    mapping once the ParameterSet colors are edited.
    """

    def __init__(self, params):
        self.params = params
        self.refresh_colors()

    def refresh_colors(self):
        self._source = (self.params.color_a, self.params.color_b)
        self.color_a = np.array(self.params.color_a, dtype=np.float64)
        self.color_b = np.array(self.params.color_b, dtype=np.float64)

    def sync(self):
        """Refresh cached colors if the ParameterSet colors changed.

        Returns True when a refresh happened.
        """
        if self._source != (self.params.color_a, self.params.color_b):
            self.refresh_colors()
            return True
        return False

    def map_cells(self, a, b):
        """Map concentration arrays to colors.

        Args:
            a: array of chemical A concentrations in [0, 1]
            b: array of chemical B concentrations, same shape as a

        Returns:
            uint8 array of shape a.shape + (3,)
        """
        a = np.asarray(a, dtype=np.float64)
        b = np.asarray(b, dtype=np.float64)
        ga = np.power(a, GAMMA)
        gb = np.power(b, GAMMA)

        threshold = self.params.color_threshold
        background = (ga <= threshold) | (gb <= threshold) | (a == 1.0) | (b == 1.0)

        mode = VisualizationMode(self.params.visualization_mode)
        rgb = MODE_FUNCS[mode](ga, gb, self.color_a, self.color_b)
        np.floor(rgb, out=rgb)
        np.clip(rgb, 0, 255, out=rgb)
        rgb[background] = self.color_a
        return rgb.astype(np.uint8)

    def map_color(self, a, b):
        """Map one (a, b) pair to an (r, g, b) tuple of ints."""
        rgb = self.map_cells(np.array([a]), np.array([b]))[0]
        return tuple(int(c) for c in rgb)
