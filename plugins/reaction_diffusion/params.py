"""
Simulation Parameters

ParameterSet holds every tunable constant the simulation reads each tick:
diffusion rates, feed/kill, timestep, grid resolution, visualization mode,
colors and drop settings. It is plain mutable data owned by whatever
control surface drives the simulation (viewer keys, Scope UI, CLI).

Updates go through update(), which validates the whole candidate state
before touching anything, so a rejected update never leaves a half-applied
parameter set behind.
"""

import enum
import numbers


class ParameterError(ValueError):
    """Raised when a parameter value is outside its documented range."""


class VisualizationMode(str, enum.Enum):
    """How the two concentrations combine into a pixel color."""
    A = "a"
    B = "b"
    BLEND = "blend"
    SUBTRACT = "subtract"


MODE_ORDER = [VisualizationMode.A, VisualizationMode.B,
              VisualizationMode.BLEND, VisualizationMode.SUBTRACT]


def parse_color(value):
    """Normalize a color to an (r, g, b) tuple of ints in [0, 255].

    Accepts "#rrggbb" / "rrggbb" hex strings or any 3-element sequence.
    """
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) != 6:
            raise ParameterError(f"Bad hex color: {value!r}")
        try:
            packed = int(text, 16)
        except ValueError:
            raise ParameterError(f"Bad hex color: {value!r}") from None
        return ((packed >> 16) & 255, (packed >> 8) & 255, packed & 255)

    try:
        channels = tuple(value)
    except TypeError:
        raise ParameterError(f"Color must be hex or RGB triple: {value!r}") from None
    if len(channels) != 3:
        raise ParameterError(f"Color must have 3 channels: {value!r}")
    rgb = []
    for c in channels:
        if not isinstance(c, numbers.Real) or not 0 <= c <= 255:
            raise ParameterError(f"Color channel out of range: {value!r}")
        rgb.append(int(c))
    return tuple(rgb)


def color_to_hex(rgb):
    return "#{:02x}{:02x}{:02x}".format(*rgb)


class ParameterSet:
    """Mutable bundle of model constants, read fresh by the simulation each tick."""

    DEFAULTS = {
        "diffusion_a": 1.54,
        "diffusion_b": 1.99,
        "feed": 0.031,
        "kill": 0.048,
        "time_step": 0.7,
        "resolution": 3,
        "visualization_mode": VisualizationMode.BLEND,
        "color_a": (0, 0, 0),
        "color_b": (0, 0, 255),
        "drop_radius": 5.0,
        "color_threshold": 0.2,
        "smoothing_factor": 0.2,
        "paused": False,
        "random_drops": False,
        "drop_interval": 1.0,  # seconds between random drops
    }

    def __init__(self, **overrides):
        values = dict(self.DEFAULTS)
        unknown = set(overrides) - set(values)
        if unknown:
            raise ParameterError(f"Unknown parameters: {sorted(unknown)}")
        values.update(overrides)
        self._assign(self._normalize(values))

    def _assign(self, values):
        for key, val in values.items():
            setattr(self, key, val)

    def _normalize(self, values):
        """Coerce types (colors, mode) and validate. Returns a new dict."""
        values = dict(values)
        values["color_a"] = parse_color(values["color_a"])
        values["color_b"] = parse_color(values["color_b"])
        try:
            values["visualization_mode"] = VisualizationMode(values["visualization_mode"])
        except ValueError:
            raise ParameterError(
                f"Unknown visualization mode: {values['visualization_mode']!r}"
            ) from None
        errors = _check_ranges(values)
        if errors:
            raise ParameterError("; ".join(errors))
        return values

    def update(self, **changes):
        """Validate and apply a batch of changes atomically.

        Returns the set of keys whose value actually changed.
        Raises ParameterError (and applies nothing) on any violation.
        """
        unknown = set(changes) - set(self.DEFAULTS)
        if unknown:
            raise ParameterError(f"Unknown parameters: {sorted(unknown)}")
        candidate = self.get_params()
        candidate.update(changes)
        candidate = self._normalize(candidate)
        changed = {k for k in changes if candidate[k] != getattr(self, k)}
        self._assign(candidate)
        return changed

    def validate(self):
        """Re-check the current (possibly externally mutated) values."""
        self._normalize(self.get_params())

    def get_params(self):
        return {key: getattr(self, key) for key in self.DEFAULTS}

    def copy(self):
        return ParameterSet(**self.get_params())

    def __repr__(self):
        inner = ", ".join(f"{k}={v!r}" for k, v in self.get_params().items())
        return f"ParameterSet({inner})"


def _is_real(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _check_ranges(v):
    errors = []
    for key in ("diffusion_a", "diffusion_b", "time_step", "drop_radius", "drop_interval"):
        if not _is_real(v[key]) or not v[key] > 0:
            errors.append(f"{key} must be > 0 (got {v[key]!r})")
    for key in ("feed", "kill"):
        if not _is_real(v[key]) or not 0 < v[key] < 1:
            errors.append(f"{key} must be in (0, 1) (got {v[key]!r})")
    for key in ("color_threshold", "smoothing_factor"):
        if not _is_real(v[key]) or not 0 <= v[key] < 1:
            errors.append(f"{key} must be in [0, 1) (got {v[key]!r})")
    res = v["resolution"]
    if not isinstance(res, numbers.Integral) or isinstance(res, bool) or res <= 0:
        errors.append(f"resolution must be a positive integer (got {res!r})")
    return errors
