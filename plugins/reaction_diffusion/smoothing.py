"""
Temporal Frame Smoothing

Blends each freshly rendered frame with the previous one to suppress
flicker from fast-changing cells:

    out = current * (1 - factor) + previous * factor

factor = 0 disables smoothing (pass-through). Alpha is never blended,
frames stay fully opaque.
"""

import numpy as np


def smooth(current, previous, factor):
    """Exponential blend of two RGBA uint8 frames.

    Computed as current + (previous - current) * factor, which equals the
    weighted sum above and returns `current` exactly when the frames match.

    Args:
        current: (H, W, 4) uint8 frame just rendered
        previous: (H, W, 4) uint8 frame from the previous tick
        factor: weight of the previous frame in [0, 1)

    Returns:
        New (H, W, 4) uint8 frame with RGB blended and alpha from current
    """
    out = current.copy()
    if factor <= 0:
        return out
    cur = current[..., :3].astype(np.float64)
    prev = previous[..., :3].astype(np.float64)
    blended = cur + (prev - cur) * factor
    out[..., :3] = blended.astype(np.uint8)
    return out


class TemporalSmoother:
    """Keeps the previous frame between ticks and blends against it.

    The retained buffer belongs to the render pipeline. It is re-seeded
    on the first call, after reset(), and whenever the frame shape changes
    (e.g. after a resolution change).
    """

    def __init__(self):
        self.previous = None

    def reset(self):
        self.previous = None

    def apply(self, frame, factor):
        """Blend frame against the retained one and retain the result.

        Args:
            frame: (H, W, 4) uint8 frame just rendered
            factor: smoothing factor in [0, 1)

        Returns:
            Blended frame (a new array; the retained copy is separate)
        """
        if self.previous is None or self.previous.shape != frame.shape:
            self.previous = frame.copy()
            return frame
        out = smooth(frame, self.previous, factor)
        np.copyto(self.previous, out)
        return out
