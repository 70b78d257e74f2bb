"""
Reaction-Diffusion Viewer - Entry Point

Usage:
    python -m reaction_diffusion [preset] [--size N] [--resolution N]
                                 [--headless STEPS] [--list]

Examples:
    python -m reaction_diffusion
    python -m reaction_diffusion maze
    python -m reaction_diffusion swirl --size 600 --resolution 2
    python -m reaction_diffusion coral --headless 500

Use --list to see all available presets.
"""

import sys
import time

from .params import ParameterError
from .presets import PRESET_ORDER, list_presets


def headless(preset, display_size, resolution, steps):
    """Run N ticks without a window and print grid statistics."""
    from .simulator import RDSimulator

    sim = RDSimulator(preset, display_size=display_size)
    if resolution is not None:
        sim.set_params(resolution=resolution)

    start = time.perf_counter()
    report_every = max(1, steps // 10)
    for i in range(steps):
        sim.tick()
        if (i + 1) % report_every == 0:
            s = sim.stats
            print(f"  gen {s['generation']:6d}  mean_a {s['mean_a']:.4f}  "
                  f"mean_b {s['mean_b']:.4f}  B {s['b_pct']:5.1f}%")
    elapsed = time.perf_counter() - start
    print(f"[RD] {steps} ticks in {elapsed:.2f}s "
          f"({steps / max(elapsed, 1e-9):.1f} ticks/s)")


def main():
    preset = "coral"
    display_size = 800
    resolution = None
    headless_steps = 0

    args = sys.argv[1:]
    i = 0
    try:
        while i < len(args):
            arg = args[i]
            if arg == "--size" and i + 1 < len(args):
                display_size = int(args[i + 1])
                i += 2
            elif arg == "--resolution" and i + 1 < len(args):
                resolution = int(args[i + 1])
                i += 2
            elif arg == "--headless" and i + 1 < len(args):
                headless_steps = int(args[i + 1])
                i += 2
            elif arg == "--list":
                print("\nAvailable presets:")
                for key, name, desc in list_presets():
                    print(f"    {key:12s} {name:12s} {desc}")
                print()
                return
            elif arg in ("--help", "-h"):
                print(__doc__)
                return
            elif arg in PRESET_ORDER:
                preset = arg
                i += 1
            else:
                print(f"Unknown argument: {arg}")
                print("Use --list to see available presets")
                return
    except ValueError:
        print(f"Expected an integer after {args[i]}")
        return

    try:
        if headless_steps > 0:
            print(f"Headless mode: {preset} @ {display_size}px, {headless_steps} ticks")
            headless(preset, display_size, resolution, headless_steps)
            return

        from .viewer import Viewer

        print("Starting Reaction-Diffusion Viewer")
        print(f"  Preset: {preset}")
        print(f"  Window: {display_size}x{display_size}")
        print()

        viewer = Viewer(display_size=display_size, start_preset=preset,
                        resolution=resolution)
        viewer.run()
    except ParameterError as e:
        print(f"Invalid parameter: {e}")


if __name__ == "__main__":
    main()
