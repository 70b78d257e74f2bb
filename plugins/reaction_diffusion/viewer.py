"""
Interactive Pygame Viewer for Gray-Scott Reaction-Diffusion

Thin display adapter around RDSimulator: each frame it ticks the
simulator once and blits the returned RGBA raster to the window.

Controls:
  SPACE       Pause / Resume
  ENTER       Restart (fresh grid, current params)
  1-5         Presets (coral, wormhole, eddy, swirl, maze)
  M           Cycle view mode (a / b / blend / subtract)
  D           Add a random drop
  T           Toggle timed random drops
  + / -       Resolution up / down (reinitializes the grid)
  H           Toggle HUD overlay
  Q / ESC     Quit
  Mouse L     Drop chemical B at the cursor
"""

import time
import numpy as np
import pygame

from .params import ParameterError
from .presets import PRESET_ORDER, get_preset
from .simulator import RDSimulator

TARGET_FPS = 60
MAX_RESOLUTION = 10


class Viewer:
    def __init__(self, display_size=800, start_preset="coral", resolution=None):
        self.simulator = RDSimulator(start_preset, display_size=display_size)
        if resolution is not None:
            self.simulator.set_params(resolution=resolution)
        self.display_size = display_size
        self.running = True
        self.show_hud = True
        self.fps_history = []

    @property
    def params(self):
        return self.simulator.params

    def _frame_surface(self, frame):
        # pygame surfaces are indexed [x, y]
        return pygame.surfarray.make_surface(frame[..., :3].swapaxes(0, 1).copy())

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        stats = self.simulator.stats
        preset = get_preset(self.simulator.preset_key)
        name = preset["name"] if preset else "Custom"
        cols, rows = self.simulator.grid.dimensions()
        mode = self.params.visualization_mode.value

        line = (f"{name}  |  Gen: {stats['generation']:,}  |  "
                f"B: {stats['b_pct']:.1f}%  |  {cols}x{rows}  |  "
                f"{mode}  |  FPS: {fps:.0f}")
        if self.params.paused:
            line = "[PAUSED]  " + line
        if self.params.random_drops:
            line += "  |  drops"

        padding = 6
        bg_height = 24
        bg_surface = pygame.Surface((self.display_size, bg_height), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))

        text_surface = self.hud_font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (padding + 4, padding))

    def _handle_click(self, pos):
        res = self.params.resolution
        self.simulator.add_drop(pos[0] / res, pos[1] / res)

    def _change_resolution(self, delta):
        res = self.params.resolution + delta
        if not 1 <= res <= MAX_RESOLUTION:
            return
        try:
            self.simulator.set_params(resolution=res)
        except ParameterError as e:
            print(f"[RD] {e}")

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.display_size, self.display_size))
        pygame.display.set_caption("Reaction Diffusion")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        self.simulator.restart()

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    self._handle_click(event.pos)

            frame = self.simulator.tick()

            screen.fill((0, 0, 0))
            if frame is not None:
                screen.blit(self._frame_surface(frame), (0, 0))

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)

            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(TARGET_FPS)

        pygame.quit()

    def _handle_keydown(self, event):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.simulator.toggle_pause()

        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.simulator.restart()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_m:
            mode = self.simulator.cycle_visualization_mode()
            print(f"[RD] View mode: {mode.value}")

        elif key == pygame.K_d:
            self.simulator.add_random_drop()

        elif key == pygame.K_t:
            self.params.random_drops = not self.params.random_drops

        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._change_resolution(1)

        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self._change_resolution(-1)

        # Preset selection (1-5)
        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self.simulator.apply_preset(PRESET_ORDER[idx])
