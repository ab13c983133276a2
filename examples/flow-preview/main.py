"""Flow Preview - plays the built-in flowframe presets in a window.

Controls:
  Space   Pause / resume
  Left    Seek back
  Right   Seek forward
  Tab     Next preset
  Esc     Quit
"""
from __future__ import annotations

import logging
import sys

import pygame

from flowframe import Player, default_registry

from ui.constants import BG_COLOR, FPS, SCREEN_H, SCREEN_W, SEEK_STEP
from ui.draw import draw_frame, draw_status_bar


class PreviewState:
    """Holds the registry, the active player and playback flags."""

    def __init__(self) -> None:
        self.registry = default_registry()
        self.names = self.registry.names()
        self.index = 0
        self.paused = False
        self.player = self._load()
        self.frame_state = self.player.step()

    @property
    def preset(self) -> str:
        return self.names[self.index]

    def _load(self) -> Player:
        return Player(self.registry.build(self.preset))

    def next_preset(self) -> None:
        self.index = (self.index + 1) % len(self.names)
        self.player = self._load()
        self.frame_state = self.player.step()

    def seek(self, delta: int) -> None:
        # The cursor sits one past the frame on screen.
        target = max(0, self.player.frame - 1 + delta)
        self.player.seek(target)
        self.frame_state = self.player.step()

    def advance(self) -> None:
        if not self.paused:
            self.frame_state = self.player.step()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_W, SCREEN_H))
    pygame.display.set_caption("Flow Preview - flowframe demo")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    state = PreviewState()
    tick_interval = state.player.clock.dt
    accumulator = 0.0
    running = True

    while running:
        dt = clock.tick(FPS) / 1000.0
        accumulator += dt

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    state.paused = not state.paused
                elif event.key == pygame.K_LEFT:
                    state.seek(-SEEK_STEP)
                elif event.key == pygame.K_RIGHT:
                    state.seek(SEEK_STEP)
                elif event.key == pygame.K_TAB:
                    state.next_preset()
                    tick_interval = state.player.clock.dt
                    accumulator = 0.0

        # --- Tick ---
        while accumulator >= tick_interval:
            state.advance()
            accumulator -= tick_interval

        # --- Render ---
        screen.fill(BG_COLOR)
        draw_frame(screen, font, state.frame_state)
        draw_status_bar(screen, font, state.preset, state.frame_state, state.paused)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
