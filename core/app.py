"""
core/app.py — pygame window and frame loop

Owns the window, the frame clock and the ECS world, and drives a
single scene object: input, then ``update(dt)``, then ``draw``.

    app = App(title="Pulse Generators")
    app.run(PulseScene())

A scene is any object with ``on_enter(app)``, ``handle_event(event, app)``,
``update(dt, app)`` and ``draw(surface, app)``.  Esc or closing the
window quits.
"""

from __future__ import annotations
from typing import Any

import pygame
from core.ecs import World


class App:
    def __init__(self, title: str = "Pulse Generators",
                 size: tuple[int, int] = (960, 640), world: World | None = None):
        pygame.init()
        self.screen = pygame.display.set_mode(size)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.fps = 60
        self.running = True

        # Shared with the scene; resources (bus, registry, host) live here.
        self.world = world if world is not None else World()

        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 18)

    def run(self, scene: Any):
        scene.on_enter(self)
        while self.running:
            # Cap dt so a stalled window can't jump zone clocks ahead.
            dt = min(self.clock.tick(self.fps) / 1000.0, 0.25)

            for event in pygame.event.get():
                if event.type == pygame.QUIT or (
                        event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE):
                    self.running = False
                else:
                    scene.handle_event(event, self)

            scene.update(dt, self)
            scene.draw(self.screen, self)
            pygame.display.flip()

        pygame.quit()

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None) -> pygame.Rect:
        """Blit *text* at (x, y).  Returns the drawn rect."""
        img = (font or self.font).render(text, True, color)
        return surface.blit(img, (x, y))
