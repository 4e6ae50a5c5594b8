"""scenes/pulse_scene.py — Interactive pulse generator board.

Every zone is a column; every generator on it is a card showing its
cycle step, remaining time and charge pips.  The feed at the bottom
shows radio announcements and popups as the ``SceneHost`` receives
them.

Controls
--------
Click        press the generator (activate)
E            examine the selected generator
U            upgrade its parts (rating + 1)
Del          remove the selected generator
P            pause / resume the selected generator's zone
X            remove the selected generator's zone
R            end the round (session reset)
F            toggle effect failure
L            show / hide the dev log panel
F4           hot-reload tuning
"""

from __future__ import annotations
import random
from collections import deque
from typing import TYPE_CHECKING, Any

import pygame

from core import tuning
from core.events import (
    EventBus, Examined, GeneratorRemoved, IN_ROUND, InteractHand,
    PartsRefreshed, POST_ROUND, RunLevelChanged, ZoneRemoved,
)
from components import (
    Appearance, DevLog, GeneratorStateType, GeneratorVisuals, Identity,
    PulseGenerator,
)
from logic.pulse import PulseGeneratorSystem, PulseHost
from logic.tick import tick_systems
from simulation.zone_registry import ZoneRegistry

if TYPE_CHECKING:
    from core.app import App
    from core.ecs import World


# ── Colours ──────────────────────────────────────────────────────────

BG = (18, 20, 26)
CARD = (38, 42, 54)
CARD_SEL = (60, 66, 90)
TEXT = (220, 220, 220)
DIM = (130, 130, 140)
FEED = (170, 200, 255)

STATE_COLORS: dict[GeneratorStateType, tuple[int, int, int]] = {
    GeneratorStateType.INACTIVE: (90, 90, 100),
    GeneratorStateType.ACTIVATING: (240, 200, 60),
    GeneratorStateType.ENGAGED: (80, 220, 120),
    GeneratorStateType.COOLING_DOWN: (240, 130, 60),
    GeneratorStateType.RECHARGING: (200, 70, 70),
}

CARD_W, CARD_H = 200, 86
FEED_LINES = 8
LOG_W = 330


# ═══════════════════════════════════════════════════════════════════
#  Host
# ═══════════════════════════════════════════════════════════════════

class SceneHost(PulseHost):
    """``PulseHost`` that renders into components and a text feed."""

    def __init__(self, world: World | None = None):
        super().__init__(world)
        self.feed: deque[str] = deque(maxlen=FEED_LINES)
        self.fail_effects = False

    def text(self, key: str, args: dict[str, Any]) -> str:
        template = tuning.get("pulse.messages", key)
        if not template:
            return key
        try:
            return template.format(**args)
        except (KeyError, ValueError):
            return key

    def _name(self, eid: int) -> str:
        ident = self.world.get(eid, Identity) if self.world else None
        return ident.name if ident else f"#{eid}"

    def fire_effect(self, eid, magnitude, radius, duration):
        chance = float(tuning.get("pulse.demo", "failure_chance", 0.0))
        if self.fail_effects or random.random() < chance:
            self.feed.append(f"{self._name(eid)}: pulse fizzled")
            return False
        app = self.world.get(eid, Appearance) if self.world else None
        if app is not None:
            app.flash = 1.0
        return True

    def notify(self, eid, channel, key, **args):
        self.feed.append(f"[{channel}] {self.text(key, args)}")

    def popup(self, eid, key, user):
        self.feed.append(f"{self._name(eid)}: {self.text(key, {})}")

    def set_visual(self, eid, key, value):
        app = self.world.get(eid, Appearance) if self.world else None
        if app is not None:
            app.data[key] = value

    def play_sound(self, eid, sound):
        app = self.world.get(eid, Appearance) if self.world else None
        if app is not None:
            app.flash = max(app.flash, 0.4)


# ═══════════════════════════════════════════════════════════════════
#  Scene
# ═══════════════════════════════════════════════════════════════════

class PulseScene:
    """Board of zones and their generators.

    ``App.run`` calls ``on_enter`` once, then ``handle_event`` / ``update``
    / ``draw`` every frame.
    """

    def __init__(self):
        self.host: SceneHost | None = None
        self.system: PulseGeneratorSystem | None = None
        self.selected: int | None = None
        self._rects: dict[int, pygame.Rect] = {}
        self._ratings: dict[int, int] = {}
        self.show_log = True

    # ── Lifecycle ────────────────────────────────────────────────────

    def on_enter(self, app: App):
        if self.system is not None:
            return
        world = app.world
        bus = world.res(EventBus)
        if bus is None:
            bus = EventBus()
            world.set_res(bus)
        self.host = SceneHost(world)
        self.system = PulseGeneratorSystem(world, host=self.host)
        self.system.subscribe(bus)
        # Runs after the system's handler, so generators are reset
        # while still placed on the zone.
        bus.subscribe("ZoneRemoved", lambda ev: self._drop_zone(app, ev.zone))

    def _drop_zone(self, app: App, zone: str):
        for eid in app.world.zone_drop(zone):
            app.world.kill(eid)
        self.host.feed.append(f"zone {zone} removed")

    # ── Input ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        bus = app.world.res(EventBus)
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for eid, rect in self._rects.items():
                if rect.collidepoint(event.pos):
                    self.selected = eid
                    bus.emit(InteractHand(eid=eid, user=0))
                    break
            return
        if event.type != pygame.KEYDOWN:
            return

        sel = self.selected
        if sel is not None and not app.world.alive(sel):
            sel = self.selected = None

        if event.key == pygame.K_F4:
            tuning.reload()
        elif event.key == pygame.K_l:
            self.show_log = not self.show_log
        elif event.key == pygame.K_f:
            self.host.fail_effects = not self.host.fail_effects
            self.host.feed.append(
                f"effect failure {'ON' if self.host.fail_effects else 'OFF'}")
        elif event.key == pygame.K_r:
            bus.emit(RunLevelChanged(old=IN_ROUND, new=POST_ROUND))
            self.host.feed.append("round ended")
        elif sel is None:
            return
        elif event.key == pygame.K_e:
            ev = Examined(eid=sel, lines=[])
            bus.emit(ev)
            bus.drain()
            for key, args in ev.lines:
                self.host.feed.append(self.host.text(key, args))
        elif event.key == pygame.K_u:
            rating = self._ratings.get(sel, 1) + 1
            self._ratings[sel] = rating
            bus.emit(PartsRefreshed(eid=sel, rating=rating))
        elif event.key == pygame.K_DELETE:
            bus.emit(GeneratorRemoved(eid=sel))
            app.world.kill(sel)
            self.selected = None
        elif event.key == pygame.K_p:
            self._toggle_pause(app.world.zone_of(sel))
        elif event.key == pygame.K_x:
            zone = app.world.zone_of(sel)
            if zone is not None:
                bus.emit(ZoneRemoved(zone=zone))
            self.selected = None

    def _toggle_pause(self, zone: str | None):
        if zone is None:
            return
        registry = self.system.registry
        if registry.is_paused(zone):
            registry.resume(zone)
            self.host.feed.append(f"zone {zone} resumed")
        else:
            registry.pause(zone)
            self.host.feed.append(f"zone {zone} paused")

    # ── Update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        scale = float(tuning.get("pulse.demo", "time_scale", 1.0))
        tick_systems(app.world, dt * scale)
        for _, appearance in app.world.all_of(Appearance):
            if appearance.flash > 0:
                appearance.flash = max(0.0, appearance.flash - dt)

    # ── Draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill(BG)
        world = app.world
        registry = world.res(ZoneRegistry)
        zones = sorted(z for z in world.zones() if world.zone_entities(z))
        self._rects.clear()

        board_w = surface.get_width() - (LOG_W if self.show_log else 0)
        col_w = board_w // max(1, len(zones))
        for i, zone in enumerate(zones):
            x = i * col_w + 10
            clock = registry.get(zone) if registry is not None else None
            t = clock.current_time if clock else 0.0
            paused = " (paused)" if registry is not None and registry.is_paused(zone) else ""
            app.draw_text(surface, f"{zone}{paused}", x, 10, TEXT, app.font_lg)
            app.draw_text(surface, f"t = {t:7.1f}s", x, 32, DIM, app.font_sm)

            y = 52
            for eid in sorted(world.zone_entities(zone)):
                gen = world.get(eid, PulseGenerator)
                if gen is None:
                    continue
                rect = pygame.Rect(x, y, min(CARD_W, col_w - 20), CARD_H)
                self._rects[eid] = rect
                self._draw_card(surface, app, eid, gen, rect, t)
                y += CARD_H + 8

        if self.show_log:
            self._draw_log(surface, app, board_w)
        self._draw_feed(surface, app)

    def _draw_card(self, surface, app: App, eid: int, gen: PulseGenerator,
                   rect: pygame.Rect, now: float):
        appearance = app.world.get(eid, Appearance)
        ident = app.world.get(eid, Identity)
        pygame.draw.rect(surface, CARD_SEL if eid == self.selected else CARD,
                         rect, border_radius=4)

        kind = gen.state.state_type
        color = STATE_COLORS[kind]
        blink = appearance and (appearance.data.get(GeneratorVisuals.READY_BLINKING)
                                or appearance.data.get(GeneratorVisuals.UNREADY_BLINKING))
        if blink and (pygame.time.get_ticks() // 300) % 2:
            color = tuple(c // 2 for c in color)
        if appearance and appearance.flash > 0:
            color = (255, 255, 255)
        pygame.draw.circle(surface, color, (rect.right - 14, rect.y + 14), 7)

        name = ident.name if ident else f"#{eid}"
        app.draw_text(surface, name, rect.x + 8, rect.y + 6, TEXT)
        app.draw_text(surface, kind.value, rect.x + 8, rect.y + 26, color, app.font_sm)
        if gen.state.until is not None:
            app.draw_text(surface, f"{max(0.0, gen.state.until - now):5.1f}s",
                          rect.x + 110, rect.y + 26, DIM, app.font_sm)

        pip_w = (rect.width - 16) // gen.charge_capacity
        for i in range(gen.charge_capacity):
            pip = pygame.Rect(rect.x + 8 + i * pip_w, rect.y + 50, pip_w - 3, 10)
            filled = i < gen.charge_remaining
            pygame.draw.rect(surface, (90, 170, 255) if filled else (50, 55, 70), pip)
        app.draw_text(surface, f"cd {gen.cooldown_time:.0f}s  prime {gen.activating_time:.1f}s",
                      rect.x + 8, rect.y + 66, DIM, app.font_sm)

    def _draw_log(self, surface, app: App, left: int):
        log = app.world.res(DevLog)
        bottom = surface.get_height() - 18 * FEED_LINES - 36
        pygame.draw.line(surface, DIM, (left, 0), (left, bottom))
        app.draw_text(surface, "dev log", left + 8, 10, TEXT)
        rows = (bottom - 34) // 14
        if log is None or rows <= 0:
            return
        for i, e in enumerate(log.recent(rows)):
            line = f"{e['t']:6.1f} {e['zone'][:9]:<9} #{e['eid']} {e['msg']}"
            app.draw_text(surface, line, left + 8, 34 + i * 14, DIM, app.font_sm)

    def _draw_feed(self, surface, app: App):
        h = surface.get_height()
        top = h - 18 * FEED_LINES - 30
        pygame.draw.line(surface, DIM, (0, top - 6), (surface.get_width(), top - 6))
        for i, line in enumerate(self.host.feed):
            app.draw_text(surface, line, 10, top + i * 18, FEED)
        app.draw_text(surface,
                      "click activate  E examine  U upgrade  Del remove  "
                      "P pause  X drop zone  R end round  F fail  L log  F4 reload",
                      10, h - 20, DIM, app.font_sm)
