"""logic/pulse/system.py — Pulse generator system façade.

Bundles the zone registry, the host and the per-frame update behind
the handful of calls the rest of the game makes::

    system = PulseGeneratorSystem(world, host=SceneHost(world))
    system.subscribe(world.res(EventBus))

    system.activate(eid, user)          # hand pressed on a generator
    system.tick(dt)                     # once per frame
    system.on_generator_removed(eid)
    system.on_zone_removed("outpost")
    system.on_session_reset()
    system.describe(eid)                # {"state_type", "remaining_seconds"}

The registry and host are stored as world resources, so a fresh
``World`` always gets an independent set of zone clocks.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

from components.dev_log import DevLog
from components.pulse import PulseGenerator
from core.events import (
    EventBus, Examined, GeneratorRemoved, InteractHand, PartsRefreshed,
    RunLevelChanged, ZoneRemoved,
)
from logic.pulse import lifecycle
from logic.pulse.examine import describe, examine_lines, upgrade_examine_line
from logic.pulse.host import PulseHost
from logic.pulse.scheduler import pulse_generator_system
from logic.pulse.state_machine import start_generator
from logic.pulse.upgrades import apply_part_rating
from simulation.zone_registry import ZoneRegistry

if TYPE_CHECKING:
    from core.ecs import World


class PulseGeneratorSystem:
    """Entry point for everything pulse-generator related."""

    def __init__(self, world: World, host: PulseHost | None = None,
                 registry: ZoneRegistry | None = None) -> None:
        self.world = world

        if registry is None:
            registry = world.res(ZoneRegistry)
        self.registry = registry if registry is not None else ZoneRegistry()
        world.set_res(self.registry)

        if host is None:
            host = world.res(PulseHost)
        self.host = host if host is not None else PulseHost(world)
        if self.host.world is None:
            self.host.world = world
        world.set_res(self.host, as_type=PulseHost)

        if world.res(DevLog) is None:
            world.set_res(DevLog())

    # ── Core operations ──────────────────────────────────────────────

    def activate(self, eid: int, user: int | None = None) -> bool:
        """Try to switch *eid* on.  Returns True if priming started."""
        gen = self.world.get(eid, PulseGenerator)
        if gen is None or not self.world.alive(eid):
            print(f"[PULSE] activate: entity {eid} is not a pulse generator")
            return False
        return start_generator(self.world, eid, gen, user)

    def tick(self, dt: float) -> int:
        return pulse_generator_system(self.world, dt)

    def on_generator_removed(self, eid: int,
                             gen: PulseGenerator | None = None) -> bool:
        return lifecycle.on_generator_removed(self.world, eid, gen)

    def on_zone_removed(self, zone: str) -> list[int]:
        return lifecycle.on_zone_removed(self.world, zone)

    def on_session_reset(self) -> int:
        return lifecycle.reset_session(self.world)

    def on_parts_refreshed(self, eid: int, rating: int) -> None:
        gen = self.world.get(eid, PulseGenerator)
        if gen is not None:
            apply_part_rating(gen, rating)

    # ── Inspection ───────────────────────────────────────────────────

    def describe(self, eid: int) -> dict[str, Any] | None:
        return describe(self.world, eid)

    def examine(self, eid: int, in_details_range: bool = True) -> list[tuple[str, dict]]:
        return examine_lines(self.world, eid, in_details_range)

    def upgrade_examine(self, eid: int) -> tuple[str, dict] | None:
        gen = self.world.get(eid, PulseGenerator)
        return upgrade_examine_line(gen) if gen is not None else None

    # ── Event wiring ─────────────────────────────────────────────────

    def subscribe(self, bus: EventBus) -> None:
        bus.subscribe("InteractHand", self._on_interact_hand)
        bus.subscribe("PartsRefreshed", self._on_parts_refreshed)
        bus.subscribe("GeneratorRemoved", self._on_generator_removed)
        bus.subscribe("ZoneRemoved", self._on_zone_removed)
        bus.subscribe("RunLevelChanged", self._on_run_level_changed)
        bus.subscribe("Examined", self._on_examined)

    def _on_interact_hand(self, ev: InteractHand) -> None:
        if ev.handled or not self.world.has(ev.eid, PulseGenerator):
            return
        ev.handled = True
        self.activate(ev.eid, ev.user)

    def _on_parts_refreshed(self, ev: PartsRefreshed) -> None:
        self.on_parts_refreshed(ev.eid, ev.rating)

    def _on_generator_removed(self, ev: GeneratorRemoved) -> None:
        self.on_generator_removed(ev.eid)

    def _on_zone_removed(self, ev: ZoneRemoved) -> None:
        self.on_zone_removed(ev.zone)

    def _on_run_level_changed(self, ev: RunLevelChanged) -> None:
        lifecycle.on_run_level_changed(self.world, ev.new)

    def _on_examined(self, ev: Examined) -> None:
        if ev.lines is None or not self.world.has(ev.eid, PulseGenerator):
            return
        ev.lines.extend(self.examine(ev.eid, ev.in_details_range))
