"""logic/pulse/lifecycle.py — Removal and reset paths.

These bypass the normal transition table: a generator caught by one
of them is forced straight to INACTIVE, whatever step it was on.

    zone removed       → drop the zone clock, reset every generator that
                         was cycling on it or still placed on it
    generator removed  → reset it and take it off its zone's list
    round ended        → drop every zone clock, reset every generator
                         that was cycling anywhere
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components.dev_log import DevLog
from components.pulse import GeneratorState, PulseGenerator
from core.events import IN_ROUND
from logic.pulse.charge import update_charge_appearance
from logic.pulse.host import host_for
from logic.pulse.state_machine import update_appearance
from simulation.zone_registry import ZoneRegistry

if TYPE_CHECKING:
    from core.ecs import World


def force_inactive(world: World, eid: int, gen: PulseGenerator,
                   reason: str, zone: str | None = None) -> bool:
    """Reset *gen* to INACTIVE.  Returns False if it already was."""
    if gen.state.is_inactive:
        return False
    old = gen.state.state_type
    gen.state = GeneratorState.INACTIVE
    host = host_for(world)
    update_appearance(host, eid, gen)
    update_charge_appearance(host, eid, gen, 0.0)
    log = world.res(DevLog)
    if log is not None:
        log.record(eid, "reset", f"{old.value} → inactive ({reason})", zone=zone)
    return True


def on_zone_removed(world: World, zone: str) -> list[int]:
    """Forget *zone* and reset every generator that referenced it.

    Returns the ids of generators that were reset.
    """
    registry = world.res(ZoneRegistry)
    dropped = registry.clear_zone(zone) if registry is not None else []
    host = host_for(world)

    candidates = list(dropped)
    for eid, gen in world.all_of(PulseGenerator):
        if eid not in candidates and not gen.state.is_inactive \
                and host.zone_of(eid) == zone:
            candidates.append(eid)

    reset: list[int] = []
    for eid in candidates:
        # Placed here but cycling on another zone's clock.
        other = registry.zone_for(eid) if registry is not None else None
        if other is not None:
            registry.deregister_active(other, eid)
        gen = world.get(eid, PulseGenerator)
        if gen is not None and force_inactive(world, eid, gen, "zone removed", zone):
            reset.append(eid)
    if reset:
        print(f"[PULSE] zone {zone} removed — reset {len(reset)} generator(s)")
    return reset


def on_generator_removed(world: World, eid: int,
                         gen: PulseGenerator | None = None) -> bool:
    """Reset a generator that is being destroyed and deregister it.

    *gen* may be passed explicitly when the component is already gone
    from the world.  Returns True if the generator was reset.
    """
    if gen is None:
        gen = world.get(eid, PulseGenerator)

    registry = world.res(ZoneRegistry)
    zone = registry.zone_for(eid) if registry is not None else None
    if zone is not None:
        registry.deregister_active(zone, eid)

    if gen is None:
        return False
    return force_inactive(world, eid, gen, "generator removed", zone)


def on_run_level_changed(world: World, new_level: str) -> int:
    """Reset the session when the round is left; ignore entering it."""
    if new_level == IN_ROUND:
        return 0
    return reset_session(world)


def reset_session(world: World) -> int:
    """Clear all zone bookkeeping.  Returns the number of generators reset."""
    registry = world.res(ZoneRegistry)
    if registry is None:
        return 0
    count = 0
    for eid in registry.clear_all():
        gen = world.get(eid, PulseGenerator)
        if gen is not None and force_inactive(world, eid, gen, "round ended"):
            count += 1
    return count
