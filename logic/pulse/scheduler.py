"""logic/pulse/scheduler.py — Per-frame pulse generator update.

Runs once per tick from ``logic.tick.tick_systems``.  For every zone
clock that has active generators and is not paused:

1. advance the zone clock by ``dt``
2. refresh each generator's charge indicator
3. transition generators whose deadline has passed (one step per tick)
4. after the scan, drop generators that came back to INACTIVE

Generators are never removed from a zone's list while it is being
scanned; removals are queued and applied once the scan is done.  A
generator that takes several steps' worth of ``dt`` in one frame
still moves a single step and catches up on following ticks.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components.dev_log import DevLog
from components.pulse import PulseGenerator
from logic.pulse.charge import update_charge_appearance
from logic.pulse.host import host_for
from logic.pulse.state_machine import transition
from simulation.zone_registry import ZoneRegistry

if TYPE_CHECKING:
    from core.ecs import World


def pulse_generator_system(world: World, dt: float) -> int:
    """Tick every zone clock.  Returns the number of transitions made."""
    registry = world.res(ZoneRegistry)
    if registry is None:
        return 0
    host = host_for(world)
    log = world.res(DevLog)
    transitions = 0

    for zone, clock in registry.items():
        if not clock.active_generators:
            continue
        # Paused zone: clock and generators stand still, deadlines keep.
        if registry.is_paused(zone):
            continue
        registry.advance(zone, dt)
        now = clock.current_time

        delete_queue: list[int] = []

        for eid in list(clock.active_generators):
            gen = world.get(eid, PulseGenerator) if world.alive(eid) else None
            if gen is None:
                print(f"[PULSE] generator {eid} on {zone} has no PulseGenerator — dropping")
                if log is not None:
                    log.record(eid, "stale", "missing component, dropped",
                               zone=zone, t=now)
                delete_queue.append(eid)
                continue

            update_charge_appearance(host, eid, gen, now)

            if gen.state.is_inactive:
                delete_queue.append(eid)
                continue
            if gen.state.until > now:
                continue

            transition(world, eid, gen, now, zone)
            transitions += 1
            if gen.state.is_inactive:
                delete_queue.append(eid)

        for eid in delete_queue:
            registry.deregister_active(zone, eid)

    return transitions
