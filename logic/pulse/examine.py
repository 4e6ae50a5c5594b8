"""logic/pulse/examine.py — Read-only generator inspection.

``describe`` is the machine-readable view used by UIs and tests;
``examine_lines`` produces the localisation keys shown when a player
examines a generator up close.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, Any

from components.pulse import GeneratorStateType, PulseGenerator
from logic.pulse.errors import UnknownStateError
from logic.pulse.host import host_for
from logic.pulse.upgrades import delay_upgrade_ratio
from simulation.zone_registry import ZoneRegistry

if TYPE_CHECKING:
    from core.ecs import World
    from components.pulse import ZoneClock

_S = GeneratorStateType

_EXAMINE_KEYS = {
    _S.INACTIVE: "pulse-system-generator-examined-inactive",
    _S.ACTIVATING: "pulse-system-generator-examined-starting",
    _S.COOLING_DOWN: "pulse-system-generator-examined-cooling-down",
    _S.RECHARGING: "pulse-system-generator-examined-recharging",
    _S.ENGAGED: "pulse-system-generator-examined-active",
}

MSG_DELAY_UPGRADE = "pulse-system-generator-delay-upgrade"


def _clock_for(world: World, eid: int) -> ZoneClock | None:
    registry = world.res(ZoneRegistry)
    if registry is None:
        return None
    zone = registry.zone_for(eid) or host_for(world).zone_of(eid)
    return registry.get(zone)


def describe(world: World, eid: int) -> dict[str, Any] | None:
    """``{"state_type", "remaining_seconds"}`` for *eid*, or None.

    ``remaining_seconds`` is None while inactive or when no zone clock
    is known for the generator.
    """
    gen = world.get(eid, PulseGenerator)
    if gen is None:
        return None
    remaining = None
    clock = _clock_for(world, eid)
    if clock is not None and gen.state.until is not None:
        remaining = gen.state.until - clock.current_time
    return {"state_type": gen.state.state_type, "remaining_seconds": remaining}


def examine_lines(world: World, eid: int,
                  in_details_range: bool = True) -> list[tuple[str, dict]]:
    """Examine text as ``[(message_key, args), ...]``."""
    if not in_details_range:
        return []
    gen = world.get(eid, PulseGenerator)
    if gen is None:
        return []

    clock = _clock_for(world, eid)
    remaining = 0.0
    if clock is not None and gen.state.until is not None:
        remaining = gen.state.until - clock.current_time
    elif clock is None:
        print(f"[PULSE] no zone clock for generator {eid}, can't display remaining time")

    kind = gen.state.state_type
    key = _EXAMINE_KEYS.get(kind)
    if key is None:
        raise UnknownStateError(kind)

    if kind in (_S.RECHARGING, _S.ENGAGED):
        if clock is None:
            return []
        return [(key, {"timeLeft": math.ceil(remaining)})]
    return [(key, {})]


def upgrade_examine_line(gen: PulseGenerator) -> tuple[str, dict]:
    return MSG_DELAY_UPGRADE, {"percent": delay_upgrade_ratio(gen)}
