"""logic/pulse/state_machine.py — Generator cycle transitions.

Two entry points:

``start_generator``  — someone tried to switch the generator on.
``transition``       — the current state's deadline has passed.

Both read the world's ``ZoneRegistry``, ``PulseHost`` and (optional)
``EventBus`` / ``DevLog`` resources.  ``next_state`` is the pure part
of ``transition``: given the current state, the zone time and whether
the effect fired, it returns the state to enter.

Timeout table (``t`` = zone time)::

    ACTIVATING   → ENGAGED       until t + engaged_time       (effect fired)
                 → RECHARGING    until t + cooldown_time      (effect failed)
    ENGAGED      → COOLING_DOWN  until t + cooling_down_time
    COOLING_DOWN → RECHARGING    until t + cooldown_time
    RECHARGING   → INACTIVE
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components.dev_log import DevLog
from components.pulse import (
    GeneratorState, GeneratorStateType, GeneratorVisuals, PulseGenerator,
)
from core.events import EventBus, GeneratorActivated
from logic.pulse.charge import update_charge_appearance
from logic.pulse.errors import GeneratorNotOnZoneError, UnknownStateError
from logic.pulse.host import PulseHost, host_for
from simulation.zone_registry import ZoneRegistry

if TYPE_CHECKING:
    from core.ecs import World

_S = GeneratorStateType

# Message keys handed to the host.  Localisation happens out there.
MSG_ACTIVATE_SUCCESS = "pulse-system-report-activate-success"
MSG_ALREADY_ACTIVE = "pulse-system-report-already-active"
MSG_RECHARGING = "pulse-system-report-recharging"
MSG_NO_ZONE = "pulse-system-report-no-zone"
MSG_ANNOUNCE_ACTIVE = "pulse-system-announcement-active"
MSG_ANNOUNCE_COOLING_DOWN = "pulse-system-announcement-cooling-down"


def _registry(world: World) -> ZoneRegistry:
    registry = world.res(ZoneRegistry)
    if registry is None:
        registry = ZoneRegistry()
        world.set_res(registry)
    return registry


def _log(world: World, eid: int, cat: str, msg: str, zone: str | None,
         t: float) -> None:
    log = world.res(DevLog)
    if log is not None:
        log.record(eid, cat, msg, zone=zone, t=t)


# ── Appearance ───────────────────────────────────────────────────────

def update_appearance(host: PulseHost, eid: int, gen: PulseGenerator) -> None:
    kind = gen.state.state_type
    host.set_visual(eid, GeneratorVisuals.READY_BLINKING, kind is _S.ACTIVATING)
    host.set_visual(eid, GeneratorVisuals.READY, kind is _S.ENGAGED)
    host.set_visual(eid, GeneratorVisuals.UNREADY, kind is _S.RECHARGING)
    host.set_visual(eid, GeneratorVisuals.UNREADY_BLINKING, kind is _S.COOLING_DOWN)


# ── Activation ───────────────────────────────────────────────────────

def start_generator(world: World, eid: int, gen: PulseGenerator,
                    user: int | None = None) -> bool:
    """Handle an activation request.  Returns True if the cycle started.

    Only an INACTIVE generator starts; any other state answers the user
    with a popup and leaves ``state`` untouched.  Raises
    ``GeneratorNotOnZoneError`` if an inactive generator sits on no zone,
    after telling the user so.
    """
    host = host_for(world)
    kind = gen.state.state_type

    if kind is _S.INACTIVE:
        zone = host.zone_of(eid)
        if zone is None:
            host.popup(eid, MSG_NO_ZONE, user)
            raise GeneratorNotOnZoneError(eid)

        host.popup(eid, MSG_ACTIVATE_SUCCESS, user)
        clock = _registry(world).register_active(zone, eid)
        host.play_sound(eid, gen.activated_sound)
        gen.state = GeneratorState(_S.ACTIVATING,
                                   clock.current_time + gen.activating_time)

        bus = world.res(EventBus)
        if bus is not None:
            bus.emit(GeneratorActivated(eid=eid, zone=zone))

        host.notify(eid, gen.channel, MSG_ACTIVATE_SUCCESS,
                    zone=host.zone_name(zone))
        _log(world, eid, "activate", "inactive → activating", zone,
             clock.current_time)
        update_appearance(host, eid, gen)
        return True

    if kind in (_S.ACTIVATING, _S.ENGAGED):
        host.popup(eid, MSG_ALREADY_ACTIVE, user)
    elif kind in (_S.COOLING_DOWN, _S.RECHARGING):
        host.popup(eid, MSG_RECHARGING, user)
    else:
        raise UnknownStateError(kind)
    return False


# ── Timeouts ─────────────────────────────────────────────────────────

def next_state(gen: PulseGenerator, now: float,
               effect_fired: bool = True) -> GeneratorState:
    """State *gen* moves to when its current deadline expires at *now*."""
    kind = gen.state.state_type
    if kind is _S.ACTIVATING:
        if effect_fired:
            return GeneratorState(_S.ENGAGED, now + gen.engaged_time)
        return GeneratorState(_S.RECHARGING, now + gen.cooldown_time)
    if kind is _S.ENGAGED:
        return GeneratorState(_S.COOLING_DOWN, now + gen.cooling_down_time)
    if kind is _S.COOLING_DOWN:
        return GeneratorState(_S.RECHARGING, now + gen.cooldown_time)
    if kind is _S.RECHARGING or kind is _S.INACTIVE:
        return GeneratorState.INACTIVE
    raise UnknownStateError(kind)


def _fire(host: PulseHost, eid: int, gen: PulseGenerator) -> bool:
    fired = host.fire_effect(eid, gen.emp_energy, gen.emp_range, gen.emp_duration)
    if fired:
        host.notify(eid, gen.channel, MSG_ANNOUNCE_ACTIVE,
                    timeLeft=gen.engaged_time)
    return fired


def transition(world: World, eid: int, gen: PulseGenerator, now: float,
               zone: str | None = None) -> GeneratorState:
    """Advance *gen* exactly one step of the cycle at zone time *now*."""
    host = host_for(world)
    old = gen.state.state_type

    if old is _S.ACTIVATING:
        gen.state = next_state(gen, now, _fire(host, eid, gen))
    elif old is _S.ENGAGED:
        host.notify(eid, gen.channel, MSG_ANNOUNCE_COOLING_DOWN,
                    timeLeft=gen.cooling_down_time)
        gen.state = next_state(gen, now)
    else:
        # COOLING_DOWN → RECHARGING stays silent on the radio.
        gen.state = next_state(gen, now)

    _log(world, eid, "transition",
         f"{old.value} → {gen.state.state_type.value}", zone, now)
    update_appearance(host, eid, gen)
    update_charge_appearance(host, eid, gen, now)
    return gen.state
