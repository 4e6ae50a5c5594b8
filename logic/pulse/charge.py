"""logic/pulse/charge.py — Quantised charge indicator.

Display-only.  The indicator counts *down* from ``charge_capacity``
while a generator is engaged and back *up* while it recharges, in
``charge_capacity`` equal steps of the state's duration::

    ENGAGED       level = time_left // (engaged_time  / capacity) + 1
    COOLING_DOWN  level = 0
    RECHARGING    level = capacity - time_left // (cooldown_time / capacity) - 1
    INACTIVE      level = IDLE_CHARGE
    ACTIVATING    level unchanged

``time_left`` is whole seconds, rounded half-to-even.  Results are
clamped into ``[0, capacity]``.
"""

from __future__ import annotations

from components.pulse import GeneratorStateType, GeneratorVisuals, PulseGenerator
from logic.pulse.errors import UnknownStateError
from logic.pulse.host import PulseHost

IDLE_CHARGE = 5


def _steps(time_left: int, duration: float, capacity: int) -> int:
    if duration <= 0:
        return 0
    return int(time_left // (duration / capacity))


def compute_charge(gen: PulseGenerator, now: float) -> int:
    """Charge level *gen* should display at zone time *now*."""
    state = gen.state
    capacity = gen.charge_capacity
    kind = state.state_type

    if kind is GeneratorStateType.INACTIVE:
        level = IDLE_CHARGE
    elif kind is GeneratorStateType.ACTIVATING:
        return gen.charge_remaining
    elif kind is GeneratorStateType.COOLING_DOWN:
        level = 0
    elif kind is GeneratorStateType.ENGAGED:
        time_left = round(state.until - now)
        level = _steps(time_left, gen.engaged_time, capacity) + 1
    elif kind is GeneratorStateType.RECHARGING:
        time_left = round(state.until - now)
        level = capacity - _steps(time_left, gen.cooldown_time, capacity) - 1
    else:
        raise UnknownStateError(kind)

    return max(0, min(capacity, level))


def update_charge_appearance(host: PulseHost, eid: int,
                             gen: PulseGenerator, now: float) -> bool:
    """Recompute the indicator; push it to *host* only if it moved.

    Returns True when a visual update was sent.
    """
    gen.charge_remaining = compute_charge(gen, now)
    if gen.previous_charge == gen.charge_remaining:
        return False
    host.set_visual(eid, GeneratorVisuals.CHARGE_STATE, gen.charge_remaining)
    gen.previous_charge = gen.charge_remaining
    return True
