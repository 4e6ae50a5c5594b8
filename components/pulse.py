"""components.pulse — Pulse generator state, config and zone clocks.

A pulse generator walks a fixed cycle::

    INACTIVE → ACTIVATING → ENGAGED → COOLING_DOWN → RECHARGING → INACTIVE

Deadlines (``GeneratorState.until``) are absolute *zone* times, read
from the ``ZoneClock`` of the zone the generator sits on.  All times
are seconds.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class GeneratorStateType(Enum):
    INACTIVE = "inactive"
    ACTIVATING = "activating"
    ENGAGED = "engaged"
    COOLING_DOWN = "cooling_down"
    RECHARGING = "recharging"


@dataclass(frozen=True)
class GeneratorState:
    """Current cycle step plus the zone time it expires at.

    ``until`` is ``None`` exactly when the generator is INACTIVE.
    """
    state_type: GeneratorStateType = GeneratorStateType.INACTIVE
    until: float | None = None

    @property
    def is_inactive(self) -> bool:
        return self.state_type is GeneratorStateType.INACTIVE


GeneratorState.INACTIVE = GeneratorState()


class GeneratorVisuals(Enum):
    """Appearance keys pushed to the presentation layer."""
    READY_BLINKING = "ready_blinking"        # priming
    READY = "ready"                          # engaged
    UNREADY = "unready"                      # recharging
    UNREADY_BLINKING = "unready_blinking"    # cooling down
    CHARGE_STATE = "charge_state"            # int, 0..charge_capacity


@dataclass
class PulseGenerator:
    """Per-generator timing record and fixed configuration.

    ``*_time`` fields are the effective durations; ``activating_time``
    and ``cooldown_time`` are re-derived from their ``base_*`` values
    whenever machine parts change (see ``logic.pulse.upgrades``).
    """
    state: GeneratorState = field(default_factory=lambda: GeneratorState.INACTIVE)

    base_activating_time: float = 5.0
    base_cooldown_time: float = 300.0
    part_rating_delay: float = 0.8       # multiplier per part rating above 1
    machine_part_delay: str = "capacitor"

    activating_time: float = 5.0
    engaged_time: float = 60.0
    cooling_down_time: float = 10.0
    cooldown_time: float = 300.0

    channel: str = "engineering"
    activated_sound: str = "pulse_activate"

    # Fixed effect parameters handed to the effect collaborator.
    emp_range: float = 100.0
    emp_energy: float = 50000.0
    emp_duration: float = 60.0

    charge_capacity: int = 5
    charge_remaining: int = 5
    previous_charge: int = 5

    def __post_init__(self):
        if self.charge_capacity < 1:
            raise ValueError(f"charge_capacity must be >= 1, got {self.charge_capacity}")
        for name in ("activating_time", "engaged_time", "cooling_down_time",
                     "cooldown_time", "base_activating_time", "base_cooldown_time"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")


@dataclass
class ZoneClock:
    """Per-zone time accumulator plus the generators cycling on it.

    ``active_generators`` keeps insertion order so deadline checks run
    in a stable order every tick.  Holds ids only, never components.
    """
    current_time: float = 0.0
    active_generators: list[int] = field(default_factory=list)
