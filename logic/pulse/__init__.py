"""logic.pulse — Pulse generator cycle, zone clocks and lifecycle.

Submodules
----------
host           PulseHost (outside-world collaborators), host_for
errors         GeneratorNotOnZoneError, UnknownStateError
charge         compute_charge, update_charge_appearance
state_machine  start_generator, transition, next_state, update_appearance
scheduler      pulse_generator_system (per-frame update)
lifecycle      on_zone_removed, on_generator_removed, reset_session
upgrades       scaled_duration, apply_part_rating, delay_upgrade_ratio
examine        describe, examine_lines
system         PulseGeneratorSystem façade
"""

from logic.pulse.host import PulseHost, host_for
from logic.pulse.errors import GeneratorNotOnZoneError, UnknownStateError
from logic.pulse.charge import IDLE_CHARGE, compute_charge, update_charge_appearance
from logic.pulse.state_machine import (
    start_generator, transition, next_state, update_appearance,
)
from logic.pulse.scheduler import pulse_generator_system
from logic.pulse.lifecycle import (
    force_inactive, on_zone_removed, on_generator_removed,
    on_run_level_changed, reset_session,
)
from logic.pulse.upgrades import scaled_duration, apply_part_rating, delay_upgrade_ratio
from logic.pulse.examine import describe, examine_lines
from logic.pulse.system import PulseGeneratorSystem

__all__ = [
    "PulseHost", "host_for",
    "GeneratorNotOnZoneError", "UnknownStateError",
    "IDLE_CHARGE", "compute_charge", "update_charge_appearance",
    "start_generator", "transition", "next_state", "update_appearance",
    "pulse_generator_system",
    "force_inactive", "on_zone_removed", "on_generator_removed",
    "on_run_level_changed", "reset_session",
    "scaled_duration", "apply_part_rating", "delay_upgrade_ratio",
    "describe", "examine_lines",
    "PulseGeneratorSystem",
]
