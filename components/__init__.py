"""components — ECS component dataclasses, organised by domain.

Submodules
----------
pulse      GeneratorStateType, GeneratorState, GeneratorVisuals,
           PulseGenerator, ZoneClock
rendering  Identity, Appearance
dev_log    DevLog (ring-buffer resource)

All public names are re-exported here so code can do
``from components import PulseGenerator``.
"""

# ── Pulse generators ─────────────────────────────────────────────────
from components.pulse import (
    GeneratorStateType, GeneratorState, GeneratorVisuals, PulseGenerator, ZoneClock,
)

# ── Rendering ────────────────────────────────────────────────────────
from components.rendering import Identity, Appearance

# ── World resources / singletons ─────────────────────────────────────
from components.dev_log import DevLog

__all__ = [
    # pulse
    "GeneratorStateType", "GeneratorState", "GeneratorVisuals",
    "PulseGenerator", "ZoneClock",
    # rendering
    "Identity", "Appearance",
    # resources
    "DevLog",
]
