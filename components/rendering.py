"""components.rendering — Visual identity and display state."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Identity:
    name: str = "unnamed"
    kind: str = "generator"      # "generator", "user", "object"


@dataclass
class Appearance:
    """Last value pushed for each visual key (``GeneratorVisuals``).

    Written by the scene's host, read by the renderer.  ``flash`` is a
    countdown (seconds) used for one-shot cues such as the activation
    sound.
    """
    data: dict[Any, Any] = field(default_factory=dict)
    flash: float = 0.0
