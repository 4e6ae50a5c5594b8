"""logic/entity_factory.py — Table-driven generator spawning.

``_GENERATOR_FIELDS`` maps descriptor keys to ``PulseGenerator`` fields
with a cast and a tuning-file default.  ``spawn_generator`` builds one
generator in code; ``spawn_from_descriptor`` builds one from a TOML
table; ``load_generators`` spawns every table in a file::

    [relay_a]
    name = "Relay A"
    zone = "outpost"
    [relay_a.pulse_generator]
    engaged_time = 30.0
"""

from __future__ import annotations
import tomllib
from pathlib import Path
from typing import Any, Callable

from core.ecs import World
from core.tuning import get as _tun
from components import Appearance, Identity, PulseGenerator
from logic.pulse.upgrades import apply_part_rating


# ── Field-schema helpers ─────────────────────────────────────────────

def _float(v: Any, default: float = 0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _str(v: Any, default: str = "") -> str:
    return str(v) if v is not None else default


# ── Field table ──────────────────────────────────────────────────────
# kwarg → (tuning section, tuning key, cast, hard default)

_GENERATOR_FIELDS: dict[str, tuple[str, str, Callable, Any]] = {
    "base_activating_time": ("pulse", "base_activating_time", _float, 5.0),
    "base_cooldown_time":   ("pulse", "base_cooldown_time",   _float, 300.0),
    "part_rating_delay":    ("pulse", "part_rating_delay",    _float, 0.8),
    "machine_part_delay":   ("pulse", "machine_part_delay",   _str, "capacitor"),
    "engaged_time":         ("pulse", "engaged_time",         _float, 60.0),
    "cooling_down_time":    ("pulse", "cooling_down_time",    _float, 10.0),
    "channel":              ("pulse", "channel",              _str, "engineering"),
    "activated_sound":      ("pulse", "activated_sound",      _str, "pulse_activate"),
    "charge_capacity":      ("pulse", "charge_capacity",      _int, 5),
    "emp_range":            ("pulse.effect", "range",         _float, 100.0),
    "emp_energy":           ("pulse.effect", "energy",        _float, 50000.0),
    "emp_duration":         ("pulse.effect", "duration",      _float, 60.0),
}


def build_generator(overrides: dict | None = None, rating: int = 1) -> PulseGenerator:
    """A ``PulseGenerator`` from tuning defaults plus *overrides*.

    Effective priming / cooldown times are derived from the base values
    and the part *rating*.
    """
    overrides = overrides or {}
    kwargs: dict[str, Any] = {}
    for name, (sec, key, cast, default) in _GENERATOR_FIELDS.items():
        raw = overrides.get(name)
        if raw is None:
            raw = _tun(sec, key, default)
        kwargs[name] = cast(raw, default)

    capacity = kwargs["charge_capacity"]
    gen = PulseGenerator(
        **kwargs,
        activating_time=kwargs["base_activating_time"],
        cooldown_time=kwargs["base_cooldown_time"],
        charge_remaining=capacity,
        previous_charge=capacity,
    )
    apply_part_rating(gen, _int(overrides.get("rating"), rating))
    return gen


def spawn_generator(world: World, zone: str | None, name: str = "",
                    **overrides) -> int:
    """Spawn a generator entity, placed on *zone* unless it is None."""
    eid = world.spawn()
    world.add(eid, build_generator(overrides))
    world.add(eid, Identity(name=name or f"generator_{eid}", kind="generator"))
    world.add(eid, Appearance())
    if zone is not None:
        world.zone_add(eid, zone)
    return eid


def spawn_from_descriptor(world: World, desc: dict, zone: str | None = None) -> int:
    """Create a generator from a data descriptor dict.  Returns its id."""
    zone = desc.get("zone", zone)
    sub = desc.get("pulse_generator")
    overrides = dict(sub) if isinstance(sub, dict) else {}
    return spawn_generator(world, zone, _str(desc.get("name"), ""), **overrides)


def load_generators(world: World, path: str | Path) -> dict[str, int]:
    """Spawn every generator table in *path*.  Returns ``{key: eid}``."""
    path = Path(path)
    if not path.exists():
        print(f"[FACTORY] {path} not found — no generators spawned")
        return {}
    with open(path, "rb") as f:
        data = tomllib.load(f)

    ids: dict[str, int] = {}
    for key, desc in data.items():
        if not isinstance(desc, dict):
            continue
        ids[key] = spawn_from_descriptor(world, desc)
    print(f"[FACTORY] Spawned {len(ids)} generators from {path}")
    return ids
