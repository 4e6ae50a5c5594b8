"""pulse_testkit.py — Shared fixtures for the pulse generator tests.

``RecordingHost`` records every collaborator call instead of drawing or
broadcasting anything, so tests can assert on what the core asked for::

    world, host, system = make_world()
    eid = add_generator(world, "outpost", activating_time=5.0)
    system.activate(eid)
    assert host.keys("popup") == ["pulse-system-report-activate-success"]
"""

from __future__ import annotations

from core import tuning
from core.ecs import World
from core.events import EventBus
from components import PulseGenerator
from logic.pulse import PulseGeneratorSystem, PulseHost


class RecordingHost(PulseHost):
    def __init__(self, world: World | None = None, effect_ok: bool = True):
        super().__init__(world)
        self.effect_ok = effect_ok
        self.calls: list[tuple] = []
        self.visuals: dict[tuple, object] = {}

    def fire_effect(self, eid, magnitude, radius, duration):
        self.calls.append(("fire_effect", eid, magnitude, radius, duration))
        return self.effect_ok

    def notify(self, eid, channel, key, **args):
        self.calls.append(("notify", eid, channel, key, args))

    def popup(self, eid, key, user):
        self.calls.append(("popup", eid, key, user))

    def set_visual(self, eid, key, value):
        self.visuals[(eid, key)] = value
        self.calls.append(("set_visual", eid, key, value))

    def play_sound(self, eid, sound):
        self.calls.append(("play_sound", eid, sound))

    # ── Queries ──────────────────────────────────────────────────────

    def of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]

    def keys(self, kind: str) -> list[str]:
        """Message keys of every ``notify`` / ``popup`` call."""
        idx = 3 if kind == "notify" else 2
        return [c[idx] for c in self.of(kind)]

    def reset(self):
        self.calls.clear()
        self.visuals.clear()


def make_world(effect_ok: bool = True):
    """Fresh world with a bus, a recording host and the pulse system."""
    tuning.reset()
    world = World()
    bus = EventBus()
    world.set_res(bus)
    host = RecordingHost(world, effect_ok=effect_ok)
    system = PulseGeneratorSystem(world, host=host)
    system.subscribe(bus)
    return world, host, system


def add_generator(world: World, zone: str | None = "outpost", **fields) -> int:
    """Spawn a bare generator.  Short default timings: 5 / 10 / 2 / 4."""
    params = dict(activating_time=5.0, engaged_time=10.0,
                  cooling_down_time=2.0, cooldown_time=4.0)
    params.update(fields)
    eid = world.spawn()
    world.add(eid, PulseGenerator(**params))
    if zone is not None:
        world.zone_add(eid, zone)
    return eid
