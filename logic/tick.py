"""logic/tick.py — System tick orchestration.

One call per frame from the host loop (scene ``update`` or a test)::

    from logic.tick import tick_systems
    tick_systems(world, dt)

Order matters: queued interactions and removals are handled first so
the generator update never sees a generator that was removed this
frame, then zone clocks advance, then dead entities are purged.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from core.events import EventBus
from logic.pulse.scheduler import pulse_generator_system

if TYPE_CHECKING:
    from core.ecs import World


def tick_systems(world: "World", dt: float, *, skip_purge: bool = False) -> int:
    """Run all per-frame systems.  Returns generator transitions made.

    Parameters
    ----------
    world : World
        The ECS world.
    dt : float
        Seconds since the previous frame.
    skip_purge : bool
        Leave killed entities in the stores (tests that inspect them).
    """
    bus = world.res(EventBus)
    if bus is not None:
        bus.drain()

    transitions = pulse_generator_system(world, dt)

    if bus is not None:
        bus.drain()

    if not skip_purge:
        world.purge()
    return transitions
