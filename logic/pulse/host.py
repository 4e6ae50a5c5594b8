"""logic/pulse/host.py — The outside world as seen by the pulse systems.

Everything the generator core does not own — zone placement, the EMP
effect itself, radio chatter, popups, sprites and sounds — goes
through a ``PulseHost``.  Subclass it and override what you need; the
base class is a silent host whose effect always succeeds.

    class MyHost(PulseHost):
        def notify(self, eid, channel, key, **args):
            radio.send(channel, loc(key, **args))

    system = PulseGeneratorSystem(world, host=MyHost(world))

Every method is fire-and-forget except ``zone_of`` and ``fire_effect``,
whose answers drive the state machine.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.ecs import World
    from components.pulse import GeneratorVisuals


class PulseHost:
    def __init__(self, world: World | None = None):
        self.world = world

    def zone_of(self, eid: int) -> str | None:
        """Zone the generator sits on, or ``None`` if it is loose."""
        if self.world is None:
            return None
        return self.world.zone_of(eid)

    def zone_name(self, zone: str) -> str | None:
        """Display name for announcements (station / vessel name)."""
        return zone

    def fire_effect(self, eid: int, magnitude: float, radius: float,
                    duration: float) -> bool:
        """Produce the pulse.  Return False if it did not happen."""
        return True

    def notify(self, eid: int, channel: str, key: str, **args: Any) -> None:
        """Broadcast message *key* on *channel*."""
        pass

    def popup(self, eid: int, key: str, user: int | None) -> None:
        """Point-in-time message shown to *user* at the generator."""
        pass

    def set_visual(self, eid: int, key: GeneratorVisuals, value: bool | int) -> None:
        pass

    def play_sound(self, eid: int, sound: str) -> None:
        pass


def host_for(world: World) -> PulseHost:
    """The world's ``PulseHost`` resource, or a silent host if none is set."""
    host = world.res(PulseHost)
    if host is None:
        host = PulseHost(world)
        world.set_res(host, as_type=PulseHost)
    return host
