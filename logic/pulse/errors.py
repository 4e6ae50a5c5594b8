"""logic/pulse/errors.py — Exceptions raised past the pulse systems.

Only misuse and corruption escape.  A failed effect is an ordinary
``False`` from ``PulseHost.fire_effect``; stale generator ids are
logged and dropped by the scheduler.
"""

from __future__ import annotations


class GeneratorNotOnZoneError(RuntimeError):
    """Activation was requested for a generator that sits on no zone."""

    def __init__(self, eid: int):
        super().__init__(f"Generator {eid} had no zone associated")
        self.eid = eid


class UnknownStateError(AssertionError):
    """A state value outside ``GeneratorStateType`` reached the machine."""

    def __init__(self, state):
        super().__init__(f"Unknown generator state: {state!r}")
        self.state = state
