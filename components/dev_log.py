"""components.dev_log — Structured generator / zone event log.

A ring-buffer resource that records timestamped state transitions,
forced resets and stale references from the pulse systems.  The demo
board shows the newest entries in its log panel (L to toggle); tests
filter by category.

Usage:
    log = world.res(DevLog)
    log.record(eid, "transition", "engaged → cooling_down", zone="outpost", t=12.0)

Each entry is a dict:
    {"t": float, "eid": int, "zone": str, "cat": str, "msg": str}
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class DevLog:
    """Ring-buffer of pulse system events."""

    entries: list[dict] = field(default_factory=list)
    max_entries: int = 500

    def record(self, eid: int, cat: str, msg: str, *,
               zone: str | None = None, t: float = 0.0) -> None:
        self.entries.append({
            "t": t,
            "eid": eid,
            "zone": zone or "",
            "cat": cat,
            "msg": msg,
        })
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]

    def recent(self, n: int = 50) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return self.entries[-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        """Return last *n* entries in a category."""
        return [e for e in self.entries if e["cat"] == cat][-n:]
