"""logic — Game systems package.

Subpackages
-----------
pulse/      — generator state machine, per-frame scheduler, lifecycle
              (removal / reset), part upgrades, examine text

Top-level modules
-----------------
tick            — per-frame system orchestrator
entity_factory  — generator creation from TOML data and tuning defaults
"""
