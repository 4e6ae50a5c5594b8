"""logic/pulse/upgrades.py — Machine-part scaling of generator delays.

Better parts shorten priming and recharge::

    effective = base × part_rating_delay ^ (rating - 1)

Only future deadlines use the new values; a deadline already set is
left alone.
"""

from __future__ import annotations

from components.pulse import PulseGenerator


def scaled_duration(base: float, rating: int, factor: float) -> float:
    if rating < 1:
        raise ValueError(f"part rating must be >= 1, got {rating}")
    return base * factor ** (rating - 1)


def apply_part_rating(gen: PulseGenerator, rating: int) -> None:
    gen.activating_time = scaled_duration(gen.base_activating_time, rating,
                                          gen.part_rating_delay)
    gen.cooldown_time = scaled_duration(gen.base_cooldown_time, rating,
                                        gen.part_rating_delay)


def delay_upgrade_ratio(gen: PulseGenerator) -> float:
    """Current cooldown as a fraction of the base (1.0 = unupgraded)."""
    if gen.base_cooldown_time <= 0:
        return 1.0
    return gen.cooldown_time / gen.base_cooldown_time
