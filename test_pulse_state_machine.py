"""test_pulse_state_machine.py — Activation, timeouts and the charge indicator.

Covers the single-step transition table, the popups and radio
announcements each step produces, and the quantised charge levels.

Run:  python test_pulse_state_machine.py
"""
from __future__ import annotations
import sys, traceback

from components import (
    GeneratorState, GeneratorStateType, GeneratorVisuals, PulseGenerator,
)
from core.events import EventBus, GeneratorActivated
from logic.pulse import (
    GeneratorNotOnZoneError, UnknownStateError, compute_charge, next_state,
    start_generator, transition, update_charge_appearance,
)
from logic.pulse.state_machine import (
    MSG_ACTIVATE_SUCCESS, MSG_ALREADY_ACTIVE, MSG_ANNOUNCE_ACTIVE,
    MSG_ANNOUNCE_COOLING_DOWN, MSG_NO_ZONE, MSG_RECHARGING,
)
from simulation.zone_registry import ZoneRegistry
from pulse_testkit import add_generator, make_world

S = GeneratorStateType


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
    assert cond, f"{label} {detail}"


# ═══════════════════════════════════════════════════════════════════════
#  ACTIVATION
# ═══════════════════════════════════════════════════════════════════════

def test_activate_idle_generator():
    print("\n=== Activate an idle generator ===")
    world, host, system = make_world()
    eid = add_generator(world, "outpost")

    started = system.activate(eid, user=7)
    gen = world.get(eid, PulseGenerator)
    registry = world.res(ZoneRegistry)

    check(started is True, "activate returns True")
    check(gen.state == GeneratorState(S.ACTIVATING, 5.0),
          "state is ACTIVATING until clock + priming", str(gen.state))
    check(registry.zone_for(eid) == "outpost", "registered on its zone")
    check(host.of("popup") == [("popup", eid, MSG_ACTIVATE_SUCCESS, 7)],
          "success popup shown to the user")
    check(host.of("notify") == [("notify", eid, "engineering",
                                 MSG_ACTIVATE_SUCCESS, {"zone": "outpost"})],
          "success announced on the channel with the zone name")
    check(host.of("play_sound") == [("play_sound", eid, "pulse_activate")],
          "activation sound played")
    check(host.visuals[(eid, GeneratorVisuals.READY_BLINKING)] is True
          and host.visuals[(eid, GeneratorVisuals.READY)] is False
          and host.visuals[(eid, GeneratorVisuals.UNREADY)] is False
          and host.visuals[(eid, GeneratorVisuals.UNREADY_BLINKING)] is False,
          "only READY_BLINKING is set while priming")

    order = [c[0] for c in host.calls]
    check(order[:3] == ["popup", "play_sound", "notify"],
          "popup, sound, then announcement", str(order))

    bus = world.res(EventBus)
    check(bus.pending_count() == 1, "GeneratorActivated queued on the bus")
    fired = []
    bus.subscribe("GeneratorActivated", fired.append)
    bus.drain()
    check(fired == [GeneratorActivated(eid=eid, zone="outpost")],
          "GeneratorActivated carries eid and zone")


def test_activate_uses_zone_clock():
    print("\n=== Deadline is relative to the zone clock ===")
    world, host, system = make_world()
    eid = add_generator(world, "outpost")
    world.res(ZoneRegistry).get_or_create("outpost").current_time = 40.0

    system.activate(eid)
    gen = world.get(eid, PulseGenerator)
    check(gen.state.until == 45.0, "until = 40 + 5", str(gen.state.until))


def test_activate_rejections():
    print("\n=== Activation in non-idle states ===")
    world, host, system = make_world()
    eid = add_generator(world, "outpost")
    gen = world.get(eid, PulseGenerator)

    cases = [
        (S.ACTIVATING, MSG_ALREADY_ACTIVE),
        (S.ENGAGED, MSG_ALREADY_ACTIVE),
        (S.COOLING_DOWN, MSG_RECHARGING),
        (S.RECHARGING, MSG_RECHARGING),
    ]
    for kind, key in cases:
        host.reset()
        before = GeneratorState(kind, 12.0)
        gen.state = before
        started = system.activate(eid, user=3)
        check(started is False and gen.state == before,
              f"{kind.value}: state untouched")
        check(host.keys("popup") == [key], f"{kind.value}: popup {key}")
        check(not host.of("notify") and not host.of("play_sound"),
              f"{kind.value}: no announcement, no sound")
    check(not world.res(ZoneRegistry).is_active(eid),
          "rejected activations never register")


def test_activate_without_zone():
    print("\n=== Activation with no zone ===")
    world, host, system = make_world()
    eid = add_generator(world, zone=None)
    gen = world.get(eid, PulseGenerator)

    try:
        system.activate(eid, user=7)
    except GeneratorNotOnZoneError as exc:
        check(exc.eid == eid, "GeneratorNotOnZoneError raised")
    else:
        check(False, "GeneratorNotOnZoneError raised", "nothing raised")
    check(gen.state.is_inactive, "state left INACTIVE")
    check(not world.res(ZoneRegistry).is_active(eid), "not registered")
    check(host.calls == [("popup", eid, MSG_NO_ZONE, 7)],
          "user told the generator has no zone", str(host.calls))


def test_unknown_state():
    print("\n=== Unknown state values ===")
    world, host, system = make_world()
    eid = add_generator(world, "outpost")
    gen = world.get(eid, PulseGenerator)
    gen.state = GeneratorState("bogus", 3.0)

    for label, fn in (("start_generator", lambda: start_generator(world, eid, gen)),
                      ("next_state", lambda: next_state(gen, 3.0)),
                      ("compute_charge", lambda: compute_charge(gen, 3.0))):
        try:
            fn()
        except UnknownStateError:
            ok(f"{label} raises UnknownStateError")
        else:
            check(False, f"{label} raises UnknownStateError")


# ═══════════════════════════════════════════════════════════════════════
#  TIMEOUTS
# ═══════════════════════════════════════════════════════════════════════

def test_next_state_table():
    print("\n=== Timeout table ===")
    gen = PulseGenerator(activating_time=5.0, engaged_time=10.0,
                         cooling_down_time=2.0, cooldown_time=4.0)

    gen.state = GeneratorState(S.ACTIVATING, 5.0)
    check(next_state(gen, 5.0) == GeneratorState(S.ENGAGED, 15.0),
          "ACTIVATING + effect → ENGAGED until now + engaged")
    check(next_state(gen, 5.0, effect_fired=False) == GeneratorState(S.RECHARGING, 9.0),
          "ACTIVATING + failed effect → RECHARGING until now + cooldown")

    gen.state = GeneratorState(S.ENGAGED, 15.0)
    check(next_state(gen, 15.0) == GeneratorState(S.COOLING_DOWN, 17.0),
          "ENGAGED → COOLING_DOWN")
    gen.state = GeneratorState(S.COOLING_DOWN, 17.0)
    check(next_state(gen, 17.0) == GeneratorState(S.RECHARGING, 21.0),
          "COOLING_DOWN → RECHARGING")
    gen.state = GeneratorState(S.RECHARGING, 21.0)
    check(next_state(gen, 21.0) == GeneratorState.INACTIVE,
          "RECHARGING → INACTIVE")
    check(gen.state == GeneratorState(S.RECHARGING, 21.0),
          "next_state does not mutate the generator")


def test_transition_effects():
    print("\n=== Transition side effects ===")
    world, host, system = make_world()
    eid = add_generator(world, "outpost")
    gen = world.get(eid, PulseGenerator)

    gen.state = GeneratorState(S.ACTIVATING, 5.0)
    transition(world, eid, gen, 5.0)
    check(host.of("fire_effect") == [("fire_effect", eid, 50000.0, 100.0, 60.0)],
          "effect fired with energy, range, duration")
    check(host.of("notify") == [("notify", eid, "engineering",
                                 MSG_ANNOUNCE_ACTIVE, {"timeLeft": 10.0})],
          "engaged announcement carries the engaged duration")
    check(host.visuals[(eid, GeneratorVisuals.READY)] is True, "READY lit")

    host.reset()
    transition(world, eid, gen, 15.0)
    check(gen.state == GeneratorState(S.COOLING_DOWN, 17.0), "now COOLING_DOWN")
    check(host.of("notify") == [("notify", eid, "engineering",
                                 MSG_ANNOUNCE_COOLING_DOWN, {"timeLeft": 2.0})],
          "cooling-down announcement carries the cooling duration")

    host.reset()
    transition(world, eid, gen, 17.0)
    check(gen.state == GeneratorState(S.RECHARGING, 21.0), "now RECHARGING")
    check(not host.of("notify"), "entering RECHARGING is silent on the radio")
    check(host.visuals[(eid, GeneratorVisuals.UNREADY)] is True, "UNREADY lit")

    host.reset()
    transition(world, eid, gen, 21.0)
    check(gen.state.is_inactive and gen.state.until is None, "back to INACTIVE")


def test_transition_effect_failure():
    print("\n=== Effect failure skips the engaged phase ===")
    world, host, system = make_world(effect_ok=False)
    eid = add_generator(world, "outpost")
    gen = world.get(eid, PulseGenerator)
    gen.state = GeneratorState(S.ACTIVATING, 5.0)

    transition(world, eid, gen, 5.0)
    check(gen.state == GeneratorState(S.RECHARGING, 9.0),
          "RECHARGING until now + cooldown", str(gen.state))
    check(len(host.of("fire_effect")) == 1, "effect was attempted once")
    check(not host.of("notify"), "no engaged announcement")


# ═══════════════════════════════════════════════════════════════════════
#  CHARGE INDICATOR
# ═══════════════════════════════════════════════════════════════════════

def test_compute_charge():
    print("\n=== Charge quantisation ===")
    gen = PulseGenerator(engaged_time=10.0, cooldown_time=10.0, charge_capacity=5)

    gen.state = GeneratorState.INACTIVE
    check(compute_charge(gen, 0.0) == 5, "INACTIVE shows the idle level")

    gen.state = GeneratorState(S.ENGAGED, 15.0)
    check(compute_charge(gen, 9.0) == 4, "ENGAGED 6s left of 10 → 4")
    check(compute_charge(gen, 5.0) == 5, "ENGAGED full time left clamps to capacity")
    check(compute_charge(gen, 15.0) == 1, "ENGAGED at the deadline → 1")
    check(compute_charge(gen, 12.5) == 2, "2.5s left rounds half-to-even → 2")
    check(compute_charge(gen, 11.5) == 3, "3.5s left rounds half-to-even → 4s → 3")

    gen.state = GeneratorState(S.COOLING_DOWN, 17.0)
    check(compute_charge(gen, 16.0) == 0, "COOLING_DOWN → 0")

    gen.state = GeneratorState(S.RECHARGING, 20.0)
    check(compute_charge(gen, 10.0) == 0, "RECHARGING just started clamps to 0")
    check(compute_charge(gen, 14.0) == 1, "RECHARGING 6s left of 10 → 1")
    check(compute_charge(gen, 20.0) == 4, "RECHARGING at the deadline → 4")

    gen.state = GeneratorState(S.ACTIVATING, 5.0)
    gen.charge_remaining = 2
    check(compute_charge(gen, 1.0) == 2, "ACTIVATING keeps the current level")

    small = PulseGenerator(charge_capacity=3)
    check(compute_charge(small, 0.0) == 3, "idle level clamps to a smaller capacity")

    zero = PulseGenerator(engaged_time=0.0, charge_capacity=5)
    zero.state = GeneratorState(S.ENGAGED, 1.0)
    check(compute_charge(zero, 0.0) == 1, "zero duration does not divide by zero")


def _phase_levels(world, system, eid, kind):
    """Charge after every 1 s tick spent in *kind*."""
    gen = world.get(eid, PulseGenerator)
    levels = []
    for _ in range(200):
        system.tick(1.0)
        if gen.state.state_type is kind:
            levels.append(gen.charge_remaining)
        elif levels:
            break
    return levels


def test_charge_direction_over_a_cycle():
    print("\n=== Charge falls while engaged, rises while recharging ===")
    for capacity, duration in ((5, 10.0), (3, 7.0), (5, 60.0)):
        world, host, system = make_world()
        eid = add_generator(world, "outpost", charge_capacity=capacity,
                            engaged_time=duration, cooldown_time=duration)
        system.activate(eid)
        tag = f"capacity {capacity}, {duration:.0f}s"

        engaged = _phase_levels(world, system, eid, S.ENGAGED)
        recharging = _phase_levels(world, system, eid, S.RECHARGING)

        for label, levels in (("engaged", engaged), ("recharging", recharging)):
            check(len(levels) >= duration - 1, f"{tag}: sampled the {label} window",
                  str(levels))
            check(all(0 <= lv <= capacity for lv in levels),
                  f"{tag}: {label} levels within [0, capacity]", str(levels))

        check(all(a >= b for a, b in zip(engaged, engaged[1:])) and engaged[0] > engaged[-1],
              f"{tag}: engaged charge only drains", str(engaged))
        check(all(a <= b for a, b in zip(recharging, recharging[1:]))
              and recharging[0] < recharging[-1],
              f"{tag}: recharging charge only fills", str(recharging))


def test_charge_visual_only_on_change():
    print("\n=== Charge visual pushed only when it moves ===")
    world, host, system = make_world()
    eid = add_generator(world, "outpost", engaged_time=10.0)
    gen = world.get(eid, PulseGenerator)

    check(update_charge_appearance(host, eid, gen, 0.0) is False,
          "idle → idle sends nothing")
    gen.state = GeneratorState(S.ENGAGED, 15.0)
    check(update_charge_appearance(host, eid, gen, 9.0) is True, "5 → 4 sends")
    check(host.visuals[(eid, GeneratorVisuals.CHARGE_STATE)] == 4, "value is 4")
    check(gen.previous_charge == 4 and gen.charge_remaining == 4, "cache updated")
    check(update_charge_appearance(host, eid, gen, 9.2) is False,
          "same level twice sends once")
    check(len([c for c in host.of("set_visual")
               if c[2] is GeneratorVisuals.CHARGE_STATE]) == 1,
          "exactly one CHARGE_STATE update")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Activate idle", test_activate_idle_generator),
        ("Zone clock deadline", test_activate_uses_zone_clock),
        ("Activation rejections", test_activate_rejections),
        ("No zone", test_activate_without_zone),
        ("Unknown state", test_unknown_state),
        ("Timeout table", test_next_state_table),
        ("Transition effects", test_transition_effects),
        ("Effect failure", test_transition_effect_failure),
        ("Charge quantisation", test_compute_charge),
        ("Charge direction", test_charge_direction_over_a_cycle),
        ("Charge visual", test_charge_visual_only_on_change),
    ]

    for name, fn in sections:
        try:
            fn()
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  State Machine Tests: {_passed} passed, {_failed} failed  "
          f"(total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
