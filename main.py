"""
main.py — Bootstrap

1. Load tuning
2. Create the app and its event bus
3. Spawn the demo generators
4. Run the board scene
"""

from core import tuning
from core.app import App
from core.events import EventBus
from logic.entity_factory import load_generators
from scenes.pulse_scene import PulseScene


def main():
    tuning.load()
    app = App(title="Pulse Generators")
    app.world.set_res(EventBus())

    load_generators(app.world, tuning.get("pulse.demo", "generators",
                                          "data/generators.toml"))

    app.run(PulseScene())


if __name__ == "__main__":
    main()
