"""scenes — pygame screens.

pulse_scene  PulseScene (generator board) and SceneHost
"""
