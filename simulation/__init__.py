"""simulation — World-level bookkeeping shared by the pulse systems.

Submodules
----------
zone_registry   ZoneRegistry — zone name → ZoneClock, active generators,
                pause flags
"""
