"""
sim — Simulation core
=====================

Modules
-------
world
    :class:`World` vehicle list, signal and fixed tick order.
vehicle
    :class:`Vehicle` agent and its per-tick decision pipeline.
traffic_light
    :class:`TrafficLightController` adaptive two-phase signal.
traffic_policy
    :class:`TrafficPolicy` tunable constants and right-of-way tables.
sim_bridge
    :class:`SimBridge` orchestrator and :class:`SpawnThrottle`.
geometry
    Static intersection layout and the :class:`Rect` value type.
physics
    Low-level overlap, timing and stepping helpers.
types
    Direction, turn, stop-reason and light enumerations.
"""
