"""Routers — health, animals, adoptions; each owns its URL prefix.

Invariants:
    - Writes go through LifecycleCoordinator; reads may use a plain session

Design Decisions:
    - Registered by name in main.create_app (ADR: ExMA no auto-discovery)
"""
