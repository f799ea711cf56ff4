"""Adoption Core — the state machine, its types, and its error tree.

Invariants:
    - Nothing here awaits, opens a session, or reads the clock implicitly
    - Rules return errors; the coordinator decides when to raise them

Design Decisions:
    - Storage seen only through repository_protocols (ADR: ExMA impureim sandwich)
"""
