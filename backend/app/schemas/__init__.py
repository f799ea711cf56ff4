"""Wire Schemas — pydantic request and response models for the adoption API.

Invariants:
    - Bodies are validated here, before any core command exists
    - Responses are built from core snapshots, never from live ORM rows

Design Decisions:
    - Kept apart from models/: the API contract may change without a migration
      (ADR: DDD boundary)
"""
