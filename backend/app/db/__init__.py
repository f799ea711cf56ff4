"""Database Layer — declarative base shared by models, migrations, and test fixtures.

Invariants:
    - Engine and sessions live in infrastructure/database.py, not here

Design Decisions:
    - Base kept apart from the session manager so alembic can import metadata
      without creating an engine
"""
