"""Declarative Base — table metadata for animals and adoption applications.

Invariants:
    - Every ORM model inherits from Base; alembic and the test fixtures read
      Base.metadata, never a model's table directly
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
