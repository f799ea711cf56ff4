"""Persistence Models — the animals and adoption_applications tables.

Invariants:
    - Animal.is_available and AdoptionApplication.status are the only columns the
      lifecycle invariants depend on; both change only inside coordinator units of work
    - Partial unique indexes on adoption_applications are declared on the model, so
      create_all (tests) and alembic (production) build the same guards

Design Decisions:
    - Both models imported here so relationship("Animal") and
      relationship("AdoptionApplication") resolve before the first query
"""

from app.models.animal import Animal  # noqa: F401
from app.models.adoption_application import AdoptionApplication  # noqa: F401
