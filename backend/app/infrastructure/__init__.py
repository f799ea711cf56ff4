"""Infrastructure — database session management and structured logging.

Invariants:
    - Driver exceptions never leave this layer untranslated (see core/errors.py)

Design Decisions:
    - Only core/errors is imported from core; the rules never reach down here
"""
