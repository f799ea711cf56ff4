"""Services Layer — storage-bound registry/ledger and the lifecycle coordinator.

Invariants:
    - Registry and ledger never commit; the caller owns the transaction
    - Writes to status or is_available happen only inside coordinator units of work

Design Decisions:
    - One file per component for locality (ADR: ExMA no god objects)
"""
