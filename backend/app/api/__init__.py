"""HTTP Shell — FastAPI routers, request dependencies, and the error envelope.

Invariants:
    - Handlers translate HTTP into core commands and snapshots back into schemas
    - No handler writes application status or animal availability itself

Design Decisions:
    - Actor identity and staff capability resolved in deps.py, once per request
"""
