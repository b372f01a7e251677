"""Service Layer — the pending → committed message lifecycle.

Invariants:
    - Services depend only on core/ and the StorageAdapter protocol
    - Storage is injected through constructors, never imported as a global
"""
