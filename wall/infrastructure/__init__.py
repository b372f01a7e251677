"""Infrastructure Layer — storage backends, facilitator client, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external failures mapped to typed errors (StorageError, PaymentVerifierError)
"""
