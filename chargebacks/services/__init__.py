"""Services Layer — the transactional shell around the pure core.

Invariants:
    - One store operation == one storage engine transaction

Design Decisions:
    - ChargebackStore is the only service: routes stay thin and delegate to it
"""
