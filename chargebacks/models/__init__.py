"""ORM Models — SQLAlchemy declarative models for the storage namespace.

Invariants:
    - All models inherit from Base (db/base.py)
    - BucketEntry is the only table; the store has no secondary indexes

Design Decisions:
    - Models imported here so Base.metadata is populated before create_all runs
"""

from chargebacks.models.bucket_entry import BucketEntry  # noqa: F401
