"""Bucket Entry ORM — one row per key in the chargebacks namespace.

Invariants:
    - __tablename__ IS the namespace name — part of the on-disk schema, never rename
    - key is the primary key (TEXT, binary collation): native order is byte order of the key
    - value is opaque bytes produced by core/codec.py; the table knows nothing about records

Design Decisions:
    - Key/value table over one column per field: the engine stays a generic bucket,
      the codec owns the record shape (ADR: mirrors an embedded KV store's bucket)
"""

from sqlalchemy import String, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from chargebacks.db.base import Base

BUCKET_NAME = "chargebacks"


class BucketEntry(Base):
    """A single key -> encoded-record pair."""
    __tablename__ = BUCKET_NAME

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
