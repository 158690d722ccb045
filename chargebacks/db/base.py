"""SQLAlchemy Declarative Base — shared base class for the storage bucket table.

Invariants:
    - All models inherit from Base
    - Base.metadata is the single source of truth for the on-disk schema

Design Decisions:
    - Separate file for Base: the engine imports metadata without importing models twice
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all chargeback store ORM models."""
    pass
