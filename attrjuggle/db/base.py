"""SQLAlchemy Declarative Base — shared base class for juggled ORM models.

Invariants:
    - Base is the single source of truth for table metadata

Design Decisions:
    - Separate file for Base: avoids circular imports between models (ADR: SQLAlchemy best practice)
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models that opt into JugglingModel."""
    pass
