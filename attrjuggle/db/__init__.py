"""Database Adapter — SQLAlchemy declarative models with the juggling pipeline.

Invariants:
    - Flushed rows carry fully coerced values for every schema column
    - The adapter never defines tables of its own; applications declare them

Design Decisions:
    - Mapper events over session hooks: the serialize pass is per-row, like the record base
"""
