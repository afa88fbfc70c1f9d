"""Core Layer — pure coercion logic, no IO, no DB.

Invariants:
    - No module in core/ imports from models/, db/, schemas/ or infrastructure/
    - Coercion routines are pure and deterministic over non-null input

Design Decisions:
    - Functional core separated from the record/ORM shell (ADR: impureim sandwich)
"""
