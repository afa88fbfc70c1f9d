"""Schemas — Pydantic models for declarative configuration input.

Invariants:
    - Schemas validate and normalize; they never coerce record values
"""
