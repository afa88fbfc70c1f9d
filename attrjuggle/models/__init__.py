"""Record Models — storage bases wired to the interceptor chain.

Invariants:
    - Every record base inherits JugglingMixin (models/juggling.py)
    - Interceptor order is declared per record type, never inferred

Design Decisions:
    - One file per concern for locality: chain, mixin, dict-backed record
"""
