"""Record — dict-backed storage base with the juggling pipeline attached.

Invariants:
    - _attributes is the raw store; values there are what the persistence layer sees
    - Construction and fill() go through set_attribute (write hooks run)
    - from_storage() hydrates raw values verbatim (no hooks: rows are trusted as stored)
    - Missing keys read as None

Design Decisions:
    - Explicit get_attribute/set_attribute plus item access, no __getattr__ magic
      (ADR: every access path visible)
"""

from collections.abc import Mapping
from typing import Any

from attrjuggle.models.juggling import JugglingMixin


class Record(JugglingMixin):
    """Plain record: raw attributes in a dict, coerced through the pipeline."""

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any):
        self._attributes: dict[str, Any] = {}
        self.fill({**(attributes or {}), **kwargs})

    @classmethod
    def from_storage(cls, row: Mapping[str, Any]) -> "Record":
        """Rebuild a record from a persisted row without running write hooks."""
        record = cls.__new__(cls)
        record._attributes = dict(row)
        return record

    def fill(self, attributes: Mapping[str, Any]) -> "Record":
        for key, value in attributes.items():
            self.set_attribute(key, value)
        return self

    # ─── Raw storage ─────────────────────────────────────────────

    def get_raw(self, key: str) -> Any:
        return self._attributes.get(key)

    def set_raw(self, key: str, value: Any) -> None:
        self._attributes[key] = value

    def has_raw(self, key: str) -> bool:
        return key in self._attributes

    def raw_keys(self) -> list[str]:
        return list(self._attributes)

    def get_raw_attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    # ─── Item access ─────────────────────────────────────────────

    def __getitem__(self, key: str) -> Any:
        return self.get_attribute(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set_attribute(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._attributes

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"
