"""Field Schema — record-type-global registry of field name -> logical type token.

Invariants:
    - One schema per record-type key; every instance of that type reads the same one
    - Published schemas are immutable snapshots (MappingProxyType); mutation swaps them
    - get() on an unknown key returns an empty mapping, never raises
    - Tokens are stored as declared; only dispatch validates them unless strict=True
    - is_coercible(name) == enabled AND schema non-empty AND name in schema
    - A key belongs to one live record class; a second class claiming it gets a
      numbered variant ("mod.Item#2") instead of replacing the first schema

Design Decisions:
    - Copy-on-write under an RLock: readers never lock, writers never tear a snapshot
      (ADR: schema is read on every attribute access, mutated rarely)
    - FieldSchema is a handle, not a copy: mutations through it hit the registry
"""

import logging
import threading
import weakref
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from attrjuggle.core.domain_types import DEFAULT_FIELD_TYPE, is_known_type
from attrjuggle.core.errors import SchemaError

logger = logging.getLogger(__name__)

_EMPTY: Mapping[str, str] = MappingProxyType({})


class SchemaRegistry:
    """Per-record-type schemas and on/off flags, shared process-wide."""

    def __init__(self, strict: bool = False, default_enabled: bool = True):
        self.strict = strict
        self.default_enabled = default_enabled
        self._lock = threading.RLock()
        self._schemas: dict[str, Mapping[str, str]] = {}
        self._enabled: dict[str, bool] = {}
        self._owners: dict[str, weakref.ref] = {}

    # ─── Reads (lock-free snapshots) ─────────────────────────────

    def get(self, key: str) -> dict[str, str]:
        return dict(self._snapshot(key))

    def has(self, key: str, name: str) -> bool:
        return name in self._snapshot(key)

    def type_of(self, key: str, name: str) -> str | None:
        return self._snapshot(key).get(name)

    def is_enabled(self, key: str) -> bool:
        return self._enabled.get(key, self.default_enabled)

    def is_coercible(self, key: str, name: str) -> bool:
        schema = self._snapshot(key)
        return self.is_enabled(key) and bool(schema) and name in schema

    def keys(self) -> list[str]:
        return list(self._schemas)

    # ─── Mutations (copy-on-write) ───────────────────────────────

    def claim(self, key: str, owner: type) -> str:
        """Reserve key for owner and return the key owner must use."""
        with self._lock:
            candidate, n = key, 1
            while True:
                ref = self._owners.get(candidate)
                holder = ref() if ref is not None else None
                if holder is owner:
                    return candidate
                if holder is None:
                    if ref is not None:
                        # Previous owner was collected; its schema goes with it
                        self._schemas.pop(candidate, None)
                        self._enabled.pop(candidate, None)
                    self._owners[candidate] = weakref.ref(owner)
                    return candidate
                n += 1
                candidate = f"{key}#{n}"

    def set(self, key: str, mapping: Mapping[str, str]) -> None:
        """Replace the schema for key wholesale."""
        fields = self._checked(key, mapping)
        with self._lock:
            self._schemas[key] = MappingProxyType(fields)
        logger.debug(f"Schema set for {key}: {sorted(fields)}")

    def merge(self, key: str, mapping: Mapping[str, str]) -> None:
        """Union into the schema; incoming entries win on collision."""
        fields = self._checked(key, mapping)
        with self._lock:
            current = dict(self._snapshot(key))
            current.update(fields)
            self._schemas[key] = MappingProxyType(current)
        logger.debug(f"Schema merged for {key}: {sorted(fields)}")

    def add(self, key: str, name: str, type_token: str = DEFAULT_FIELD_TYPE) -> None:
        self.merge(key, {name: type_token})

    def remove(self, key: str, names: str | Iterable[str]) -> None:
        """Drop one field, a comma-separated list, or an iterable of fields."""
        if isinstance(names, str):
            doomed = {part.strip() for part in names.split(",") if part.strip()}
        else:
            doomed = set(names)
        with self._lock:
            current = self._snapshot(key)
            self._schemas[key] = MappingProxyType({
                name: token for name, token in current.items() if name not in doomed
            })
        logger.debug(f"Schema fields removed for {key}: {sorted(doomed)}")

    def set_enabled(self, key: str, enabled: bool) -> None:
        with self._lock:
            self._enabled[key] = bool(enabled)

    def schema(self, key: str) -> "FieldSchema":
        return FieldSchema(self, key)

    # ─── Internals ───────────────────────────────────────────────

    def _snapshot(self, key: str) -> Mapping[str, str]:
        return self._schemas.get(key, _EMPTY)

    def _checked(self, key: str, mapping: Mapping[str, str]) -> dict[str, str]:
        fields = {str(name): token for name, token in dict(mapping).items()}
        if self.strict:
            unknown = sorted(name for name, token in fields.items() if not is_known_type(token))
            if unknown:
                raise SchemaError(
                    f"Unknown type token for {key}: {', '.join(unknown)}", unknown,
                )
        return fields


class FieldSchema:
    """Handle onto one record type's schema inside a SchemaRegistry."""

    def __init__(self, registry: SchemaRegistry, key: str):
        self.registry = registry
        self.key = key

    def get(self) -> dict[str, str]:
        return self.registry.get(self.key)

    def set(self, mapping: Mapping[str, str]) -> None:
        self.registry.set(self.key, mapping)

    def add(self, name: str, type_token: str = DEFAULT_FIELD_TYPE) -> None:
        self.registry.add(self.key, name, type_token)

    def remove(self, names: str | Iterable[str]) -> None:
        self.registry.remove(self.key, names)

    def merge(self, mapping: Mapping[str, str]) -> None:
        self.registry.merge(self.key, mapping)

    def is_enabled(self) -> bool:
        return self.registry.is_enabled(self.key)

    def set_enabled(self, enabled: bool) -> None:
        self.registry.set_enabled(self.key, enabled)

    def is_coercible(self, name: str) -> bool:
        return self.registry.is_coercible(self.key, name)
