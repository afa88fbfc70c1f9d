"""Juggling Mixin — schema management and coercion entry points shared by all record bases.

Invariants:
    - __juggle__ on a record class is registered into the schema registry at class creation
    - get_attribute() never mutates raw storage
    - set_attribute() stores verbatim first, then runs the interceptor chain
    - to_storage() runs every before_serialize hook, then snapshots raw storage
    - A coercion failure names the record type and field, is logged, and propagates

Design Decisions:
    - Raw storage is abstract (get_raw/set_raw/has_raw/raw_keys): the dict-backed Record
      and the SQLAlchemy-backed JugglingModel share every line of pipeline logic
    - Instance flags read through getattr defaults: ORM-loaded instances skip __init__
    - Registry resolved per class (__registry__) so tests and tenants can isolate schemas
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import tzinfo
from functools import lru_cache
from typing import Any

from attrjuggle.config import get_settings
from attrjuggle.core import coercion
from attrjuggle.core.domain_types import DEFAULT_FIELD_TYPE, normalize_type
from attrjuggle.core.errors import JuggleError
from attrjuggle.core.field_schema import FieldSchema, SchemaRegistry
from attrjuggle.models.interceptors import (
    InterceptorChain, JugglingInterceptor,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_registry() -> SchemaRegistry:
    """Process-wide registry configured from settings."""
    settings = get_settings()
    return SchemaRegistry(
        strict=settings.strict_schema,
        default_enabled=settings.juggling_enabled,
    )


class JugglingMixin:
    """Record-side API for the juggling pipeline. Subclasses supply raw storage."""

    # Unannotated: declarative ORM bases scan mixin annotations for columns
    __juggle__ = {}
    __juggling__ = None
    __interceptors__ = (JugglingInterceptor(),)
    __registry__ = None
    __timezone__ = None
    __juggle_key__ = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        registry = cls.juggle_registry()
        key = registry.claim(f"{cls.__module__}.{cls.__qualname__}", cls)
        cls.__juggle_key__ = key
        registry.set(key, dict(getattr(cls, "__juggle__", None) or {}))
        if cls.__juggling__ is not None:
            registry.set_enabled(key, cls.__juggling__)

    # ─── Raw storage (supplied by the storage base) ──────────────

    def get_raw(self, key: str) -> Any:
        raise NotImplementedError

    def set_raw(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def has_raw(self, key: str) -> bool:
        raise NotImplementedError

    def raw_keys(self) -> list[str]:
        raise NotImplementedError

    # ─── Entry points ────────────────────────────────────────────

    def get_attribute(self, key: str) -> Any:
        """Read: raw value through every on_get hook. Raw storage untouched."""
        return self.interceptor_chain().read(self, key, self.get_raw(key))

    def set_attribute(self, key: str, value: Any) -> None:
        """Write: verbatim store, then every on_set hook in order."""
        self.set_raw(key, value)
        self.interceptor_chain().written(self, key)

    def to_storage(self) -> dict[str, Any]:
        """Serialize-for-storage: converge raw storage, then snapshot it."""
        self.interceptor_chain().before_serialize(self)
        return {key: self.get_raw(key) for key in self.raw_keys()}

    # ─── Class-level configuration ───────────────────────────────

    @classmethod
    def record_type_key(cls) -> str:
        """Registry key claimed at class creation; unique per class in its registry."""
        return cls.__dict__.get("__juggle_key__") or f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def juggle_registry(cls) -> SchemaRegistry:
        return cls.__registry__ if cls.__registry__ is not None else get_registry()

    @classmethod
    def juggle_schema(cls) -> FieldSchema:
        """Handle onto this record type's shared schema."""
        return cls.juggle_registry().schema(cls.record_type_key())

    @classmethod
    def interceptor_chain(cls) -> InterceptorChain:
        return InterceptorChain(cls.__interceptors__)

    @classmethod
    def juggle_timezone(cls) -> tzinfo:
        return cls.__timezone__ if cls.__timezone__ is not None else get_settings().tzinfo

    # ─── Schema management ───────────────────────────────────────

    def get_jugglable(self) -> dict[str, str]:
        override = getattr(self, "_jugglable_override", None)
        if override is not None:
            return dict(override)
        return self.juggle_schema().get()

    def set_jugglable(self, mapping: Mapping[str, str]) -> None:
        """Replace the schema. Mutates this instance's override if one is active,
        otherwise the schema shared by every instance of the type."""
        if self._has_override():
            self._jugglable_override = dict(mapping)
        else:
            self.juggle_schema().set(mapping)

    def add_jugglable(self, key: str, type_token: str = DEFAULT_FIELD_TYPE) -> None:
        self.merge_jugglable({key: type_token})

    def remove_jugglable(self, keys: str | Iterable[str]) -> None:
        if not self._has_override():
            self.juggle_schema().remove(keys)
            return
        if isinstance(keys, str):
            keys = [part.strip() for part in keys.split(",")]
        doomed = set(keys)
        self._jugglable_override = {
            name: token for name, token in self._jugglable_override.items()
            if name not in doomed
        }

    def merge_jugglable(self, mapping: Mapping[str, str]) -> None:
        if self._has_override():
            self._jugglable_override = {**self._jugglable_override, **mapping}
        else:
            self.juggle_schema().merge(mapping)

    def override_jugglable(self, mapping: Mapping[str, str] | None) -> None:
        """Give this instance its own schema; None restores the shared one."""
        self._jugglable_override = None if mapping is None else dict(mapping)

    def _has_override(self) -> bool:
        return getattr(self, "_jugglable_override", None) is not None

    # ─── On/off flag ─────────────────────────────────────────────

    def is_juggling_enabled(self) -> bool:
        instance_flag = getattr(self, "_juggling", None)
        if instance_flag is not None:
            return instance_flag
        return self.juggle_schema().is_enabled()

    def set_juggling(self, enabled: bool) -> None:
        """Instance-level switch; use juggle_schema().set_enabled() for the type."""
        self._juggling = bool(enabled)

    def get_juggling(self) -> bool:
        """True when the flag is on and there is something to juggle."""
        return self.is_juggling_enabled() and bool(self.get_jugglable())

    def is_jugglable(self, key: str) -> bool:
        return self.get_juggling() and key in self.get_jugglable()

    # ─── Coercion ────────────────────────────────────────────────

    def juggle(self, key: str, value: Any) -> Any:
        """Coerce value to key's declared type. Pure: raw storage untouched."""
        type_token = self.get_jugglable()[key]
        try:
            return coercion.juggle(type_token, value, self.juggle_timezone())
        except JuggleError as e:
            e.with_field(self.record_type_key(), key)
            logger.error(
                f"Coercion of {key} failed: {e.message}",
                extra={
                    "record_type": self.record_type_key(), "field": key,
                    "logical_type": normalize_type(type_token), "error_code": e.code,
                },
            )
            raise

    def juggle_attribute(self, key: str, value: Any) -> None:
        """Coerce value and write the coerced form into raw storage."""
        self.set_raw(key, self.juggle(key, value))

    def juggle_attributes(self) -> None:
        """Coerce every schema field present in raw storage. Fails fast."""
        for key in self.get_jugglable():
            if self.has_raw(key) and self.get_raw(key) is not None:
                self.juggle_attribute(key, self.get_raw(key))
