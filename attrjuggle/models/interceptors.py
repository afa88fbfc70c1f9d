"""Attribute Interceptors — explicit, ordered read/write/serialize hooks on a record.

Invariants:
    - Interceptors run in the order listed on the record type (__interceptors__)
    - on_get never mutates raw storage
    - on_set runs after the verbatim store and sees the current raw value
      (so each interceptor sees what the previous one left behind)
    - before_serialize runs for every interceptor before the snapshot is taken

Design Decisions:
    - Ordered tuple over mixin composition order: sibling interceptors (encryption,
      hashing, purging) are configured, never implied by inheritance
    - Juggling first by default: downstream interceptors see coerced values
"""

from collections.abc import Iterable
from typing import Any


class AttributeInterceptor:
    """No-op hooks; subclasses override the points they care about."""

    name = "noop"

    def on_get(self, record: Any, key: str, value: Any) -> Any:
        return value

    def on_set(self, record: Any, key: str, value: Any) -> None:
        return None

    def before_serialize(self, record: Any) -> None:
        return None


class JugglingInterceptor(AttributeInterceptor):
    """Type coercion: coerce on read, re-derive on write, converge before serialize."""

    name = "juggling"

    def on_get(self, record: Any, key: str, value: Any) -> Any:
        if not record.is_jugglable(key):
            return value
        return record.juggle(key, value)

    def on_set(self, record: Any, key: str, value: Any) -> None:
        if value is not None and record.is_jugglable(key):
            record.juggle_attribute(key, value)

    def before_serialize(self, record: Any) -> None:
        if record.get_juggling():
            record.juggle_attributes()


class InterceptorChain:
    """Runs a fixed sequence of interceptors over one record's attribute access."""

    def __init__(self, interceptors: Iterable[AttributeInterceptor]):
        self.interceptors = tuple(interceptors)

    def read(self, record: Any, key: str, value: Any) -> Any:
        for interceptor in self.interceptors:
            value = interceptor.on_get(record, key, value)
        return value

    def written(self, record: Any, key: str) -> None:
        for interceptor in self.interceptors:
            interceptor.on_set(record, key, record.get_raw(key))

    def before_serialize(self, record: Any) -> None:
        for interceptor in self.interceptors:
            interceptor.before_serialize(record)

    def names(self) -> list[str]:
        return [interceptor.name for interceptor in self.interceptors]
