"""Juggling Model — JugglingMixin over SQLAlchemy instrumented attributes.

Invariants:
    - Raw storage is the instance state dict plus the expired columns of a persistent
      row; reading an expired column loads it, relationships are never loaded
    - Raw writes go through instrumentation so the unit of work sees them
    - before_insert / before_update run the serialize hooks on the row being flushed,
      so columns assigned directly (obj.col = "7") still reach the DB coerced
    - The flush-time pass only converges loaded columns: expired ones hold what the
      last flush wrote, and no SQL is emitted from inside the flush

Design Decisions:
    - Mapper events registered once on the mixin with propagate=True: every mapped
      subclass inherits them without per-model wiring
    - Only column attributes count as raw storage; relationships belong to a sibling
      interceptor, not to juggling
    - Under AsyncSession an expired read cannot lazy load; create_session_factory
      keeps expire_on_commit=False so committed rows stay loaded
"""

import logging
from typing import Any

from sqlalchemy import event, inspect as sa_inspect

from attrjuggle.models.juggling import JugglingMixin

logger = logging.getLogger(__name__)


class JugglingModel(JugglingMixin):
    """Mix into a DeclarativeBase model: class Person(JugglingModel, Base)."""

    def get_raw(self, key: str) -> Any:
        state = sa_inspect(self)
        if key in self._expired_columns(state):
            return getattr(self, key)
        return state.dict.get(key)

    def set_raw(self, key: str, value: Any) -> None:
        setattr(self, key, value)

    def has_raw(self, key: str) -> bool:
        state = sa_inspect(self)
        return key in state.dict or key in self._expired_columns(state)

    def raw_keys(self) -> list[str]:
        state = sa_inspect(self)
        expired = self._expired_columns(state)
        return [
            attr.key for attr in state.mapper.column_attrs
            if attr.key in state.dict or attr.key in expired
        ]

    def to_storage(self) -> dict[str, Any]:
        """Load expired columns first so the serialize pass sees the whole row."""
        for key in self._expired_columns(sa_inspect(self)):
            getattr(self, key)
        return super().to_storage()

    def juggle_attributes(self) -> None:
        """Coerce every loaded schema field. Fails fast."""
        loaded = sa_inspect(self).dict
        for key in self.get_jugglable():
            if loaded.get(key) is not None:
                self.juggle_attribute(key, loaded[key])

    @staticmethod
    def _expired_columns(state) -> set[str]:
        if not state.persistent:
            return set()
        column_keys = {attr.key for attr in state.mapper.column_attrs}
        return column_keys & set(state.unloaded)


@event.listens_for(JugglingModel, "before_insert", propagate=True)
def _juggle_before_insert(mapper, connection, target: JugglingModel) -> None:
    logger.debug(f"Juggling {mapper.class_.__name__} before insert")
    target.interceptor_chain().before_serialize(target)


@event.listens_for(JugglingModel, "before_update", propagate=True)
def _juggle_before_update(mapper, connection, target: JugglingModel) -> None:
    logger.debug(f"Juggling {mapper.class_.__name__} before update")
    target.interceptor_chain().before_serialize(target)
