"""Field Schema — tests for the record-type-global schema registry.

Tests cover:
    - get/set/add/remove/merge semantics
    - Empty mapping for unknown record types
    - is_coercible requires enabled flag, non-empty schema and key membership
    - Published snapshots are immutable and unaffected by later mutation
    - Strict registries reject unknown tokens at registration time
    - Each record class owns its key; a second class gets a numbered variant
    - Concurrent merges never lose entries
"""

import gc
import threading

import pytest

from attrjuggle.core.errors import SchemaError
from attrjuggle.core.field_schema import FieldSchema, SchemaRegistry

KEY = "tests.Person"


def test_get_unknown_type_is_empty(registry):
    assert registry.get("nobody") == {}


def test_set_replaces_wholesale(registry):
    registry.set(KEY, {"age": "integer", "name": "string"})
    registry.set(KEY, {"born_at": "date"})
    assert registry.get(KEY) == {"born_at": "date"}


def test_add_defaults_to_string(registry):
    registry.add(KEY, "nickname")
    registry.add(KEY, "age", "int")
    assert registry.get(KEY) == {"nickname": "string", "age": "int"}


def test_merge_later_entries_win(registry):
    registry.set(KEY, {"age": "string", "active": "boolean"})
    registry.merge(KEY, {"age": "integer", "score": "float"})
    assert registry.get(KEY) == {"age": "integer", "active": "boolean", "score": "float"}


def test_remove_single_sequence_and_comma_list(registry):
    registry.set(KEY, {"a": "string", "b": "string", "c": "string", "d": "string", "e": "string"})
    registry.remove(KEY, "a")
    registry.remove(KEY, ["b", "missing"])
    registry.remove(KEY, "c, d")
    assert registry.get(KEY) == {"e": "string"}


def test_schema_definition_accepts_arbitrary_tokens(registry):
    registry.set(KEY, {"price": "money"})
    assert registry.type_of(KEY, "price") == "money"


def test_get_returns_a_copy(registry):
    registry.set(KEY, {"age": "integer"})
    copy = registry.get(KEY)
    copy["hacked"] = "string"
    assert registry.get(KEY) == {"age": "integer"}


def test_snapshot_survives_mutation(registry):
    registry.set(KEY, {"age": "integer"})
    snapshot = registry._snapshot(KEY)
    registry.merge(KEY, {"name": "string"})
    assert dict(snapshot) == {"age": "integer"}
    with pytest.raises(TypeError):
        snapshot["x"] = "string"


# ─── enabled / coercible ─────────────────────────────────────────

def test_enabled_defaults_from_registry():
    assert SchemaRegistry().is_enabled(KEY) is True
    assert SchemaRegistry(default_enabled=False).is_enabled(KEY) is False


def test_is_coercible_rules(registry):
    assert not registry.is_coercible(KEY, "age")
    registry.set(KEY, {"age": "integer"})
    assert registry.is_coercible(KEY, "age")
    assert not registry.is_coercible(KEY, "name")
    registry.set_enabled(KEY, False)
    assert not registry.is_coercible(KEY, "age")


def test_types_are_isolated(registry):
    registry.set("a.A", {"x": "integer"})
    registry.set("b.B", {"y": "float"})
    assert registry.get("a.A") == {"x": "integer"}
    assert sorted(registry.keys()) == ["a.A", "b.B"]


# ─── FieldSchema handle ──────────────────────────────────────────

def test_field_schema_handle_mutates_registry(registry):
    schema = registry.schema(KEY)
    assert isinstance(schema, FieldSchema)
    schema.set({"a": "integer"})
    schema.add("b")
    schema.merge({"c": "date"})
    schema.remove("a")
    assert registry.get(KEY) == {"b": "string", "c": "date"}
    assert schema.is_coercible("b")
    schema.set_enabled(False)
    assert not schema.is_enabled()
    assert not schema.is_coercible("b")


# ─── key ownership ───────────────────────────────────────────────

def test_claim_is_stable_for_the_same_owner(registry):
    class Owner:
        pass

    assert registry.claim(KEY, Owner) == KEY
    assert registry.claim(KEY, Owner) == KEY


def test_second_owner_gets_a_distinct_key(registry):
    first = type("Person", (), {})
    second = type("Person", (), {})
    assert registry.claim(KEY, first) == KEY
    assert registry.claim(KEY, second) == f"{KEY}#2"
    assert registry.claim(KEY, first) == KEY


def test_collected_owner_releases_its_key(registry):
    owner = type("Person", (), {})
    registry.claim(KEY, owner)
    registry.set(KEY, {"age": "integer"})
    registry.set_enabled(KEY, False)
    del owner
    gc.collect()
    successor = type("Person", (), {})
    assert registry.claim(KEY, successor) == KEY
    assert registry.get(KEY) == {}
    assert registry.is_enabled(KEY)


# ─── strict mode ─────────────────────────────────────────────────

def test_strict_registry_rejects_unknown_tokens():
    strict = SchemaRegistry(strict=True)
    with pytest.raises(SchemaError) as exc:
        strict.set(KEY, {"ok": "int", "price": "money"})
    assert exc.value.fields == ["price"]
    assert exc.value.code == "INVALID_SCHEMA"
    assert strict.get(KEY) == {}


def test_strict_registry_accepts_aliases():
    strict = SchemaRegistry(strict=True)
    strict.merge(KEY, {"a": "bool", "b": "DateTime"})
    assert strict.get(KEY) == {"a": "bool", "b": "DateTime"}


# ─── concurrency ─────────────────────────────────────────────────

def test_concurrent_adds_do_not_lose_fields(registry):
    def worker(offset: int):
        for i in range(50):
            registry.add(KEY, f"f{offset}_{i}", "integer")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(registry.get(KEY)) == 400
