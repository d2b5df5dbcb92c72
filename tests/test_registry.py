"""Tests for the schema registry."""

import threading

from schemata import SchemaRegistry, get_registry, list_named_schemas, s, use_registry


def test_id_registers_the_named_clone(registry):
    named = s.string().id("Name")
    assert registry.get("Name") is named
    assert named.name == "Name"


def test_id_does_not_name_the_original():
    base = s.string()
    base.id("Name")
    assert base.name is None


def test_list_named_schemas_in_registration_order():
    s.string().id("B")
    s.number().id("A")
    assert [name for name, _ in list_named_schemas()] == ["B", "A"]


def test_re_registering_replaces():
    s.string().id("X")
    replacement = s.number().id("X")
    assert get_registry().get("X") is replacement
    assert len(get_registry()) == 1


def test_use_registry_isolates_and_restores():
    outer = get_registry()
    with use_registry() as inner:
        s.string().id("Inner")
        assert "Inner" in inner
    assert get_registry() is outer
    assert "Inner" not in outer


def test_explicit_registry_and_clear():
    registry = SchemaRegistry()
    with use_registry(registry):
        s.string().id("A")
    assert registry.names() == ["A"]
    registry.clear()
    assert len(registry) == 0


def test_concurrent_registration():
    registry = SchemaRegistry()
    schema = s.string()

    def register(start):
        for i in range(start, start + 100):
            registry.register(f"S{i}", schema)

    threads = [threading.Thread(target=register, args=(n * 100,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(registry.list_named_schemas()) == 400
