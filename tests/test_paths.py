from __future__ import annotations

from catalyst.keyvalues import (
    KVObject,
    dumps,
    ensure_path,
    find,
    find_all_objects,
    find_leaf,
    find_leaf_deep,
    find_object,
    find_path,
    parse,
    remove_entry,
    set_leaf,
)


def test_find_is_case_insensitive() -> None:
    doc = parse('"Apps" { "10" "x" }')
    assert find(doc, "Apps") is find(doc, "apps")
    assert find(doc, "APPS") == KVObject([("10", "x")])


def test_find_first_duplicate_wins() -> None:
    doc = parse('"key" "first" "KEY" "second"')
    assert find(doc, "key") == "first"


def test_find_missing_returns_none() -> None:
    assert find(parse('"a" "1"'), "b") is None


def test_typed_finds_skip_other_kind() -> None:
    doc = parse('"tags" "0" "tags" { "0" "Favorites" }')
    assert find_leaf(doc, "tags") == "0"
    assert find_object(doc, "tags") == KVObject([("0", "Favorites")])


def test_find_path() -> None:
    doc = parse('"a" { "B" { "c" "1" } }')
    assert find_path(doc, ["a", "b"]) == KVObject([("c", "1")])
    assert find_path(doc, ["a", "missing"]) is None
    assert find_path(doc, []) is doc


def test_find_all_objects_any_depth() -> None:
    doc = parse('''
        "Root" {
            "apps" { "1" { } }
            "Software" { "Valve" { "Steam" { "Apps" { "2" { } } } } }
            "apps" "not an object"
        }
    ''')
    found = find_all_objects(doc, "apps")
    assert [obj.keys() for obj in found] == [["1"], ["2"]]


def test_find_leaf_deep_preorder() -> None:
    doc = parse('"AppState" { "Nested" { "installdir" "Deep" } "installdir" "Shallow" }')
    assert find_leaf_deep(doc, "InstallDir") == "Deep"
    assert find_leaf_deep(doc, "missing") is None


def test_ensure_path_creates_objects() -> None:
    doc = KVObject()
    leaf_holder = ensure_path(doc, ["a", "b", "c"])
    set_leaf(leaf_holder, "x", "1")
    assert dumps(doc) == dumps(parse('"a" { "b" { "c" { "x" "1" } } }'))


def test_ensure_path_reuses_existing_objects_case_insensitively() -> None:
    doc = parse('"Software" { "Valve" { "keep" "me" } }')
    valve = ensure_path(doc, ["software", "VALVE"])
    assert valve.entries == [("keep", "me")]
    assert len(doc) == 1


def test_ensure_path_replaces_leaf_with_object() -> None:
    doc = parse('"before" "1" "apps" "oops" "after" "2"')
    apps = ensure_path(doc, ["apps", "70"])
    assert apps == KVObject()
    assert doc.keys() == ["before", "apps", "after"]
    assert find(doc, "apps") == KVObject([("70", KVObject())])


def test_set_leaf_replaces_in_place() -> None:
    doc = parse('"a" "1" "LaunchOptions" "old" "b" "2"')
    set_leaf(doc, "launchoptions", "new")
    assert doc.entries == [("a", "1"), ("LaunchOptions", "new"), ("b", "2")]


def test_set_leaf_appends_when_missing() -> None:
    doc = parse('"a" "1"')
    set_leaf(doc, "b", "2")
    assert doc.entries == [("a", "1"), ("b", "2")]


def test_set_leaf_collapses_duplicates() -> None:
    doc = parse('"k" "1" "x" "y" "K" "2"')
    set_leaf(doc, "k", "3")
    assert doc.entries == [("k", "3"), ("x", "y")]


def test_remove_entry_removes_all_matches() -> None:
    doc = parse('"a" "1" "b" "2" "A" { }')
    assert remove_entry(doc, "a") == 2
    assert doc.entries == [("b", "2")]
    assert remove_entry(doc, "a") == 0
