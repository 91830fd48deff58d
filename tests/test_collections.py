from __future__ import annotations

from pathlib import Path

from catalyst.keyvalues import parse
from catalyst.steam.user_collections import (
    clean_collection_name,
    extract_collections,
    load_collections,
    merge_collections,
)
from conftest import write

SHAREDCONFIG = '''
"UserRoamingConfigStore"
{
    "Software"
    {
        "Valve"
        {
            "Steam"
            {
                "Apps"
                {
                    "70"
                    {
                        "tags"
                        {
                            "0"     "Favorites"
                            "1"     "  Shooters  "
                        }
                    }
                    "440"
                    {
                        "Hidden"    "1"
                    }
                    "notanapp"
                    {
                        "tags" { "0" "Ignored" }
                    }
                }
            }
        }
    }
}
'''


def test_clean_collection_name() -> None:
    assert clean_collection_name("Favorites") == "Favorites"
    assert clean_collection_name("  Co-op\0") == "Co-op"
    assert clean_collection_name("42") is None
    assert clean_collection_name("true") is None
    assert clean_collection_name("") is None
    assert clean_collection_name("   ") is None


def test_extract_collections() -> None:
    assert extract_collections(parse(SHAREDCONFIG)) == {"70": {"Favorites", "Shooters"}}


def test_tag_keys_used_as_names() -> None:
    doc = parse('"apps" { "10" { "tags" { "RPG" "1" "7" "Indie" } } }')
    assert extract_collections(doc) == {"10": {"RPG", "Indie"}}


def test_app_without_tags_contributes_nothing() -> None:
    assert extract_collections(parse('"apps" { "10" { "LastPlayed" "1700000000" } }')) == {}


def test_merge_collections() -> None:
    merged = merge_collections({"70": {"Favorites"}}, {"70": ["RPG"], "10": ["Indie"]})
    assert merged == {"70": {"Favorites", "RPG"}, "10": {"Indie"}}


def test_load_collections_skips_missing_and_malformed(tmp_path: Path) -> None:
    shared = write(tmp_path / "sharedconfig.vdf", SHAREDCONFIG)
    local = write(tmp_path / "localconfig.vdf", '"apps" { "70" { "tags" { "0" } } }')
    other = write(tmp_path / "other.vdf", '"apps" { "20" { "tags" { "0" "Puzzle" } } }')
    result = load_collections([str(tmp_path / "missing.vdf"), str(shared), str(local), str(other)])
    assert result == {"70": {"Favorites", "Shooters"}, "20": {"Puzzle"}}
