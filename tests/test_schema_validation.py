from __future__ import annotations

import json
import random
import shutil
from pathlib import Path

import pytest

from elementtcg.engine.types import MonsterCard, SpellCard
from elementtcg.paths import get_paths
from elementtcg.services.content import ContentError, ContentService, balanced_deck, build_deck


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def _copy_data(tmp_path: Path) -> Path:
    paths = get_paths()
    data = tmp_path / "data"
    shutil.copytree(paths.data_dir, data)
    return data


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_catalog_parses_both_card_kinds() -> None:
    catalog = _content().load_cards_db()
    zarel = catalog.get("zarel")
    assert isinstance(zarel, MonsterCard)
    assert zarel.is_mythic
    assert zarel.max_hp == zarel.hp
    bolt = catalog.get("fire_bolt")
    assert isinstance(bolt, SpellCard)
    assert bolt.damage is not None and bolt.needs_target
    assert not catalog.get("energy_catalyst").needs_target  # type: ignore[union-attr]


def test_every_bundled_deck_has_twenty_cards() -> None:
    content = _content()
    decks = content.load_decks(content.load_cards_db())
    assert {"tutorial_player", "tutorial_ai", "starter_fire", "starter_water"} <= set(decks)
    for deck in decks.values():
        assert len(deck.card_ids()) == 20


def test_build_deck_assigns_unique_instance_ids() -> None:
    catalog = _content().load_cards_db()
    deck = build_deck(catalog, ["hydys", "hydys", "fire_bolt"], prefix="a_")
    assert [c.id for c in deck] == ["a_hydys_1", "a_hydys_2", "a_fire_bolt_1"]
    assert deck[0].name == catalog.get("hydys").name


def test_build_deck_rejects_unknown_card() -> None:
    catalog = _content().load_cards_db()
    with pytest.raises(ContentError):
        build_deck(catalog, ["not_a_card"])


def test_balanced_deck_follows_rarity_quota() -> None:
    catalog = _content().load_cards_db()
    ids = balanced_deck(catalog, random.Random(5))
    assert len(ids) == 20
    rarities = [catalog.get(i).rarity for i in ids]
    assert rarities.count("common") == 10
    assert rarities.count("rare") == 5
    assert rarities.count("epic") == 3
    assert rarities.count("legendary") == 1
    assert rarities.count("mythic") == 1
    assert all(isinstance(catalog.get(i), MonsterCard) for i in ids)
    assert balanced_deck(catalog, random.Random(5)) == ids


def test_deck_with_unknown_card_is_rejected(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    (data / "decks.json").write_text(
        json.dumps({"version": 1, "decks": [{"id": "bad", "cards": [{"card_id": "ghost", "count": 1}]}]}),
        encoding="utf-8",
    )
    content = ContentService(data, data / "schemas")
    with pytest.raises(ContentError, match="unknown card"):
        content.validate_all()


def test_schema_violation_is_reported(tmp_path: Path) -> None:
    data = _copy_data(tmp_path)
    (data / "decks.json").write_text(json.dumps({"version": 1, "decks": [{"id": "x"}]}), encoding="utf-8")
    content = ContentService(data, data / "schemas")
    with pytest.raises(ContentError, match="Schema validation failed"):
        content.load_decks()


def test_missing_file_is_a_content_error(tmp_path: Path) -> None:
    content = ContentService(tmp_path, get_paths().schema_dir)
    with pytest.raises(ContentError, match="Missing content file"):
        content.load_cards_db()
