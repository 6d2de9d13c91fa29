from __future__ import annotations

import json
import random
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Mapping

from jsonschema import Draft202012Validator

from elementtcg.engine.cards import create_monster
from elementtcg.engine.types import (
    EFFECT_DIRECT_DAMAGE,
    EFFECT_HEAL,
    RARITIES,
    Attack,
    Card,
    CardCatalog,
    MonsterCard,
    SpellCard,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: e.path)
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _parse_attack(raw: Mapping[str, object]) -> Attack:
    attack = Attack(
        name=_require_str(raw, "name"),
        damage=_require_int(raw, "damage"),
        energy_cost=_require_int(raw, "energy_cost"),
    )
    if attack.damage < 0 or attack.energy_cost < 0:
        raise ContentError(f"Attack {attack.name} has a negative value")
    return attack


def _parse_monster(raw: Mapping[str, object]) -> MonsterCard:
    attacks_raw = raw.get("attacks")
    if not isinstance(attacks_raw, list) or not attacks_raw:
        raise ContentError(f"Monster {raw.get('id')} needs at least one attack")
    attacks = tuple(_parse_attack(a) for a in attacks_raw if isinstance(a, dict))
    names = [a.name for a in attacks]
    if len(set(names)) != len(names):
        raise ContentError(f"Duplicate attack name on {raw.get('id')}")
    hp = _require_int(raw, "hp")
    if hp <= 0:
        raise ContentError(f"Monster {raw.get('id')} hp must be positive")
    return create_monster(
        id=_require_str(raw, "id"),
        name=_require_str(raw, "name"),
        element=_require_str(raw, "element"),  # type: ignore[arg-type]
        rarity=_require_str(raw, "rarity"),  # type: ignore[arg-type]
        hp=hp,
        attacks=attacks,
    )


def _parse_spell(raw: Mapping[str, object]) -> SpellCard:
    spell = SpellCard(
        id=_require_str(raw, "id"),
        name=_require_str(raw, "name"),
        element=_require_str(raw, "element"),  # type: ignore[arg-type]
        rarity=_require_str(raw, "rarity"),  # type: ignore[arg-type]
        energy_cost=_require_int(raw, "energy_cost"),
        effect=_require_str(raw, "effect"),
        spell_type=_require_str(raw, "spell_type"),  # type: ignore[arg-type]
        damage=_optional_int(raw, "damage"),
        healing=_optional_int(raw, "healing"),
    )
    if spell.energy_cost < 0:
        raise ContentError(f"Spell {spell.id} has a negative cost")
    if spell.effect == EFFECT_DIRECT_DAMAGE and spell.damage is None:
        raise ContentError(f"Spell {spell.id} needs a damage value")
    if spell.effect == EFFECT_HEAL and spell.healing is None:
        raise ContentError(f"Spell {spell.id} needs a healing value")
    return spell


@dataclass(frozen=True)
class DeckEntry:
    card_id: str
    count: int


@dataclass(frozen=True)
class DeckList:
    id: str
    entries: tuple[DeckEntry, ...]

    def card_ids(self) -> list[str]:
        out: list[str] = []
        for e in self.entries:
            out.extend([e.card_id] * e.count)
        return out


def build_deck(catalog: CardCatalog, card_ids: Iterable[str], prefix: str = "") -> list[Card]:
    """Instantiate catalog cards with unique instance ids (`<prefix><card_id>_<n>`)."""
    seen: dict[str, int] = {}
    deck: list[Card] = []
    for card_id in card_ids:
        try:
            base = catalog.get(card_id)
        except KeyError as e:
            raise ContentError(f"Unknown card id in deck: {card_id}") from e
        n = seen.get(card_id, 0) + 1
        seen[card_id] = n
        deck.append(replace(base, id=f"{prefix}{card_id}_{n}"))
    return deck


# Share of each rarity in a balanced deck; mythic takes the remainder.
BALANCED_SPLIT: dict[str, float] = {
    "common": 0.5,
    "rare": 0.25,
    "epic": 0.15,
    "legendary": 0.08,
}


def balanced_deck(catalog: CardCatalog, rng: random.Random, size: int = 20) -> list[str]:
    """Pick monster card ids by rarity quota. Rarities with no cards are skipped."""
    by_rarity: dict[str, list[str]] = {r: [] for r in RARITIES}
    for card in catalog.monsters():
        by_rarity[card.rarity].append(card.id)

    counts = {r: int(size * share) for r, share in BALANCED_SPLIT.items()}
    counts["mythic"] = size - sum(counts.values())

    out: list[str] = []
    for rarity in RARITIES:
        pool = sorted(by_rarity[rarity])
        if not pool:
            continue
        for _ in range(counts[rarity]):
            out.append(rng.choice(pool))
    return out


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_cards_db(self) -> CardCatalog:
        cards_path = self._data_dir / "cards.json"
        raw = _load_json(cards_path)
        schema = _load_json(self._schema_dir / "cards.schema.json")
        validate_json(raw, schema, context=str(cards_path))

        if not isinstance(raw, dict):
            raise ContentError("cards.json must be an object")
        raw_cards = raw.get("cards")
        if not isinstance(raw_cards, list):
            raise ContentError("cards.json.cards must be a list")

        cards: dict[str, Card] = {}
        for item in raw_cards:
            if not isinstance(item, dict):
                continue
            ctype = _require_str(item, "type")
            card: Card = _parse_monster(item) if ctype == "monster" else _parse_spell(item)
            if card.id in cards:
                raise ContentError(f"Duplicate card id: {card.id}")
            cards[card.id] = card
        return CardCatalog(cards=cards)

    def load_decks(self, catalog: CardCatalog | None = None) -> dict[str, DeckList]:
        path = self._data_dir / "decks.json"
        raw = _load_json(path)
        schema = _load_json(self._schema_dir / "decks.schema.json")
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("decks.json must be an object")
        raw_decks = raw.get("decks")
        if not isinstance(raw_decks, list):
            raise ContentError("decks.json.decks must be a list")

        out: dict[str, DeckList] = {}
        for d in raw_decks:
            if not isinstance(d, dict):
                continue
            entries = tuple(
                DeckEntry(card_id=_require_str(e, "card_id"), count=_require_int(e, "count"))
                for e in d.get("cards", [])
                if isinstance(e, dict)
            )
            deck = DeckList(id=_require_str(d, "id"), entries=entries)
            if catalog is not None:
                for e in deck.entries:
                    if e.card_id not in catalog.cards:
                        raise ContentError(f"Deck {deck.id} references unknown card {e.card_id}")
            out[deck.id] = deck
        return out

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        catalog = self.load_cards_db()
        _ = self.load_decks(catalog)
