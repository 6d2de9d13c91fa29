from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

Element = Literal["fire", "water", "air", "earth", "all"]
Rarity = Literal["common", "rare", "epic", "legendary", "mythic"]
SpellType = Literal["instant", "continuous", "enchantment", "permanent"]

ELEMENTS: tuple[Element, ...] = ("fire", "water", "air", "earth", "all")
RARITIES: tuple[Rarity, ...] = ("common", "rare", "epic", "legendary", "mythic")

# Stable spell effect identifiers. Display text lives with the host.
EFFECT_ENERGY_CATALYST = "energy_catalyst"
EFFECT_DIRECT_DAMAGE = "direct_damage"
EFFECT_HEAL = "heal"


@dataclass(frozen=True)
class Attack:
    name: str
    damage: int
    energy_cost: int


@dataclass(frozen=True)
class MonsterCard:
    id: str
    name: str
    element: Element
    rarity: Rarity
    hp: int
    attacks: tuple[Attack, ...]
    max_hp: int | None = None
    is_mythic: bool = False
    last_attack_turn: int | None = None

    def find_attack(self, name: str) -> Attack | None:
        for attack in self.attacks:
            if attack.name == name:
                return attack
        return None


@dataclass(frozen=True)
class SpellCard:
    id: str
    name: str
    element: Element
    rarity: Rarity
    energy_cost: int
    effect: str
    spell_type: SpellType
    damage: int | None = None
    healing: int | None = None

    @property
    def needs_target(self) -> bool:
        return self.effect in (EFFECT_DIRECT_DAMAGE, EFFECT_HEAL)


Card = MonsterCard | SpellCard


@dataclass(frozen=True)
class CardCatalog:
    """Immutable card definitions keyed by catalog id."""

    cards: dict[str, Card]

    def get(self, card_id: str) -> Card:
        return self.cards[card_id]

    def all_ids(self) -> Sequence[str]:
        return list(self.cards.keys())

    def monsters(self) -> list[MonsterCard]:
        return [c for c in self.cards.values() if isinstance(c, MonsterCard)]

    def spells(self) -> list[SpellCard]:
        return [c for c in self.cards.values() if isinstance(c, SpellCard)]
