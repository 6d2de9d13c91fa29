from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from .cards import is_alive
from .deck import Deck
from .types import EFFECT_ENERGY_CATALYST, Card, MonsterCard, SpellCard

FIELD_LIMIT = 4
POINTS_TO_WIN = 4
RETIRE_COST = 1
FIELD_WIPE_GRACE_TURNS = 2

LossReason = Literal["deckout", "fieldwipe"]


@dataclass(frozen=True)
class PlayerState:
    """One side of the table.

    Every mutator below returns a new PlayerState. A mutator that refuses the
    transition returns the *same* object, so callers detect a no-op with `is`.
    """

    id: str
    name: str
    hand: tuple[Card, ...] = ()
    field: tuple[MonsterCard, ...] = ()
    energy: int = 0
    points: int = 0
    is_ai: bool = False
    has_energy_booster: bool = False

    def find_in_hand(self, card_id: str) -> Card | None:
        for c in self.hand:
            if c.id == card_id:
                return c
        return None

    def find_on_field(self, card_id: str) -> MonsterCard | None:
        for c in self.field:
            if c.id == card_id:
                return c
        return None


def create_player(id: str, name: str, is_ai: bool = False) -> PlayerState:
    return PlayerState(id=id, name=name, is_ai=is_ai)


def draw_card(player: PlayerState, deck: Deck) -> PlayerState:
    card = deck.draw()
    if card is None:
        return player
    return replace(player, hand=player.hand + (card,))


def can_play_card(player: PlayerState, card: Card, field_limit: int = FIELD_LIMIT) -> bool:
    # Summoning is free; only field space matters.
    return len(player.field) < field_limit


def play_card(player: PlayerState, card_id: str, field_limit: int = FIELD_LIMIT) -> PlayerState:
    card = player.find_in_hand(card_id)
    if not isinstance(card, MonsterCard):
        return player
    if not can_play_card(player, card, field_limit):
        return player
    hand = tuple(c for c in player.hand if c.id != card_id)
    return replace(player, hand=hand, field=player.field + (card,))


def can_retire_card(player: PlayerState, card_id: str, cost: int = RETIRE_COST) -> bool:
    return player.find_on_field(card_id) is not None and player.energy >= cost


def retire_card(player: PlayerState, card_id: str, cost: int = RETIRE_COST) -> PlayerState:
    if not can_retire_card(player, card_id, cost):
        return player
    card = player.find_on_field(card_id)
    assert card is not None
    field = tuple(c for c in player.field if c.id != card_id)
    return replace(player, field=field, hand=player.hand + (card,), energy=player.energy - cost)


def add_energy(player: PlayerState, amount: int = 1) -> PlayerState:
    return replace(player, energy=player.energy + amount)


def add_points(player: PlayerState, points: int) -> PlayerState:
    return replace(player, points=player.points + points)


def update_field_card(player: PlayerState, card_id: str, updated: MonsterCard) -> PlayerState:
    for i, c in enumerate(player.field):
        if c.id == card_id:
            field = player.field[:i] + (updated,) + player.field[i + 1 :]
            return replace(player, field=field)
    return player


def remove_dead_cards(player: PlayerState) -> PlayerState:
    alive = tuple(c for c in player.field if is_alive(c))
    if len(alive) == len(player.field):
        return player
    return replace(player, field=alive)


def has_lost(
    player: PlayerState,
    deck: Deck,
    turn_number: int,
    grace_turns: int = FIELD_WIPE_GRACE_TURNS,
) -> bool:
    if deck.is_empty():
        return True
    # Both sides get an opening turn before an empty field counts.
    return len(player.field) == 0 and turn_number > grace_turns


def loss_reason(deck: Deck) -> LossReason:
    return "deckout" if deck.is_empty() else "fieldwipe"


def has_won(player: PlayerState, points_to_win: int = POINTS_TO_WIN) -> bool:
    return player.points >= points_to_win


def can_cast_spell(player: PlayerState, spell: SpellCard) -> bool:
    return player.energy >= spell.energy_cost


def cast_spell(player: PlayerState, spell_id: str) -> PlayerState:
    """Pay for a spell in hand and move it out of play.

    The energy catalyst sets a permanent flag; casting it again changes
    nothing beyond the energy spent. The engine refuses such a recast.
    """
    spell = player.find_in_hand(spell_id)
    if not isinstance(spell, SpellCard) or not can_cast_spell(player, spell):
        return player
    hand = tuple(c for c in player.hand if c.id != spell_id)
    booster = player.has_energy_booster or spell.effect == EFFECT_ENERGY_CATALYST
    return replace(
        player,
        hand=hand,
        energy=player.energy - spell.energy_cost,
        has_energy_booster=booster,
    )
