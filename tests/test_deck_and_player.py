from __future__ import annotations

import random
from dataclasses import replace

from elementtcg.engine import player as pl
from elementtcg.engine.cards import create_monster, take_damage
from elementtcg.engine.deck import Deck
from elementtcg.engine.types import EFFECT_ENERGY_CATALYST, Attack, MonsterCard, SpellCard


def _monster(card_id: str, hp: int = 50) -> MonsterCard:
    return create_monster(card_id, card_id, "earth", "common", hp, [Attack("strike", 20, 1)])


def _catalyst(card_id: str = "cat", cost: int = 2) -> SpellCard:
    return SpellCard(
        id=card_id,
        name=card_id,
        element="all",
        rarity="legendary",
        energy_cost=cost,
        effect=EFFECT_ENERGY_CATALYST,
        spell_type="permanent",
    )


def test_shuffle_preserves_card_ids() -> None:
    cards = [_monster(f"m{i}") for i in range(30)]
    deck = Deck(cards, random.Random(7))
    deck.shuffle()
    assert sorted(c.id for c in deck.cards()) == sorted(c.id for c in cards)
    assert deck.size() == 30


def test_shuffle_is_seedable() -> None:
    cards = [_monster(f"m{i}") for i in range(30)]
    a = Deck(cards, random.Random(99))
    b = Deck(cards, random.Random(99))
    a.shuffle()
    b.shuffle()
    assert [c.id for c in a.cards()] == [c.id for c in b.cards()]


def test_draw_peek_and_empty() -> None:
    deck = Deck([_monster("a"), _monster("b")])
    assert deck.peek() is not None and deck.peek().id == "b"
    assert deck.draw().id == "b"  # type: ignore[union-attr]
    assert deck.draw_multiple(5) == [_monster("a")]
    assert deck.is_empty()
    assert deck.draw() is None
    assert deck.peek() is None
    assert len(deck) == 0


def test_add_remove_and_reset() -> None:
    deck = Deck([], random.Random(1))
    deck.add_card(_monster("x"))
    deck.add_card(_monster("y"))
    removed = deck.remove_card("x")
    assert removed is not None and removed.id == "x"
    assert deck.remove_card("missing") is None
    deck.reset([_monster("p"), _monster("q"), _monster("r")])
    assert sorted(c.id for c in deck.cards()) == ["p", "q", "r"]


def test_play_card_moves_hand_to_field() -> None:
    p = replace(pl.create_player("p1", "p1"), hand=(_monster("a"), _monster("b")))
    after = pl.play_card(p, "a")
    assert [c.id for c in after.field] == ["a"]
    assert [c.id for c in after.hand] == ["b"]
    assert after.energy == p.energy  # summoning is free


def test_play_card_refuses_full_field_and_unknown_card() -> None:
    field = tuple(_monster(f"f{i}") for i in range(4))
    p = replace(pl.create_player("p1", "p1"), hand=(_monster("a"),), field=field)
    assert not pl.can_play_card(p, p.hand[0])
    assert pl.play_card(p, "a") is p
    assert pl.play_card(p, "nope") is p


def test_play_card_refuses_spells() -> None:
    p = replace(pl.create_player("p1", "p1"), hand=(_catalyst(),))
    assert pl.play_card(p, "cat") is p


def test_retire_costs_energy_and_returns_card_to_hand() -> None:
    p = replace(pl.create_player("p1", "p1"), field=(_monster("a"),), energy=2)
    assert pl.can_retire_card(p, "a")
    after = pl.retire_card(p, "a")
    assert after.field == ()
    assert [c.id for c in after.hand] == ["a"]
    assert after.energy == 1


def test_retire_needs_energy() -> None:
    p = replace(pl.create_player("p1", "p1"), field=(_monster("a"),), energy=0)
    assert not pl.can_retire_card(p, "a")
    assert pl.retire_card(p, "a") is p


def test_update_and_remove_dead_cards() -> None:
    p = replace(pl.create_player("p1", "p1"), field=(_monster("a"), _monster("b")))
    dead = take_damage(p.field[0], 999)
    p2 = pl.update_field_card(p, "a", dead)
    assert p2.field[0].hp == 0
    p3 = pl.remove_dead_cards(p2)
    assert [c.id for c in p3.field] == ["b"]
    assert pl.update_field_card(p, "zzz", dead) is p


def test_has_lost_rules() -> None:
    p = pl.create_player("p1", "p1")
    full = Deck([_monster("d")])
    empty = Deck([])
    assert pl.has_lost(p, empty, 1)
    assert pl.loss_reason(empty) == "deckout"
    assert not pl.has_lost(p, full, 2)
    assert pl.has_lost(p, full, 3)
    assert pl.loss_reason(full) == "fieldwipe"
    with_field = replace(p, field=(_monster("a"),))
    assert not pl.has_lost(with_field, full, 10)


def test_has_won_at_four_points() -> None:
    p = pl.create_player("p1", "p1")
    assert not pl.has_won(pl.add_points(p, 3))
    assert pl.has_won(pl.add_points(p, 4))


def test_cast_spell_sets_booster_flag_once() -> None:
    p = replace(pl.create_player("p1", "p1"), hand=(_catalyst("c1"), _catalyst("c2")), energy=5)
    once = pl.cast_spell(p, "c1")
    assert once.has_energy_booster
    assert once.energy == 3
    assert [c.id for c in once.hand] == ["c2"]
    # the legality check only looks at energy
    assert pl.can_cast_spell(once, once.hand[0])  # type: ignore[arg-type]
    twice = pl.cast_spell(once, "c2")
    assert twice.has_energy_booster is True
    assert twice.energy == 1


def test_cast_spell_without_energy_is_noop() -> None:
    p = replace(pl.create_player("p1", "p1"), hand=(_catalyst(cost=3),), energy=2)
    assert pl.cast_spell(p, "cat") is p


def test_add_energy() -> None:
    p = pl.create_player("p1", "p1")
    assert pl.add_energy(p).energy == 1
    assert pl.add_energy(p, 4).energy == 4
