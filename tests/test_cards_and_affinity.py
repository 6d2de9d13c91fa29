from __future__ import annotations

from dataclasses import replace

import pytest

from elementtcg.engine.affinity import (
    calculate_final_damage,
    damage_modifier,
    has_advantage,
    has_disadvantage,
)
from elementtcg.engine.cards import can_attack, clone, create_monster, heal, is_alive, take_damage
from elementtcg.engine.types import ELEMENTS, Attack, MonsterCard


def _monster(rarity: str = "common", hp: int = 50) -> MonsterCard:
    return create_monster("m1", "m1", "fire", rarity, hp, [Attack("strike", 30, 1)])  # type: ignore[arg-type]


def test_create_monster_sets_max_hp_and_mythic_flag() -> None:
    m = _monster(rarity="mythic", hp=120)
    assert m.max_hp == 120
    assert m.is_mythic
    assert not _monster().is_mythic


@pytest.mark.parametrize("rarity", ["common", "rare", "epic", "legendary", "mythic"])
def test_first_slot_never_attacks_on_opening_turn(rarity: str) -> None:
    m = _monster(rarity=rarity)
    assert not can_attack(m, 1, True)
    assert can_attack(m, 1, False)


def test_mythic_cooldown_is_four_turns() -> None:
    m = _monster(rarity="mythic")
    assert can_attack(m, 2, False)
    used = replace(m, last_attack_turn=5)
    assert not can_attack(used, 6, False)
    assert not can_attack(used, 8, False)
    assert can_attack(used, 9, False)


def test_non_mythic_ignores_last_attack_turn() -> None:
    m = replace(_monster(), last_attack_turn=5)
    assert can_attack(m, 6, True)


def test_take_damage_clamps_and_stamps_max_hp() -> None:
    m = MonsterCard(id="x", name="x", element="air", rarity="common", hp=40, attacks=())
    assert m.max_hp is None
    hit = take_damage(m, 100)
    assert hit.hp == 0
    assert hit.max_hp == 40
    assert not is_alive(hit)
    assert m.hp == 40  # original untouched


def test_heal_caps_at_max_hp() -> None:
    m = take_damage(_monster(hp=50), 30)
    assert heal(m, 10).hp == 30
    assert heal(m, 500).hp == 50


def test_clone_is_equal_value() -> None:
    m = _monster()
    c = clone(m)
    assert c == m


def test_affinity_cycle() -> None:
    wins = [("fire", "air"), ("air", "earth"), ("earth", "water"), ("water", "fire")]
    for attacker, defender in wins:
        assert damage_modifier(attacker, defender) == 20  # type: ignore[arg-type]
        assert damage_modifier(defender, attacker) == -20  # type: ignore[arg-type]
        assert has_advantage(attacker, defender)  # type: ignore[arg-type]
        assert has_disadvantage(defender, attacker)  # type: ignore[arg-type]


def test_all_element_is_neutral_both_ways() -> None:
    for e in ELEMENTS:
        assert damage_modifier("all", e) == 0
        assert damage_modifier(e, "all") == 0


def test_same_and_unrelated_pairs_are_neutral() -> None:
    assert damage_modifier("fire", "fire") == 0
    assert damage_modifier("fire", "earth") == 0
    assert damage_modifier("water", "air") == 0


def test_final_damage_is_not_clamped() -> None:
    assert calculate_final_damage(10, "air", "fire") == -10
    assert calculate_final_damage(30, "water", "fire") == 50
