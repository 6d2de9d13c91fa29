from __future__ import annotations

from dataclasses import replace

from .types import Attack, Element, MonsterCard, Rarity

MYTHIC_COOLDOWN = 4


def create_monster(
    id: str,
    name: str,
    element: Element,
    rarity: Rarity,
    hp: int,
    attacks: tuple[Attack, ...] | list[Attack],
) -> MonsterCard:
    return MonsterCard(
        id=id,
        name=name,
        element=element,
        rarity=rarity,
        hp=hp,
        max_hp=hp,
        attacks=tuple(attacks),
        is_mythic=rarity == "mythic",
    )


def can_attack(
    card: MonsterCard,
    turn_number: int,
    is_first_player_slot: bool,
    cooldown: int = MYTHIC_COOLDOWN,
) -> bool:
    # Slot 0 never attacks on the opening turn.
    if turn_number == 1 and is_first_player_slot:
        return False
    if not card.is_mythic:
        return True
    if card.last_attack_turn is None:
        return True
    return turn_number - card.last_attack_turn >= cooldown


def take_damage(card: MonsterCard, damage: int) -> MonsterCard:
    max_hp = card.max_hp if card.max_hp is not None else card.hp
    return replace(card, hp=max(0, card.hp - damage), max_hp=max_hp)


def heal(card: MonsterCard, amount: int) -> MonsterCard:
    cap = card.max_hp if card.max_hp is not None else card.hp
    return replace(card, hp=min(cap, card.hp + amount))


def is_alive(card: MonsterCard) -> bool:
    return card.hp > 0


def clone(card: MonsterCard) -> MonsterCard:
    return replace(card, attacks=tuple(card.attacks))
