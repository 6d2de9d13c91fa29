"""Elemental affinity table.

This module is the only place the element cycle is defined; previews and
animations call into it instead of keeping their own copy.
"""

from __future__ import annotations

from .types import Element

AFFINITY_BONUS = 20

# attacker -> element it beats
_BEATS: dict[Element, Element] = {
    "fire": "air",
    "air": "earth",
    "earth": "water",
    "water": "fire",
}


def _build_matrix() -> dict[Element, dict[Element, int]]:
    elements: tuple[Element, ...] = ("fire", "water", "air", "earth", "all")
    matrix: dict[Element, dict[Element, int]] = {a: {d: 0 for d in elements} for a in elements}
    for attacker, defender in _BEATS.items():
        matrix[attacker][defender] = AFFINITY_BONUS
        matrix[defender][attacker] = -AFFINITY_BONUS
    return matrix


AFFINITY_MATRIX = _build_matrix()


def damage_modifier(attacker: Element, defender: Element) -> int:
    return AFFINITY_MATRIX.get(attacker, {}).get(defender, 0)


def calculate_final_damage(base_damage: int, attacker: Element, defender: Element) -> int:
    """Unclamped; callers keep the result at or above zero."""
    return base_damage + damage_modifier(attacker, defender)


def has_advantage(attacker: Element, defender: Element) -> bool:
    return damage_modifier(attacker, defender) > 0


def has_disadvantage(attacker: Element, defender: Element) -> bool:
    return damage_modifier(attacker, defender) < 0
