from __future__ import annotations

from typing import Mapping

from .actions import ACTION_TYPES, GameAction
from .player import PlayerState
from .state import GameState
from .types import Card, MonsterCard, SpellCard


class SerializeError(RuntimeError):
    pass


def action_to_dict(a: GameAction) -> dict[str, object]:
    """Wire shape: {type, playerId, cardId?, targetCardId?, attackName?}."""
    out: dict[str, object] = {"type": a.type, "playerId": a.player_id}
    if a.card_id is not None:
        out["cardId"] = a.card_id
    if a.target_card_id is not None:
        out["targetCardId"] = a.target_card_id
    if a.attack_name is not None:
        out["attackName"] = a.attack_name
    return out


def _optional_str(d: Mapping[str, object], key: str) -> str | None:
    v = d.get(key)
    if v is None:
        return None
    if not isinstance(v, str):
        raise SerializeError(f"Expected string for {key}")
    return v


def action_from_dict(d: Mapping[str, object]) -> GameAction:
    t = d.get("type")
    if t not in ACTION_TYPES:
        raise SerializeError(f"Unknown action type: {t!r}")
    player_id = d.get("playerId")
    if not isinstance(player_id, str):
        raise SerializeError("Expected string for playerId")
    return GameAction(
        type=t,  # type: ignore[arg-type]
        player_id=player_id,
        card_id=_optional_str(d, "cardId"),
        target_card_id=_optional_str(d, "targetCardId"),
        attack_name=_optional_str(d, "attackName"),
    )


def card_to_dict(c: Card) -> dict[str, object]:
    if isinstance(c, MonsterCard):
        return {
            "kind": "monster",
            "id": c.id,
            "element": c.element,
            "rarity": c.rarity,
            "hp": c.hp,
            "max_hp": c.max_hp,
            "attacks": [
                {"name": a.name, "damage": a.damage, "energy_cost": a.energy_cost} for a in c.attacks
            ],
            "is_mythic": c.is_mythic,
            "last_attack_turn": c.last_attack_turn,
        }
    assert isinstance(c, SpellCard)
    return {
        "kind": "spell",
        "id": c.id,
        "element": c.element,
        "rarity": c.rarity,
        "energy_cost": c.energy_cost,
        "effect": c.effect,
        "spell_type": c.spell_type,
    }


def _player_to_dict(p: PlayerState) -> dict[str, object]:
    return {
        "id": p.id,
        "hand": [card_to_dict(c) for c in p.hand],
        "field": [card_to_dict(c) for c in p.field],
        "energy": p.energy,
        "points": p.points,
        "is_ai": p.is_ai,
        "has_energy_booster": p.has_energy_booster,
    }


def snapshot(state: GameState, action_log: list[GameAction] | None = None) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the game state."""
    out: dict[str, object] = {
        "current_player_index": state.current_player_index,
        "turn_number": state.turn_number,
        "phase": state.phase,
        "winner": state.winner,
        "win_reason": state.win_reason,
        "is_game_over": state.is_game_over,
        "attacked_this_turn": sorted(state.attacked_this_turn),
        "players": [_player_to_dict(p) for p in state.players],
    }
    if action_log is not None:
        out["action_log"] = [action_to_dict(a) for a in action_log]
    return out
