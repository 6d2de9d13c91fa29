from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ActionType = Literal["PLAY_CARD", "CAST_SPELL", "ATTACK", "RETIRE_CARD", "END_TURN"]

ACTION_TYPES: tuple[ActionType, ...] = (
    "PLAY_CARD",
    "CAST_SPELL",
    "ATTACK",
    "RETIRE_CARD",
    "END_TURN",
)


@dataclass(frozen=True)
class GameAction:
    type: ActionType
    player_id: str
    card_id: str | None = None
    target_card_id: str | None = None
    attack_name: str | None = None

    @staticmethod
    def play_card(player_id: str, card_id: str) -> "GameAction":
        return GameAction(type="PLAY_CARD", player_id=player_id, card_id=card_id)

    @staticmethod
    def cast_spell(player_id: str, card_id: str, target_card_id: str | None = None) -> "GameAction":
        return GameAction(
            type="CAST_SPELL", player_id=player_id, card_id=card_id, target_card_id=target_card_id
        )

    @staticmethod
    def attack(
        player_id: str, card_id: str, attack_name: str, target_card_id: str | None = None
    ) -> "GameAction":
        return GameAction(
            type="ATTACK",
            player_id=player_id,
            card_id=card_id,
            target_card_id=target_card_id,
            attack_name=attack_name,
        )

    @staticmethod
    def retire_card(player_id: str, card_id: str) -> "GameAction":
        return GameAction(type="RETIRE_CARD", player_id=player_id, card_id=card_id)

    @staticmethod
    def end_turn(player_id: str) -> "GameAction":
        return GameAction(type="END_TURN", player_id=player_id)
