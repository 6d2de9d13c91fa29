from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

from .cards import MYTHIC_COOLDOWN
from .player import FIELD_LIMIT, FIELD_WIPE_GRACE_TURNS, POINTS_TO_WIN, RETIRE_COST, PlayerState

Phase = Literal["draw", "main", "combat", "end"]
WinReason = Literal["points", "deckout", "fieldwipe"]


@dataclass(frozen=True)
class RulesConfig:
    starting_hand: int = 5
    field_limit: int = FIELD_LIMIT
    points_to_win: int = POINTS_TO_WIN
    mythic_cooldown: int = MYTHIC_COOLDOWN
    field_wipe_grace_turns: int = FIELD_WIPE_GRACE_TURNS
    retire_cost: int = RETIRE_COST
    base_energy_gain: int = 1


@dataclass(frozen=True)
class GameState:
    """Authoritative table state. Replaced wholesale, never mutated."""

    players: tuple[PlayerState, PlayerState]
    current_player_index: int = 0
    turn_number: int = 0
    phase: Phase = "draw"
    winner: str | None = None
    win_reason: WinReason | None = None
    is_game_over: bool = False
    attacked_this_turn: frozenset[str] = frozenset()
    config: RulesConfig = field(default_factory=RulesConfig)

    @property
    def opponent_index(self) -> int:
        return 1 - self.current_player_index

    def player_index(self, player_id: str) -> int | None:
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        return None

    def with_player(self, index: int, player: PlayerState) -> "GameState":
        players = list(self.players)
        players[index] = player
        return replace(self, players=(players[0], players[1]))
