"""Turn/phase state machine and win-condition evaluation.

Phases cycle draw -> main -> end for the active player. `combat` is a legal
phase value that nothing transitions into yet; attacks are declared from main.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from . import player as pl
from .actions import GameAction
from .deck import Deck
from .state import GameState
from .types import MonsterCard, SpellCard


def current_player(state: GameState) -> pl.PlayerState:
    return state.players[state.current_player_index]


def opponent(state: GameState) -> pl.PlayerState:
    return state.players[state.opponent_index]


def energy_gain_for(state: GameState) -> int:
    """Energy the active player receives from the next `start_turn`."""
    active = current_player(state)
    if active.has_energy_booster:
        return state.turn_number
    return state.config.base_energy_gain


def start_turn(state: GameState, decks: Sequence[Deck]) -> GameState:
    idx = state.current_player_index
    active = pl.add_energy(current_player(state), energy_gain_for(state))
    active = pl.draw_card(active, decks[idx])

    new_state = replace(
        state.with_player(idx, active),
        phase="main",
        turn_number=state.turn_number + 1,
        attacked_this_turn=frozenset(),
    )
    # The draw may have emptied the deck.
    return check_win_conditions(new_state, decks)


def end_turn(state: GameState) -> GameState:
    return replace(state, current_player_index=state.opponent_index, phase="draw")


def check_win_conditions(state: GameState, decks: Sequence[Deck]) -> GameState:
    if state.is_game_over:
        return state
    cfg = state.config
    p1, p2 = state.players
    d1, d2 = decks[0], decks[1]

    if pl.has_won(p1, cfg.points_to_win):
        return _finish(state, p1.id, "points")
    if pl.has_won(p2, cfg.points_to_win):
        return _finish(state, p2.id, "points")
    if pl.has_lost(p1, d1, state.turn_number, cfg.field_wipe_grace_turns):
        return _finish(state, p2.id, pl.loss_reason(d1))
    if pl.has_lost(p2, d2, state.turn_number, cfg.field_wipe_grace_turns):
        return _finish(state, p1.id, pl.loss_reason(d2))
    return state


def _finish(state: GameState, winner: str, reason: str) -> GameState:
    return replace(state, winner=winner, win_reason=reason, is_game_over=True)


def can_perform_action(state: GameState, action: GameAction) -> bool:
    if state.is_game_over:
        return False
    active = current_player(state)
    if action.player_id != active.id:
        return False

    if action.type == "PLAY_CARD":
        if not action.card_id:
            return False
        card = active.find_in_hand(action.card_id)
        if not isinstance(card, MonsterCard):
            return False
        return pl.can_play_card(active, card, state.config.field_limit)

    if action.type == "RETIRE_CARD":
        if not action.card_id:
            return False
        return pl.can_retire_card(active, action.card_id, state.config.retire_cost)

    if action.type == "ATTACK":
        if state.current_player_index == 0 and state.turn_number == 1:
            return False
        return state.phase in ("main", "combat")

    if action.type == "CAST_SPELL":
        if not action.card_id:
            return False
        spell = active.find_in_hand(action.card_id)
        if not isinstance(spell, SpellCard):
            return False
        return pl.can_cast_spell(active, spell)

    if action.type == "END_TURN":
        return True

    return False
