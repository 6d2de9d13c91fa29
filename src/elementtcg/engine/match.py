from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Sequence

from . import player as pl
from .actions import GameAction
from .affinity import calculate_final_damage
from .cards import can_attack, heal, is_alive, take_damage
from .deck import Deck
from .state import GameState, RulesConfig
from .turns import (
    can_perform_action,
    check_win_conditions,
    current_player,
    end_turn,
    energy_gain_for,
    opponent,
    start_turn,
)
from .types import (
    EFFECT_DIRECT_DAMAGE,
    EFFECT_ENERGY_CATALYST,
    EFFECT_HEAL,
    Card,
    SpellCard,
)

logger = logging.getLogger(__name__)

Event = dict[str, object]
EnergyGainCallback = Callable[[str, int], None]


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None


class GameEngine:
    """Owns the authoritative GameState and both draw piles.

    `execute_action` is the only mutating entry point. Calls must be
    serialized by the host.
    """

    def __init__(
        self,
        player1: pl.PlayerState,
        player2: pl.PlayerState,
        deck1: Iterable[Card],
        deck2: Iterable[Card],
        *,
        seed: int | None = None,
        config: RulesConfig | None = None,
        on_player_energy_gain: EnergyGainCallback | None = None,
    ) -> None:
        self.seed = seed
        self.config = config or RulesConfig()
        self.rng = random.Random(seed)
        self.action_log: list[GameAction] = []
        self.event_log: list[Event] = []
        self._on_energy_gain = on_player_energy_gain

        self._decks = (Deck(deck1, self.rng), Deck(deck2, self.rng))
        for deck in self._decks:
            deck.shuffle()

        self._state = GameState(players=(player1, player2), config=self.config)
        self._deal_opening_hands()
        self._begin_turn()
        if self._state.is_game_over:
            self._emit_game_ended()

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def execute_action(self, action: GameAction) -> bool:
        return self.step(action).ok

    def step(self, action: GameAction) -> StepResult:
        """Validate and resolve one action.

        A rejected action leaves the state exactly as it was.
        """
        if self._state.is_game_over:
            return StepResult(ok=False, events=[], error="game_over")

        # Log first so a replay sees every attempted action.
        self.action_log.append(action)

        if not can_perform_action(self._state, action):
            error = "not_your_turn" if action.player_id != self.get_current_player().id else "illegal_action"
            logger.debug("Rejected %s from %s: %s", action.type, action.player_id, error)
            return StepResult(ok=False, events=[], error=error)

        mark = len(self.event_log)
        before = self._state
        if action.type == "PLAY_CARD":
            error = self._play_card(action)
        elif action.type == "RETIRE_CARD":
            error = self._retire_card(action)
        elif action.type == "CAST_SPELL":
            error = self._cast_spell(action)
        elif action.type == "ATTACK":
            error = self._attack(action)
        elif action.type == "END_TURN":
            error = self._end_turn()
        else:
            error = "unknown_action"

        if error is not None:
            assert self._state is before
            logger.debug("Rejected %s from %s: %s", action.type, action.player_id, error)
            return StepResult(ok=False, events=[], error=error)

        if self._state.is_game_over and not before.is_game_over:
            self._emit_game_ended()
        return StepResult(ok=True, events=self.event_log[mark:])

    def get_game_state(self) -> GameState:
        # Frozen; callers cannot mutate it.
        return self._state

    def get_current_player(self) -> pl.PlayerState:
        return current_player(self._state)

    def get_opponent(self) -> pl.PlayerState:
        return opponent(self._state)

    def get_players(self) -> tuple[pl.PlayerState, pl.PlayerState]:
        return self._state.players

    def is_game_over(self) -> bool:
        return self._state.is_game_over

    def get_winner(self) -> str | None:
        return self._state.winner

    def get_decks_sizes(self) -> tuple[int, int]:
        return (self._decks[0].size(), self._decks[1].size())

    def set_on_player_energy_gain(self, callback: EnergyGainCallback | None) -> None:
        self._on_energy_gain = callback

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def _emit(self, event: Event) -> None:
        self.event_log.append(event)

    def _emit_game_ended(self) -> None:
        self._emit(
            {
                "type": "GAME_ENDED",
                "winner": self._state.winner,
                "reason": self._state.win_reason,
                "turn": self._state.turn_number,
            }
        )

    def _deal_opening_hands(self) -> None:
        p1, p2 = self._state.players
        for _ in range(self.config.starting_hand):
            p1 = pl.draw_card(p1, self._decks[0])
            p2 = pl.draw_card(p2, self._decks[1])
        self._state = replace(self._state, players=(p1, p2))

    def _begin_turn(self) -> None:
        gain = energy_gain_for(self._state)
        active = self.get_current_player()
        self._state = start_turn(self._state, self._decks)
        self._emit(
            {
                "type": "TURN_STARTED",
                "player": active.id,
                "turn": self._state.turn_number,
                "energy_gained": gain,
            }
        )
        if not active.is_ai and self._on_energy_gain is not None:
            self._on_energy_gain(active.id, gain)

    def _advance_turn(self) -> None:
        self._emit({"type": "TURN_ENDED", "player": self.get_current_player().id})
        self._state = end_turn(self._state)
        self._begin_turn()

    def _auto_end_turn_if_needed(self) -> bool:
        """End the turn when no untapped creature can pay for any attack."""
        state = self._state
        active = current_player(state)
        for card in active.field:
            if card.id in state.attacked_this_turn:
                continue
            if any(a.energy_cost <= active.energy for a in card.attacks):
                return False
        self._emit({"type": "TURN_AUTO_ENDED", "player": active.id})
        self._advance_turn()
        return True

    # ------------------------------------------------------------------
    # Action handlers. Each returns an error code, or None on success.
    # ------------------------------------------------------------------

    def _play_card(self, action: GameAction) -> str | None:
        assert action.card_id is not None
        idx = self._state.current_player_index
        before = self._state.players[idx]
        after = pl.play_card(before, action.card_id, self.config.field_limit)
        if after is before:
            return "no_change"
        self._state = self._state.with_player(idx, after)
        self._emit({"type": "CARD_PLAYED", "player": before.id, "card_id": action.card_id})
        return None

    def _retire_card(self, action: GameAction) -> str | None:
        assert action.card_id is not None
        idx = self._state.current_player_index
        before = self._state.players[idx]
        after = pl.retire_card(before, action.card_id, self.config.retire_cost)
        if after is before:
            return "no_change"
        self._state = self._state.with_player(idx, after)
        self._emit({"type": "CARD_RETIRED", "player": before.id, "card_id": action.card_id})
        return None

    def _cast_spell(self, action: GameAction) -> str | None:
        assert action.card_id is not None
        state = self._state
        a_idx = state.current_player_index
        d_idx = state.opponent_index
        caster = state.players[a_idx]
        defender = state.players[d_idx]
        spell = caster.find_in_hand(action.card_id)
        assert isinstance(spell, SpellCard)

        if spell.effect == EFFECT_ENERGY_CATALYST and caster.has_energy_booster:
            return "effect_already_active"

        target = None
        if spell.effect == EFFECT_DIRECT_DAMAGE:
            if action.target_card_id is None:
                return "target_required"
            target = defender.find_on_field(action.target_card_id)
        elif spell.effect == EFFECT_HEAL:
            if action.target_card_id is None:
                return "target_required"
            target = caster.find_on_field(action.target_card_id)
        if spell.needs_target and target is None:
            return "unknown_target"

        new_caster = pl.cast_spell(caster, spell.id)
        if new_caster is caster:
            return "no_change"
        new_defender = defender
        events: list[Event] = [
            {
                "type": "SPELL_CAST",
                "player": caster.id,
                "card_id": spell.id,
                "effect": spell.effect,
                "target": action.target_card_id,
            }
        ]

        if spell.effect == EFFECT_DIRECT_DAMAGE and target is not None:
            damaged = take_damage(target, max(0, spell.damage or 0))
            new_defender = pl.update_field_card(defender, target.id, damaged)
            events.append(
                {
                    "type": "DAMAGE_CREATURE",
                    "player": defender.id,
                    "card_id": target.id,
                    "amount": target.hp - damaged.hp,
                }
            )
            if not is_alive(damaged):
                new_caster = pl.add_points(new_caster, 1)
                events.append({"type": "CREATURE_DIED", "player": defender.id, "card_id": target.id})
                events.append({"type": "POINTS_SCORED", "player": caster.id, "points": new_caster.points})
            new_defender = pl.remove_dead_cards(new_defender)
        elif spell.effect == EFFECT_HEAL and target is not None:
            healed = heal(target, max(0, spell.healing or 0))
            new_caster = pl.update_field_card(new_caster, target.id, healed)
            events.append(
                {
                    "type": "HEAL_CREATURE",
                    "player": caster.id,
                    "card_id": target.id,
                    "amount": healed.hp - target.hp,
                }
            )
        elif spell.effect == EFFECT_ENERGY_CATALYST:
            events.append({"type": "ENERGY_BOOSTER_ACTIVATED", "player": caster.id})

        self._state = check_win_conditions(
            self._state.with_player(a_idx, new_caster).with_player(d_idx, new_defender),
            self._decks,
        )
        self.event_log.extend(events)
        return None

    def _attack(self, action: GameAction) -> str | None:
        if action.card_id is None or action.attack_name is None:
            return "illegal_action"
        state = self._state
        turn = state.turn_number
        a_idx = state.current_player_index
        d_idx = state.opponent_index
        attacker_player = state.players[a_idx]
        defender_player = state.players[d_idx]

        card = attacker_player.find_on_field(action.card_id)
        if card is None:
            return "unknown_attacker"
        if card.id in state.attacked_this_turn:
            return "already_attacked"
        if not can_attack(card, turn, a_idx == 0, self.config.mythic_cooldown):
            return "cannot_attack"
        attack = card.find_attack(action.attack_name)
        if attack is None:
            return "unknown_attack"
        if attacker_player.energy < attack.energy_cost:
            return "insufficient_energy"

        target = None
        if action.target_card_id is not None:
            target = defender_player.find_on_field(action.target_card_id)
            if target is None:
                return "unknown_target"
        elif defender_player.field:
            # Direct attacks only land on an empty field.
            return "target_required"

        # Validation done; nothing below may fail.
        new_attacker = replace(attacker_player, energy=attacker_player.energy - attack.energy_cost)
        new_attacker = pl.update_field_card(new_attacker, card.id, replace(card, last_attack_turn=turn))
        new_defender = defender_player
        events: list[Event] = []

        if target is None:
            new_attacker = pl.add_points(new_attacker, 1)
            events.append(
                {
                    "type": "ATTACK_DIRECT",
                    "player": attacker_player.id,
                    "card_id": card.id,
                    "attack": attack.name,
                }
            )
            events.append({"type": "POINTS_SCORED", "player": attacker_player.id, "points": new_attacker.points})
        else:
            damage = max(0, calculate_final_damage(attack.damage, card.element, target.element))
            damaged = take_damage(target, damage)
            new_defender = pl.update_field_card(defender_player, target.id, damaged)
            events.append(
                {
                    "type": "ATTACK_CREATURE",
                    "player": attacker_player.id,
                    "card_id": card.id,
                    "attack": attack.name,
                    "target": target.id,
                    "damage": damage,
                }
            )
            if not is_alive(damaged):
                new_attacker = pl.add_points(new_attacker, 1)
                events.append({"type": "CREATURE_DIED", "player": defender_player.id, "card_id": target.id})
                events.append(
                    {"type": "POINTS_SCORED", "player": attacker_player.id, "points": new_attacker.points}
                )

        new_attacker = pl.remove_dead_cards(new_attacker)
        new_defender = pl.remove_dead_cards(new_defender)
        new_state = state.with_player(a_idx, new_attacker).with_player(d_idx, new_defender)
        new_state = replace(new_state, attacked_this_turn=state.attacked_this_turn | {card.id})
        self._state = check_win_conditions(new_state, self._decks)
        self.event_log.extend(events)

        if not self._state.is_game_over:
            self._auto_end_turn_if_needed()
        return None

    def _end_turn(self) -> str | None:
        self._advance_turn()
        if not self._state.is_game_over:
            self._state = check_win_conditions(self._state, self._decks)
        return None


def replay(
    player1: pl.PlayerState,
    player2: pl.PlayerState,
    deck1: Sequence[Card],
    deck2: Sequence[Card],
    seed: int,
    actions: Iterable[GameAction],
    config: RulesConfig | None = None,
) -> GameEngine:
    engine = GameEngine(player1, player2, deck1, deck2, seed=seed, config=config)
    for a in actions:
        engine.step(a)
        if engine.is_game_over():
            break
    return engine
