from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from . import player as pl
from .actions import GameAction
from .affinity import calculate_final_damage, has_advantage
from .cards import can_attack
from .state import GameState
from .turns import current_player, opponent
from .types import EFFECT_DIRECT_DAMAGE, EFFECT_ENERGY_CATALYST, EFFECT_HEAL, MonsterCard, SpellCard

if TYPE_CHECKING:
    from .match import GameEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AISpec:
    """Heuristic weights for the scripted opponent.

    Scores are additive. A candidate whose best score is below
    `end_turn_threshold` loses to ending the turn.
    """

    end_turn_threshold: int = 40
    end_turn_score: int = 30

    attack_base: int = 100
    damage_weight: int = 3
    lethal_bonus: int = 50
    advantage_bonus: int = 25
    weak_target_hp: int = 20
    weak_target_bonus: int = 30
    direct_attack_bonus: int = 80
    closing_points: int = 3
    closing_bonus: int = 100

    play_base: int = 50
    play_hp_weight: int = 2
    mythic_bonus: int = 30
    thin_field_size: int = 2
    thin_field_bonus: int = 20

    retire_base: int = 10
    retire_low_hp: int = 10
    retire_low_hp_bonus: int = 30
    crowded_field_size: int = 3
    crowded_field_bonus: int = 20

    spell_base: int = 40
    catalyst_bonus: int = 120
    catalyst_early_turns: int = 6
    catalyst_early_bonus: int = 30
    permanent_bonus: int = 30
    instant_bonus: int = 20
    cheap_spell_cost: int = 2
    cheap_spell_bonus: int = 10
    expensive_spell_cost: int = 5
    expensive_spell_penalty: int = 10
    spell_damage_weight: int = 2


@dataclass(frozen=True)
class AIDecision:
    action: GameAction
    score: int
    reasoning: str


@dataclass(frozen=True)
class _Candidate:
    action: GameAction
    reasoning: str


def make_decision(state: GameState, spec: AISpec | None = None) -> AIDecision:
    """Pick the best action for the current player.

    Pure read of `state`. Ties go to the candidate generated first, so the
    same state always yields the same decision.
    """
    spec = spec or AISpec()
    me = current_player(state)
    candidates = enumerate_candidates(state, spec)
    if not candidates:
        return AIDecision(action=GameAction.end_turn(me.id), score=0, reasoning="no_valid_actions")

    best: tuple[tuple[int, int], AIDecision] | None = None
    for cand in candidates:
        score = score_action(cand.action, state, spec)
        # A lethal attack on a creature outranks any non-attack alternative.
        rank = (1 if is_lethal_attack(cand.action, state) else 0, score)
        if best is None or rank > best[0]:
            best = (rank, AIDecision(action=cand.action, score=score, reasoning=cand.reasoning))

    assert best is not None
    decision = best[1]
    if decision.score < spec.end_turn_threshold:
        return AIDecision(action=GameAction.end_turn(me.id), score=spec.end_turn_score, reasoning="end_turn")
    return decision


def enumerate_candidates(state: GameState, spec: AISpec) -> list[_Candidate]:
    out: list[_Candidate] = []
    out.extend(_play_candidates(state))
    out.extend(_spell_candidates(state))
    out.extend(_attack_candidates(state))
    out.extend(_retire_candidates(state, spec))
    return out


def _play_candidates(state: GameState) -> list[_Candidate]:
    me = current_player(state)
    out: list[_Candidate] = []
    for card in me.hand:
        if isinstance(card, MonsterCard) and pl.can_play_card(me, card, state.config.field_limit):
            out.append(_Candidate(GameAction.play_card(me.id, card.id), "play_monster"))
    return out


def _spell_candidates(state: GameState) -> list[_Candidate]:
    me = current_player(state)
    enemy = opponent(state)
    out: list[_Candidate] = []
    for card in me.hand:
        if not isinstance(card, SpellCard) or not pl.can_cast_spell(me, card):
            continue
        if card.effect == EFFECT_ENERGY_CATALYST and me.has_energy_booster:
            continue
        if card.effect == EFFECT_DIRECT_DAMAGE:
            for target in enemy.field:
                out.append(_Candidate(GameAction.cast_spell(me.id, card.id, target.id), "damage_spell"))
        elif card.effect == EFFECT_HEAL:
            for target in me.field:
                if target.max_hp is not None and target.hp < target.max_hp:
                    out.append(_Candidate(GameAction.cast_spell(me.id, card.id, target.id), "heal_spell"))
        else:
            out.append(_Candidate(GameAction.cast_spell(me.id, card.id), "cast_spell"))
    return out


def _attack_candidates(state: GameState) -> list[_Candidate]:
    if state.phase not in ("main", "combat"):
        return []
    me = current_player(state)
    enemy = opponent(state)
    is_first = state.current_player_index == 0
    out: list[_Candidate] = []
    for attacker in me.field:
        if attacker.id in state.attacked_this_turn:
            continue
        if not can_attack(attacker, state.turn_number, is_first, state.config.mythic_cooldown):
            continue
        for attack in attacker.attacks:
            if me.energy < attack.energy_cost:
                continue
            if not enemy.field:
                out.append(
                    _Candidate(GameAction.attack(me.id, attacker.id, attack.name), "direct_attack")
                )
                continue
            for target in enemy.field:
                out.append(
                    _Candidate(
                        GameAction.attack(me.id, attacker.id, attack.name, target.id),
                        "attack_creature",
                    )
                )
    return out


def _is_low_value(card: MonsterCard, me: pl.PlayerState, spec: AISpec) -> bool:
    return card.hp <= spec.retire_low_hp or len(me.field) > spec.crowded_field_size


def _retire_candidates(state: GameState, spec: AISpec) -> list[_Candidate]:
    me = current_player(state)
    out: list[_Candidate] = []
    for card in me.field:
        if pl.can_retire_card(me, card.id, state.config.retire_cost) and _is_low_value(card, me, spec):
            out.append(_Candidate(GameAction.retire_card(me.id, card.id), "retire_low_value"))
    return out


# ----------------------------------------------------------------------
# Scoring
# ----------------------------------------------------------------------


def score_action(action: GameAction, state: GameState, spec: AISpec | None = None) -> int:
    spec = spec or AISpec()
    if action.type == "ATTACK":
        return _score_attack(action, state, spec)
    if action.type == "PLAY_CARD":
        return _score_play(action, state, spec)
    if action.type == "RETIRE_CARD":
        return _score_retire(action, state, spec)
    if action.type == "CAST_SPELL":
        return _score_spell(action, state, spec)
    return 0


def _attack_damage(action: GameAction, state: GameState) -> tuple[int, MonsterCard] | None:
    me = current_player(state)
    attacker = me.find_on_field(action.card_id or "")
    if attacker is None or action.attack_name is None or action.target_card_id is None:
        return None
    attack = attacker.find_attack(action.attack_name)
    target = opponent(state).find_on_field(action.target_card_id)
    if attack is None or target is None:
        return None
    return max(0, calculate_final_damage(attack.damage, attacker.element, target.element)), target


def is_lethal_attack(action: GameAction, state: GameState) -> bool:
    """True for a targeted ATTACK that kills its target."""
    if action.type != "ATTACK" or action.target_card_id is None:
        return False
    resolved = _attack_damage(action, state)
    return resolved is not None and resolved[0] >= resolved[1].hp


def _score_attack(action: GameAction, state: GameState, spec: AISpec) -> int:
    me = current_player(state)
    attacker = me.find_on_field(action.card_id or "")
    if attacker is None or attacker.find_attack(action.attack_name or "") is None:
        return 0

    score = spec.attack_base
    if action.target_card_id is not None:
        resolved = _attack_damage(action, state)
        if resolved is None:
            return 0
        damage, target = resolved
        score += damage * spec.damage_weight
        if damage >= target.hp:
            score += spec.lethal_bonus
        if has_advantage(attacker.element, target.element):
            score += spec.advantage_bonus
        if target.hp <= spec.weak_target_hp:
            score += spec.weak_target_bonus
    else:
        score += spec.direct_attack_bonus

    if me.points >= spec.closing_points:
        score += spec.closing_bonus
    return score


def _score_play(action: GameAction, state: GameState, spec: AISpec) -> int:
    me = current_player(state)
    card = me.find_in_hand(action.card_id or "")
    if not isinstance(card, MonsterCard):
        return 0
    score = spec.play_base
    score += card.hp * spec.play_hp_weight
    score += sum(a.damage for a in card.attacks)
    if card.is_mythic:
        score += spec.mythic_bonus
    if len(me.field) < spec.thin_field_size:
        score += spec.thin_field_bonus
    return score


def _score_retire(action: GameAction, state: GameState, spec: AISpec) -> int:
    me = current_player(state)
    card = me.find_on_field(action.card_id or "")
    if card is None:
        return 0
    score = spec.retire_base
    if card.hp <= spec.retire_low_hp:
        score += spec.retire_low_hp_bonus
    if len(me.field) > spec.crowded_field_size:
        score += spec.crowded_field_bonus
    return score


def _score_spell(action: GameAction, state: GameState, spec: AISpec) -> int:
    me = current_player(state)
    spell = me.find_in_hand(action.card_id or "")
    if not isinstance(spell, SpellCard):
        return 0

    score = spec.spell_base
    if spell.effect == EFFECT_ENERGY_CATALYST and not me.has_energy_booster:
        score += spec.catalyst_bonus
        if state.turn_number <= spec.catalyst_early_turns:
            score += spec.catalyst_early_bonus

    if spell.spell_type == "permanent":
        score += spec.permanent_bonus
    elif spell.spell_type == "instant":
        score += spec.instant_bonus

    if spell.energy_cost <= spec.cheap_spell_cost:
        score += spec.cheap_spell_bonus
    elif spell.energy_cost >= spec.expensive_spell_cost:
        score -= spec.expensive_spell_penalty

    if spell.effect == EFFECT_DIRECT_DAMAGE and action.target_card_id is not None:
        target = opponent(state).find_on_field(action.target_card_id)
        if target is not None:
            damage = spell.damage or 0
            score += damage * spec.spell_damage_weight
            if damage >= target.hp:
                score += spec.lethal_bonus
    elif spell.effect == EFFECT_HEAL and action.target_card_id is not None:
        target = me.find_on_field(action.target_card_id)
        if target is not None and target.max_hp is not None:
            score += min(spell.healing or 0, target.max_hp - target.hp)
    return score


def ai_take_turn(engine: "GameEngine", spec: AISpec | None = None, max_actions: int = 50) -> list[AIDecision]:
    """Play out the current player's turn through the engine.

    A decision the engine rejects is treated as ending the turn.
    """
    spec = spec or AISpec()
    player_id = engine.get_current_player().id
    taken: list[AIDecision] = []
    while not engine.is_game_over() and engine.get_current_player().id == player_id:
        if len(taken) >= max_actions:
            engine.execute_action(GameAction.end_turn(player_id))
            break
        decision = make_decision(engine.get_game_state(), spec)
        taken.append(decision)
        if engine.execute_action(decision.action):
            continue
        logger.debug("AI action %s rejected, ending turn", decision.action.type)
        engine.execute_action(GameAction.end_turn(player_id))
        break
    return taken
