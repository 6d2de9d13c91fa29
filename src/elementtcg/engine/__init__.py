"""Deterministic, headless rules engine for ElementTCG.

IMPORTANT: This package holds no rendering, persistence or display text.
"""

from .actions import ActionType, GameAction
from .ai import AIDecision, AISpec, ai_take_turn, make_decision
from .match import GameEngine, StepResult, replay
from .player import PlayerState, create_player
from .state import GameState, RulesConfig
from .types import Attack, Card, Element, MonsterCard, Rarity, SpellCard

__all__ = [
    "AIDecision",
    "AISpec",
    "ActionType",
    "Attack",
    "Card",
    "Element",
    "GameAction",
    "GameEngine",
    "GameState",
    "MonsterCard",
    "PlayerState",
    "Rarity",
    "RulesConfig",
    "SpellCard",
    "StepResult",
    "ai_take_turn",
    "create_player",
    "make_decision",
    "replay",
]
