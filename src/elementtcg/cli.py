from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from elementtcg.engine.ai import AISpec, ai_take_turn
from elementtcg.engine.match import GameEngine
from elementtcg.engine.player import create_player
from elementtcg.paths import get_paths
from elementtcg.services.content import ContentError, ContentService, build_deck
from elementtcg.services.telemetry import TelemetryService

logger = logging.getLogger("elementtcg")


def _configure_logging(verbose: bool) -> None:
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def run_match(
    content: ContentService,
    deck_a: str,
    deck_b: str,
    seed: int,
    max_turns: int = 200,
) -> GameEngine:
    catalog = content.load_cards_db()
    decks = content.load_decks(catalog)
    if deck_a not in decks or deck_b not in decks:
        raise ContentError(f"Unknown deck id: {deck_a if deck_a not in decks else deck_b}")

    engine = GameEngine(
        create_player("p1", "p1", is_ai=True),
        create_player("p2", "p2", is_ai=True),
        build_deck(catalog, decks[deck_a].card_ids(), prefix="a_"),
        build_deck(catalog, decks[deck_b].card_ids(), prefix="b_"),
        seed=seed,
    )
    spec = AISpec()
    while not engine.is_game_over() and engine.get_game_state().turn_number <= max_turns:
        ai_take_turn(engine, spec)
    return engine


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="elementtcg-sim", description="Run AI-vs-AI matches.")
    parser.add_argument("--games", type=int, default=1)
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--deck-a", default="tutorial_player")
    parser.add_argument("--deck-b", default="tutorial_ai")
    parser.add_argument("--telemetry", type=Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    telemetry = TelemetryService(args.telemetry or paths.userdata_dir / "telemetry.jsonl")

    wins: dict[str, int] = {}
    for i in range(args.games):
        seed = args.seed + i
        try:
            engine = run_match(content, args.deck_a, args.deck_b, seed)
        except ContentError as e:
            logger.error("%s", e)
            return 2
        state = engine.get_game_state()
        winner = state.winner or "none"
        wins[winner] = wins.get(winner, 0) + 1
        print(f"game={i} seed={seed} winner={winner} reason={state.win_reason} turns={state.turn_number}")
        telemetry.log_match(f"sim-{seed}", engine)

    print(" ".join(f"{k}={v}" for k, v in sorted(wins.items())))
    return 0


if __name__ == "__main__":
    sys.exit(main())
