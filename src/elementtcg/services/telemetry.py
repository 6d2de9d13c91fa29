from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from elementtcg.engine.match import GameEngine


@dataclass
class TelemetryService:
    """Append-only JSONL sink, one record per line."""

    path: Path
    enabled: bool = True

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        if not self.enabled:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def log_match(self, match_id: str, engine: "GameEngine") -> None:
        state = engine.get_game_state()
        self.log(
            "match_finished",
            {
                "match_id": match_id,
                "seed": engine.seed,
                "winner": state.winner,
                "reason": state.win_reason,
                "turns": state.turn_number,
                "points": {p.id: p.points for p in state.players},
                "actions": len(engine.action_log),
            },
        )

    def read(self) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        out: list[dict[str, object]] = []
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    out.append(json.loads(line))
        return out
