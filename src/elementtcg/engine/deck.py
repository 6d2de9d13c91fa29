from __future__ import annotations

import random
from typing import Iterable

from .types import Card


class Deck:
    """Ordered draw pile. The top of the deck is the end of the list."""

    def __init__(self, cards: Iterable[Card], rng: random.Random | None = None) -> None:
        self._cards: list[Card] = list(cards)
        self._rng = rng or random.Random()

    def shuffle(self) -> None:
        self._rng.shuffle(self._cards)

    def draw(self) -> Card | None:
        if not self._cards:
            return None
        return self._cards.pop()

    def draw_multiple(self, count: int) -> list[Card]:
        drawn: list[Card] = []
        for _ in range(max(0, count)):
            card = self.draw()
            if card is None:
                break
            drawn.append(card)
        return drawn

    def peek(self) -> Card | None:
        if not self._cards:
            return None
        return self._cards[-1]

    def size(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def is_empty(self) -> bool:
        return not self._cards

    def add_card(self, card: Card) -> None:
        self._cards.append(card)

    def remove_card(self, card_id: str) -> Card | None:
        for i, card in enumerate(self._cards):
            if card.id == card_id:
                return self._cards.pop(i)
        return None

    def cards(self) -> list[Card]:
        return list(self._cards)

    def reset(self, cards: Iterable[Card]) -> None:
        self._cards = list(cards)
        self.shuffle()
