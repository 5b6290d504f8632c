# src/common/cards.py

import random
from typing import List, Optional, Protocol, Sequence

from .constants import (
    DECK_SIZE, HAND_SIZE, RANKS_PER_SUIT,
    SUIT_LETTERS, SUIT_TO_CODE, RANK_NAMES, RANK_TO_CODE,
)

# A card is a plain int in [0, 52): rank = card % 13 (0=Ace..12=King), suit = card // 13.
Card = int
Hand = List[Card]


def rank_of(card: Card) -> int:
    return card % RANKS_PER_SUIT


def suit_of(card: Card) -> int:
    return card // RANKS_PER_SUIT


def make_card(rank: int, suit: int) -> Card:
    return suit * RANKS_PER_SUIT + rank


def card_to_string(card: Card) -> str:
    return f"{RANK_NAMES[rank_of(card)]}{SUIT_LETTERS[suit_of(card)]}"


def hand_to_string(hand: Sequence[Card]) -> str:
    return ",".join(card_to_string(c) for c in hand)


def parse_card(text: str) -> Card:
    """'AS' -> 0, '10H' -> 22, 'KC' -> 51. Raises ValueError on bad input."""
    text = text.strip().upper()
    rank_txt, suit_txt = text[:-1], text[-1:]
    if rank_txt not in RANK_TO_CODE or suit_txt not in SUIT_TO_CODE:
        raise ValueError(f"Invalid card: {text!r}")
    return make_card(RANK_TO_CODE[rank_txt], SUIT_TO_CODE[suit_txt])


def parse_hand(text: str) -> Hand:
    return [parse_card(t) for t in text.split(",")]


class DrawSource(Protocol):
    def next(self, upper_bound: int) -> int:
        """Uniform int in [0, upper_bound)."""
        ...


class RandomDrawSource:
    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def next(self, upper_bound: int) -> int:
        return self._rng.randrange(upper_bound)


def worker_seed(base_seed: Optional[int], worker_id: int) -> Optional[int]:
    # None keeps OS entropy; otherwise every worker gets its own stream.
    if base_seed is None:
        return None
    return base_seed * 1_000_003 + worker_id


class Deck:
    def __init__(self, source: DrawSource) -> None:
        self._source = source
        self.cards: List[Card] = list(range(DECK_SIZE))

    def shuffle(self) -> None:
        # Fisher-Yates, from the last index down to 0.
        cards = self.cards
        for i in range(len(cards) - 1, -1, -1):
            j = self._source.next(i + 1)
            cards[i], cards[j] = cards[j], cards[i]

    def draw_hand(self) -> Hand:
        return self.cards[:HAND_SIZE]


def make_deck(worker_id: int, base_seed: Optional[int] = None) -> Deck:
    return Deck(RandomDrawSource(worker_seed(base_seed, worker_id)))
