# src/common/rules.py

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, List, Sequence, Tuple

from .cards import Card, rank_of, suit_of, hand_to_string
from .constants import DECK_SIZE, HAND_SIZE, RANK_ACE, RANK_TEN


class ClassificationError(RuntimeError):
    """A hand matched zero or several categories, or was not a valid hand."""
    pass


class Category(IntEnum):
    # Values are the wire codes and the order counts travel in a tally.
    FULL_HOUSE = 0
    TWO_PAIR = 1
    FOUR_OF_A_KIND = 2
    THREE_OF_A_KIND = 3
    ONE_PAIR = 4
    ROYAL_FLUSH = 5
    STRAIGHT_FLUSH = 6
    STRAIGHT = 7
    FLUSH = 8
    NO_PAIR = 9

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Category.FULL_HOUSE: "Full House",
    Category.TWO_PAIR: "Two Pair",
    Category.FOUR_OF_A_KIND: "Four of a Kind",
    Category.THREE_OF_A_KIND: "Three of a Kind",
    Category.ONE_PAIR: "One Pair",
    Category.ROYAL_FLUSH: "Royal Flush",
    Category.STRAIGHT_FLUSH: "Straight Flush",
    Category.STRAIGHT: "Straight",
    Category.FLUSH: "Flush",
    Category.NO_PAIR: "No Pair",
}


@dataclass(frozen=True)
class HandShape:
    flush: bool = False
    pair: bool = False
    two_pair: bool = False
    triple: bool = False
    full_house: bool = False
    quadruple: bool = False
    straight: bool = False
    royal: bool = False

    @property
    def grouped(self) -> bool:
        return self.pair or self.two_pair or self.triple or self.full_house or self.quadruple


def _validate(hand: Sequence[Card]) -> None:
    if len(hand) != HAND_SIZE:
        raise ClassificationError(f"Hand must have {HAND_SIZE} cards, got {len(hand)}")
    if len(set(hand)) != HAND_SIZE:
        raise ClassificationError(f"Hand has duplicate cards: {list(hand)}")
    if any(not 0 <= c < DECK_SIZE for c in hand):
        raise ClassificationError(f"Hand has out-of-range cards: {list(hand)}")


def analyze_hand(hand: Sequence[Card]) -> HandShape:
    """
    Flush test, then (for non-flushes) the run scan over rank-sorted cards,
    then the straight test when no group was found.
    """
    _validate(hand)
    cards = sorted(hand, key=rank_of)
    ranks = [rank_of(c) for c in cards]

    flush = all(suit_of(c) == suit_of(cards[0]) for c in cards)

    pair = two_pair = triple = full_house = quadruple = False
    if not flush:
        i = 0
        while i < HAND_SIZE:
            j = i + 1
            while j < HAND_SIZE and ranks[j] == ranks[i]:
                j += 1
            run = j - i
            if run == 2:
                if pair:
                    two_pair = True
                elif triple:
                    full_house = True
                else:
                    pair = True
            elif run == 3:
                if pair:
                    full_house = True
                else:
                    triple = True
            elif run == 4:
                quadruple = True
            i = j

    straight = royal = False
    if not (pair or two_pair or triple or full_house or quadruple):
        straight = all(ranks[k + 1] - ranks[k] == 1 for k in range(HAND_SIZE - 1))
        # No groups and sorted A,10,... leaves only A,10,J,Q,K.
        if ranks[0] == RANK_ACE and ranks[1] == RANK_TEN:
            straight = royal = True

    return HandShape(
        flush=flush,
        pair=pair,
        two_pair=two_pair,
        triple=triple,
        full_house=full_house,
        quadruple=quadruple,
        straight=straight,
        royal=royal,
    )


# Priority order, most valuable grouping first. Predicates are mutually exclusive.
CATEGORY_RULES: List[Tuple[Callable[[HandShape], bool], Category]] = [
    (lambda s: s.full_house, Category.FULL_HOUSE),
    (lambda s: s.two_pair, Category.TWO_PAIR),
    (lambda s: s.triple and not s.full_house, Category.THREE_OF_A_KIND),
    (lambda s: s.pair and not (s.two_pair or s.full_house), Category.ONE_PAIR),
    (lambda s: s.quadruple, Category.FOUR_OF_A_KIND),
    (lambda s: not s.grouped and s.flush and s.royal, Category.ROYAL_FLUSH),
    (lambda s: not s.grouped and s.flush and s.straight and not s.royal, Category.STRAIGHT_FLUSH),
    (lambda s: not s.grouped and s.straight and not s.flush, Category.STRAIGHT),
    (lambda s: not s.grouped and s.flush and not s.straight, Category.FLUSH),
    (lambda s: not s.grouped and not s.flush and not s.straight, Category.NO_PAIR),
]


def matching_categories(hand: Sequence[Card]) -> List[Category]:
    shape = analyze_hand(hand)
    return [category for predicate, category in CATEGORY_RULES if predicate(shape)]


def classify(hand: Sequence[Card]) -> Category:
    matches = matching_categories(hand)
    if len(matches) != 1:
        raise ClassificationError(
            f"Hand {hand_to_string(hand)} matched {len(matches)} categories: {[m.name for m in matches]}"
        )
    return matches[0]
