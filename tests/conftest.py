import queue

import pytest

from src.common.cards import parse_hand
from src.common.mailbox import Mailbox

# One literal hand per category, in Category value order.
ALL_CATEGORY_HANDS = [
    "2S,2H,2D,5C,5S",   # full house
    "3S,3H,7D,7C,KS",   # two pair
    "2S,2H,2D,2C,5S",   # four of a kind
    "3S,3H,3D,7C,KS",   # three of a kind
    "3S,3H,7D,9C,KS",   # one pair
    "AS,KS,QS,JS,10S",  # royal flush
    "2S,3S,4S,5S,6S",   # straight flush
    "9S,10H,JD,QC,KS",  # straight
    "2H,4H,6H,8H,10H",  # flush
    "2S,5H,8D,JC,KS",   # no pair
]


class ScriptedDeck:
    """Deck stand-in: every shuffle moves to the next scripted hand, cycling."""

    def __init__(self, hands):
        self.hands = [parse_hand(h) if isinstance(h, str) else list(h) for h in hands]
        self._i = -1

    def shuffle(self):
        self._i = (self._i + 1) % len(self.hands)

    def draw_hand(self):
        return list(self.hands[self._i])


@pytest.fixture
def scripted_deck():
    return ScriptedDeck


@pytest.fixture
def all_category_hands():
    return list(ALL_CATEGORY_HANDS)


@pytest.fixture
def make_mailbox():
    def _make(name="test"):
        return Mailbox(name, queue.Queue(), "THREAD")
    return _make
