from collections import Counter
from itertools import combinations

import pytest

from src.common import rules
from src.common.cards import parse_hand
from src.common.constants import DECK_SIZE, HAND_SIZE
from src.common.rules import Category, ClassificationError, analyze_hand, classify, matching_categories


@pytest.mark.parametrize("hand,expected", [
    ("AS,KS,QS,JS,10S", Category.ROYAL_FLUSH),
    ("2S,3S,4S,5S,6S", Category.STRAIGHT_FLUSH),
    ("AS,2S,3S,4S,5S", Category.STRAIGHT_FLUSH),
    ("2S,2H,2D,2C,5S", Category.FOUR_OF_A_KIND),
    ("2S,2H,2D,5C,5S", Category.FULL_HOUSE),
    ("2S,2H,5D,5C,5S", Category.FULL_HOUSE),
    ("2H,4H,6H,8H,10H", Category.FLUSH),
    ("9S,10H,JD,QC,KS", Category.STRAIGHT),
    ("AS,KH,QS,JS,10S", Category.STRAIGHT),
    ("AH,2S,3S,4S,5S", Category.STRAIGHT),
    ("3S,3H,3D,7C,KS", Category.THREE_OF_A_KIND),
    ("3S,3H,7D,7C,KS", Category.TWO_PAIR),
    ("KS,KH,AD,AC,2S", Category.TWO_PAIR),
    ("3S,3H,7D,9C,KS", Category.ONE_PAIR),
    ("2S,5H,8D,JC,KS", Category.NO_PAIR),
    ("JS,QH,KD,AC,2S", Category.NO_PAIR),
])
def test_literal_hands(hand, expected):
    assert classify(parse_hand(hand)) == expected


def test_card_order_does_not_matter():
    hand = parse_hand("10S,JS,AS,QS,KS")
    assert classify(hand) == Category.ROYAL_FLUSH
    assert classify(list(reversed(hand))) == Category.ROYAL_FLUSH


def test_flush_skips_group_scan():
    shape = analyze_hand(parse_hand("2H,4H,6H,8H,10H"))
    assert shape.flush
    assert not shape.grouped


def test_full_house_flags_by_run_order():
    pair_first = analyze_hand(parse_hand("2S,2H,5D,5C,5S"))
    assert pair_first.pair and pair_first.full_house and not pair_first.triple
    triple_first = analyze_hand(parse_hand("2S,2H,2D,5C,5S"))
    assert triple_first.triple and triple_first.full_house and not triple_first.pair


def test_groups_skip_straight_test():
    shape = analyze_hand(parse_hand("AS,AH,10D,JC,QS"))
    assert shape.pair
    assert not shape.straight and not shape.royal


def test_ace_high_marks_royal():
    shape = analyze_hand(parse_hand("AS,KH,QS,JS,10S"))
    assert shape.straight and shape.royal and not shape.flush


@pytest.mark.parametrize("hand", [
    [0, 1, 2, 3],
    [0, 1, 2, 3, 4, 5],
    [0, 0, 1, 2, 3],
    [0, 1, 2, 3, DECK_SIZE],
    [-1, 1, 2, 3, 4],
])
def test_invalid_hands_rejected(hand):
    with pytest.raises(ClassificationError):
        classify(hand)


def test_no_matching_rule_is_fatal(monkeypatch):
    monkeypatch.setattr(rules, "CATEGORY_RULES", [])
    with pytest.raises(ClassificationError):
        classify(parse_hand("2S,5H,8D,JC,KS"))


def test_two_matching_rules_is_fatal(monkeypatch):
    extra = [(lambda s: True, Category.NO_PAIR)]
    monkeypatch.setattr(rules, "CATEGORY_RULES", rules.CATEGORY_RULES + extra)
    with pytest.raises(ClassificationError):
        classify(parse_hand("3S,3H,7D,9C,KS"))


def test_rule_table_covers_every_category_once():
    assert sorted(c for _, c in rules.CATEGORY_RULES) == sorted(Category)


def test_every_hand_has_exactly_one_category():
    counts = Counter()
    for hand in combinations(range(DECK_SIZE), HAND_SIZE):
        matches = matching_categories(hand)
        assert len(matches) == 1, hand
        counts[matches[0]] += 1

    assert counts == {
        Category.ROYAL_FLUSH: 4,
        Category.STRAIGHT_FLUSH: 36,
        Category.FOUR_OF_A_KIND: 624,
        Category.FULL_HOUSE: 3744,
        Category.FLUSH: 5108,
        Category.STRAIGHT: 10200,
        Category.THREE_OF_A_KIND: 54912,
        Category.TWO_PAIR: 123552,
        Category.ONE_PAIR: 1098240,
        Category.NO_PAIR: 1302540,
    }
