import pytest

from src.common.frequency import FrequencyTable
from src.common.rules import Category


def test_starts_at_zero_for_all_categories():
    t = FrequencyTable()
    assert t.counts() == [0] * len(Category)
    assert t.total() == 0
    assert t.relative(Category.FLUSH) == 0.0


def test_increment_returns_new_count():
    t = FrequencyTable()
    assert t.increment(Category.FLUSH) == 1
    assert t.increment(Category.FLUSH) == 2
    assert t[Category.FLUSH] == 2


def test_merge_adds_in_wire_order():
    t = FrequencyTable()
    t.merge(list(range(10)))
    t.merge([1] * 10)
    assert t[Category.FULL_HOUSE] == 1
    assert t[Category.NO_PAIR] == 10
    assert t.total() == sum(range(10)) + 10


def test_merge_rejects_bad_counts():
    t = FrequencyTable()
    with pytest.raises(ValueError):
        t.merge([0] * 9)
    with pytest.raises(ValueError):
        t.merge([-1] + [0] * 9)


def test_from_counts_and_equality():
    counts = [3, 0, 0, 0, 1, 0, 0, 0, 0, 4]
    t = FrequencyTable.from_counts(counts)
    assert t.counts() == counts
    assert t == FrequencyTable.from_counts(counts)
    assert t.relative(Category.NO_PAIR) == pytest.approx(50.0)
