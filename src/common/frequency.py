# src/common/frequency.py

from typing import Dict, List, Sequence

from .constants import NUM_CATEGORIES
from .rules import Category


class FrequencyTable:
    """Per-category hand counts, all ten categories always present."""

    def __init__(self) -> None:
        self._counts: Dict[Category, int] = {c: 0 for c in Category}

    @classmethod
    def from_counts(cls, counts: Sequence[int]) -> "FrequencyTable":
        table = cls()
        table.merge(counts)
        return table

    def __getitem__(self, category: Category) -> int:
        return self._counts[category]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrequencyTable):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        inner = ", ".join(f"{c.name}={n}" for c, n in self._counts.items())
        return f"FrequencyTable({inner})"

    def increment(self, category: Category) -> int:
        """Count one hand; returns the new count for that category."""
        self._counts[category] += 1
        return self._counts[category]

    def merge(self, counts: Sequence[int]) -> None:
        """Add ten counts given in wire (Category value) order."""
        if len(counts) != NUM_CATEGORIES:
            raise ValueError(f"Expected {NUM_CATEGORIES} counts, got {len(counts)}")
        for category in Category:
            n = counts[category.value]
            if n < 0:
                raise ValueError(f"Negative count for {category.name}: {n}")
            self._counts[category] += n

    def counts(self) -> List[int]:
        return [self._counts[c] for c in Category]

    def total(self) -> int:
        return sum(self._counts.values())

    def relative(self, category: Category) -> float:
        """Relative frequency in percent (0.0 when nothing was counted)."""
        total = self.total()
        if total == 0:
            return 0.0
        return 100.0 * self._counts[category] / total
