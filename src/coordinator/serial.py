# src/coordinator/serial.py

import time
from typing import Optional

from src.common.cards import Deck, make_deck
from src.common.frequency import FrequencyTable
from src.common.logging_utils import get_logger
from src.common.rules import Category, classify
from src.coordinator.launcher import SimulationResult

log = get_logger("coordinator.serial")


def run_serial(deck: Optional[Deck] = None, seed: Optional[int] = None) -> SimulationResult:
    """Single-task run: draw until every category was seen once, no messaging."""
    deck = deck or make_deck(0, seed)
    table = FrequencyTable()
    found = 0

    start = time.perf_counter()
    while found < len(Category):
        deck.shuffle()
        category = classify(deck.draw_hand())
        if table.increment(category) == 1:
            found += 1
            log.info(f"{category.label} found at hand {table.total()} ({found}/{len(Category)})")
    elapsed = time.perf_counter() - start

    return SimulationResult(table, elapsed, 1, "serial")
