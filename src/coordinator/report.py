# src/coordinator/report.py

from typing import List

from src.common.frequency import FrequencyTable
from src.common.rules import Category

WIDTH = 80
LABEL_WIDTH = 15


def render_report(
    table: FrequencyTable,
    total_hands: int,
    elapsed: float,
    worker_count: int,
    serial: bool = False,
) -> str:
    title = "Serial Version" if serial else "Parallel Version"
    # Parallel runs count the coordinator as a process too.
    processes = 1 if serial else worker_count + 1
    lines: List[str] = [
        f"            Poker Hand Frequency Simulation [{title}]",
        "=" * WIDTH,
        "        Hand Type                Frequency       Relative Frequency (%)",
        "-" * WIDTH,
    ]

    # Rows sorted on the right-aligned label, so shorter labels come first.
    for category in sorted(Category, key=lambda c: c.label.rjust(LABEL_WIDTH)):
        label = category.label.rjust(LABEL_WIDTH)
        lines.append(f"  {label}{table[category]:>25}{'':20}{table.relative(category):>10.6f}")

    lines += [
        "-" * WIDTH,
        f"  Hands Generated: {total_hands}",
        f" Elapsed Time (s): {elapsed:.3f}",
        f"   # of Processes: {processes}",
    ]
    return "\n".join(lines)
