# src/coordinator/coordinator.py

import time
from typing import Callable, Dict, List, Optional, Set, Tuple

from src.common.frequency import FrequencyTable
from src.common.logging_utils import get_logger
from src.common.mailbox import Mailbox
from src.common.protocol import Discovery, Tally, Terminate, ProtocolError
from src.common.rules import Category

log = get_logger("coordinator")


class CoordinatorTimeout(TimeoutError):
    pass


def _reject(msg: str) -> None:
    log.warning(f"ProtocolError: {msg}")
    raise ProtocolError(msg)


class Coordinator:
    """
    Passive aggregator driven by two inbound streams (discovery notices and
    final tallies). Single-threaded: all state below is touched only from
    poll_once().
    """

    def __init__(
        self,
        discoveries: Mailbox,
        tallies: Mailbox,
        worker_inboxes: Dict[int, Mailbox],
        poll_interval: float = 0.001,
        timeout: Optional[float] = None,
        health_check: Optional[Callable[[], None]] = None,
    ) -> None:
        self.discoveries = discoveries
        self.tallies = tallies
        self.worker_inboxes = worker_inboxes
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.health_check = health_check

        self.discovered: Set[Category] = set()
        self.totals = FrequencyTable()
        self.active_workers = len(worker_inboxes)
        self.terminated = False
        self.broadcasts = 0
        self.discovery_history: List[int] = []
        self.worker_counts: Dict[int, Tuple[int, ...]] = {}
        self.elapsed = 0.0

    @property
    def all_found(self) -> bool:
        return len(self.discovered) == len(Category)

    @property
    def done(self) -> bool:
        return self.active_workers == 0 and self.all_found

    def _handle_discovery(self, msg: Discovery) -> None:
        if msg.worker_id not in self.worker_inboxes:
            _reject(f"Discovery from unknown worker-{msg.worker_id}")
        if msg.category not in self.discovered:
            self.discovered.add(msg.category)
            log.info(
                f"{msg.category.label} found by worker-{msg.worker_id} "
                f"({len(self.discovered)}/{len(Category)})"
            )
        self.discovery_history.append(len(self.discovered))

    def _handle_tally(self, msg: Tally) -> None:
        if msg.worker_id not in self.worker_inboxes:
            _reject(f"Tally from unknown worker-{msg.worker_id}")
        if msg.worker_id in self.worker_counts:
            _reject(f"Second tally from worker-{msg.worker_id}")
        self.worker_counts[msg.worker_id] = msg.counts
        self.totals.merge(msg.counts)
        self.active_workers -= 1
        log.info(f"Tally from worker-{msg.worker_id}: {sum(msg.counts)} hands, {self.active_workers} still active")

    def terminate_workers(self) -> None:
        for inbox in self.worker_inboxes.values():
            inbox.send(Terminate(), sender="coordinator")
        self.terminated = True
        self.broadcasts += 1
        log.info(f"All {len(Category)} hand types found, terminate sent to {len(self.worker_inboxes)} workers")

    def poll_once(self) -> bool:
        """One pass over both streams. Returns True when a message was consumed."""
        consumed = False

        msg = self.discoveries.try_receive()
        if msg is not None:
            if not isinstance(msg, Discovery):
                _reject(f"Expected discovery notice, got {msg}")
            self._handle_discovery(msg)
            consumed = True

        if self.active_workers > 0:
            msg = self.tallies.try_receive()
            if msg is not None:
                if not isinstance(msg, Tally):
                    _reject(f"Expected final tally, got {msg}")
                self._handle_tally(msg)
                consumed = True

        if self.all_found and not self.terminated:
            self.terminate_workers()

        return consumed

    def run(self) -> FrequencyTable:
        start = time.perf_counter()
        log.info(f"Coordinating {self.active_workers} workers")

        while not self.done:
            if self.timeout is not None and time.perf_counter() - start > self.timeout:
                raise CoordinatorTimeout(
                    f"Gave up after {self.timeout}s: {len(self.discovered)}/{len(Category)} found, "
                    f"{self.active_workers} workers still active"
                )
            if self.poll_once():
                continue
            if self.health_check is not None:
                self.health_check()
            if self.poll_interval:
                time.sleep(self.poll_interval)

        self.elapsed = time.perf_counter() - start
        log.info(f"Done: {self.totals.total()} hands in {self.elapsed:.3f}s")
        return self.totals
