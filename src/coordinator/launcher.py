# src/coordinator/launcher.py

import multiprocessing
import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from src.common.cards import Deck, make_deck
from src.common.config import SimulationConfig
from src.common.frequency import FrequencyTable
from src.common.logging_utils import get_logger
from src.common.mailbox import Mailbox
from src.common.protocol import Terminate
from src.coordinator.coordinator import Coordinator
from src.worker.worker import Worker, run_worker

log = get_logger("coordinator.launcher")

COORDINATOR_ID = 0
JOIN_TIMEOUT = 10.0

DeckFactory = Callable[[int, Optional[int]], Deck]


class WorkerFailure(RuntimeError):
    """A worker died before delivering its final tally."""
    pass


@dataclass
class SimulationResult:
    table: FrequencyTable
    elapsed: float
    workers: int
    backend: str
    worker_counts: Dict[int, tuple] = field(default_factory=dict)

    @property
    def total_hands(self) -> int:
        return self.table.total()


class _WorkerThread(threading.Thread):
    def __init__(self, worker: Worker) -> None:
        super().__init__(name=worker.name, daemon=True)
        self.worker = worker
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.worker.run()
        except Exception as e:
            log.exception(f"{self.worker.name}: fatal error")
            self.error = e


def _worker_ids(n: int) -> List[int]:
    # Id 0 is the coordinator, as rank 0 would be.
    return list(range(COORDINATOR_ID + 1, COORDINATOR_ID + 1 + n))


def _run_threads(cfg: SimulationConfig, deck_factory: DeckFactory) -> SimulationResult:
    discoveries = Mailbox("coordinator.discoveries", queue.Queue(), "THREAD")
    tallies = Mailbox("coordinator.tallies", queue.Queue(), "THREAD")
    inboxes = {i: Mailbox(f"worker-{i}", queue.Queue(), "THREAD") for i in _worker_ids(cfg.workers)}

    threads = [
        _WorkerThread(Worker(i, deck_factory(i, cfg.seed), inbox, discoveries, tallies))
        for i, inbox in inboxes.items()
    ]

    def health_check() -> None:
        for t in threads:
            if t.error is not None:
                raise WorkerFailure(f"{t.name} failed: {t.error}") from t.error

    coordinator = Coordinator(
        discoveries, tallies, inboxes,
        poll_interval=cfg.poll_interval,
        timeout=cfg.timeout,
        health_check=health_check,
    )

    for t in threads:
        t.start()
    try:
        table = coordinator.run()
    except BaseException:
        if not coordinator.terminated:
            for inbox in inboxes.values():
                inbox.send(Terminate(), sender="coordinator")
        raise
    finally:
        discoveries.drain()
        for t in threads:
            t.join(JOIN_TIMEOUT)

    return SimulationResult(table, coordinator.elapsed, cfg.workers, "thread", dict(coordinator.worker_counts))


def _run_processes(cfg: SimulationConfig, deck_factory: DeckFactory, log_level: Optional[str]) -> SimulationResult:
    discoveries = Mailbox("coordinator.discoveries", multiprocessing.Queue(), "PROCESS")
    tallies = Mailbox("coordinator.tallies", multiprocessing.Queue(), "PROCESS")
    inboxes = {i: Mailbox(f"worker-{i}", multiprocessing.Queue(), "PROCESS") for i in _worker_ids(cfg.workers)}

    procs = [
        multiprocessing.Process(
            target=run_worker,
            args=(i, inbox, discoveries, tallies, cfg.seed, log_level, deck_factory),
            name=f"worker-{i}",
            daemon=True,
        )
        for i, inbox in inboxes.items()
    ]

    def health_check() -> None:
        for p in procs:
            if p.exitcode not in (None, 0):
                raise WorkerFailure(f"{p.name} exited with code {p.exitcode}")

    coordinator = Coordinator(
        discoveries, tallies, inboxes,
        poll_interval=cfg.poll_interval,
        timeout=cfg.timeout,
        health_check=health_check,
    )

    for p in procs:
        p.start()
    log.info(f"Started {len(procs)} worker processes")
    try:
        table = coordinator.run()
    except BaseException:
        for p in procs:
            p.terminate()
        raise
    finally:
        # Late duplicate notices must not sit in the pipe while we join.
        discoveries.drain()
        for p in procs:
            p.join(JOIN_TIMEOUT)

    return SimulationResult(table, coordinator.elapsed, cfg.workers, "process", dict(coordinator.worker_counts))


def run_parallel(
    cfg: SimulationConfig,
    deck_factory: DeckFactory = make_deck,
    log_level: Optional[str] = None,
) -> SimulationResult:
    if cfg.workers < 1:
        raise ValueError("parallel mode needs at least one worker")
    log.info(f"Running {cfg.workers} workers on the {cfg.backend} backend")
    if cfg.backend == "thread":
        return _run_threads(cfg, deck_factory)
    return _run_processes(cfg, deck_factory, log_level)
