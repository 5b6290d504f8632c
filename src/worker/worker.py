# src/worker/worker.py

from typing import Callable, Optional

from src.common.cards import Deck, hand_to_string, make_deck
from src.common.frequency import FrequencyTable
from src.common.logging_utils import setup_logging, get_logger
from src.common.mailbox import Mailbox
from src.common.protocol import Discovery, Tally, Terminate, ProtocolError
from src.common.rules import classify

log = get_logger("worker")


class Worker:
    """
    Draws hands until the coordinator says stop.

    The inbox is polled once per draw, after classification and before the
    hand is counted, so a hand drawn after the stop signal arrives is dropped.
    """

    def __init__(
        self,
        worker_id: int,
        deck: Deck,
        inbox: Mailbox,
        discoveries: Mailbox,
        tallies: Mailbox,
    ) -> None:
        self.worker_id = worker_id
        self.name = f"worker-{worker_id}"
        self.deck = deck
        self.inbox = inbox
        self.discoveries = discoveries
        self.tallies = tallies
        self.table = FrequencyTable()
        self.hands_drawn = 0
        self.stopped = False

    def _check_for_terminate(self) -> None:
        msg = self.inbox.try_receive()
        if msg is None:
            return
        if not isinstance(msg, Terminate):
            raise ProtocolError(f"{self.name} got unexpected message from coordinator: {msg}")
        log.info(f"{self.name}: terminate received after {self.hands_drawn} hands")
        self.stopped = True

    def step(self) -> None:
        """One draw: shuffle, classify, poll for stop, then count and maybe notify."""
        self.deck.shuffle()
        hand = self.deck.draw_hand()
        category = classify(hand)

        self._check_for_terminate()
        if self.stopped:
            return

        self.hands_drawn += 1
        if self.table.increment(category) == 1:
            log.info(f"{self.name}: first {category.label} ({hand_to_string(hand)}) at hand {self.hands_drawn}")
            self.discoveries.send(Discovery(self.worker_id, category), sender=self.name)

    def send_tally(self) -> None:
        self.tallies.send(Tally(self.worker_id, tuple(self.table.counts())), sender=self.name)
        log.info(f"{self.name}: final tally sent ({self.table.total()} hands)")

    def run(self) -> FrequencyTable:
        log.info(f"{self.name}: started")
        while not self.stopped:
            self.step()
        self.send_tally()
        return self.table


def run_worker(
    worker_id: int,
    inbox: Mailbox,
    discoveries: Mailbox,
    tallies: Mailbox,
    seed: Optional[int] = None,
    log_level: Optional[str] = None,
    deck_factory: Callable[[int, Optional[int]], Deck] = make_deck,
) -> FrequencyTable:
    """Process/thread entry point."""
    if log_level:
        setup_logging(log_level)
    worker = Worker(worker_id, deck_factory(worker_id, seed), inbox, discoveries, tallies)
    try:
        return worker.run()
    except Exception:
        log.exception(f"{worker.name}: fatal error")
        raise
