# src/common/mailbox.py

import queue
from typing import Any, Optional

from .protocol import Message, build_message, parse_message
from .logging_utils import get_logger, log_packet

log = get_logger("mailbox")


class TransportError(RuntimeError):
    """The underlying queue failed to carry a message."""
    pass


class Mailbox:
    """
    One inbound stream of packets, backed by a queue.Queue (threads) or a
    multiprocessing.Queue (processes). Both raise queue.Empty on an empty
    non-blocking get, so the same code polls either.

    try_receive() consumes at most one packet per call; there is no request
    handle to re-arm between polls.
    """

    def __init__(self, name: str, q: Any, transport: str = "THREAD") -> None:
        self.name = name
        self.transport = transport
        self._q = q

    def send(self, msg: Message, sender: str = "") -> None:
        raw = build_message(msg)
        try:
            self._q.put_nowait(raw)
        except (queue.Full, OSError, ValueError) as e:
            raise TransportError(f"send to {self.name} failed: {e}") from e
        log_packet(log, "OUT", self.transport, self.name, raw, parsed=msg, note=f"from {sender or '-'}")

    def try_receive(self) -> Optional[Message]:
        try:
            raw = self._q.get_nowait()
        except queue.Empty:
            return None
        except (OSError, EOFError, ValueError) as e:
            raise TransportError(f"receive on {self.name} failed: {e}") from e
        msg = parse_message(raw)
        log_packet(log, "IN", self.transport, self.name, raw, parsed=msg)
        return msg

    def drain(self) -> int:
        """Discard everything currently queued; returns how many packets were dropped."""
        dropped = 0
        while self.try_receive() is not None:
            dropped += 1
        return dropped
