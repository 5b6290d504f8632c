# src/common/protocol.py

import struct
from dataclasses import dataclass
from typing import Tuple, Union

from .logging_utils import get_logger
from .rules import Category
from .constants import (
    MAGIC_COOKIE,
    TYPE_DISCOVERY, TYPE_TALLY, TYPE_TERMINATE,
    HEADER_LEN, DISCOVERY_LEN, TALLY_LEN, TERMINATE_LEN,
    NUM_CATEGORIES, MAX_WORKER_ID, MAX_COUNT,
)
_log = get_logger("protocol")

_HEADER_FMT = "!I B"
_DISCOVERY_FMT = "!I B H B"
_TALLY_FMT = f"!I B H {NUM_CATEGORIES}Q"


# -------------------------
# Errors
# -------------------------
class ProtocolError(ValueError):
    """Raised when a packet is malformed or invalid."""
    pass


def _require(condition: bool, msg: str) -> None:
    if not condition:
        _log.warning(f"ProtocolError: {msg}")
        raise ProtocolError(msg)


def _validate_header(cookie: int, msg_type: int, expected_type: int) -> None:
    _require(cookie == MAGIC_COOKIE, "Bad magic cookie")
    _require(msg_type == expected_type, f"Bad message type: expected {expected_type:#x}, got {msg_type:#x}")


# -------------------------
# Messages
# -------------------------
@dataclass(frozen=True)
class Discovery:
    worker_id: int
    category: Category


@dataclass(frozen=True)
class Tally:
    worker_id: int
    counts: Tuple[int, ...]   # NUM_CATEGORIES entries, Category value order


@dataclass(frozen=True)
class Terminate:
    pass


Message = Union[Discovery, Tally, Terminate]


# -------------------------
# DISCOVERY (worker -> coordinator): cookie(4) type(1) worker(2) category(1) = 8 bytes
# -------------------------
def build_discovery(worker_id: int, category: Category) -> bytes:
    _require(0 <= worker_id <= MAX_WORKER_ID, "worker_id must be uint16")
    _require(0 <= int(category) < NUM_CATEGORIES, "category out of range")
    return struct.pack(_DISCOVERY_FMT, MAGIC_COOKIE, TYPE_DISCOVERY, worker_id, int(category))


def parse_discovery(data: bytes) -> Discovery:
    _require(len(data) == DISCOVERY_LEN, f"Invalid discovery length: expected {DISCOVERY_LEN}, got {len(data)}")
    cookie, msg_type, worker_id, code = struct.unpack(_DISCOVERY_FMT, data)
    _validate_header(cookie, msg_type, TYPE_DISCOVERY)
    _require(code < NUM_CATEGORIES, f"Invalid category code: {code}")
    return Discovery(worker_id=worker_id, category=Category(code))


# -------------------------
# TALLY (worker -> coordinator): cookie(4) type(1) worker(2) counts(10 x 8) = 87 bytes
# -------------------------
def build_tally(worker_id: int, counts) -> bytes:
    counts = tuple(counts)
    _require(0 <= worker_id <= MAX_WORKER_ID, "worker_id must be uint16")
    _require(len(counts) == NUM_CATEGORIES, f"tally needs {NUM_CATEGORIES} counts, got {len(counts)}")
    _require(all(0 <= n <= MAX_COUNT for n in counts), "counts must be uint64")
    return struct.pack(_TALLY_FMT, MAGIC_COOKIE, TYPE_TALLY, worker_id, *counts)


def parse_tally(data: bytes) -> Tally:
    _require(len(data) == TALLY_LEN, f"Invalid tally length: expected {TALLY_LEN}, got {len(data)}")
    cookie, msg_type, worker_id, *counts = struct.unpack(_TALLY_FMT, data)
    _validate_header(cookie, msg_type, TYPE_TALLY)
    return Tally(worker_id=worker_id, counts=tuple(counts))


# -------------------------
# TERMINATE (coordinator -> worker): cookie(4) type(1) = 5 bytes
# -------------------------
def build_terminate() -> bytes:
    return struct.pack(_HEADER_FMT, MAGIC_COOKIE, TYPE_TERMINATE)


def parse_terminate(data: bytes) -> Terminate:
    _require(len(data) == TERMINATE_LEN, f"Invalid terminate length: expected {TERMINATE_LEN}, got {len(data)}")
    cookie, msg_type = struct.unpack(_HEADER_FMT, data)
    _validate_header(cookie, msg_type, TYPE_TERMINATE)
    return Terminate()


def build_message(msg: Message) -> bytes:
    if isinstance(msg, Discovery):
        return build_discovery(msg.worker_id, msg.category)
    if isinstance(msg, Tally):
        return build_tally(msg.worker_id, msg.counts)
    if isinstance(msg, Terminate):
        return build_terminate()
    raise ProtocolError(f"Unknown message object: {msg!r}")


# Auto-detect message kind by the type byte
def parse_message(data: bytes) -> Message:
    _require(len(data) >= HEADER_LEN, f"Packet too short: {len(data)} bytes")
    cookie, msg_type = struct.unpack(_HEADER_FMT, data[:HEADER_LEN])
    _require(cookie == MAGIC_COOKIE, "Bad magic cookie")
    if msg_type == TYPE_DISCOVERY:
        return parse_discovery(data)
    if msg_type == TYPE_TALLY:
        return parse_tally(data)
    if msg_type == TYPE_TERMINATE:
        return parse_terminate(data)
    raise ProtocolError(f"Unknown message type: {msg_type:#x}")
