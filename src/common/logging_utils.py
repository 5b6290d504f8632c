# src/common/logging_utils.py

import logging
import os
from typing import Any, Optional

# Environment switches:
#   LOG_LEVEL=DEBUG / INFO / WARNING / ERROR
#   LOG_HEX=1 to include hexdumps in logs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_HEX = os.getenv("LOG_HEX", "0") == "1"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Call once at program start (coordinator main and each worker process)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def hexdump(data: bytes, max_len: int = 64) -> str:
    """Short hex dump: 'ab cd ef ...' limited to max_len bytes."""
    shown = data[:max_len]
    hex_part = " ".join(f"{b:02x}" for b in shown)
    if len(data) > max_len:
        hex_part += f" ... (+{len(data) - max_len} bytes)"
    return hex_part


def log_packet(
    logger: logging.Logger,
    direction: str,               # "IN" / "OUT"
    transport: str,               # "THREAD" / "PROCESS"
    peer: Optional[str],
    raw: bytes,
    parsed: Optional[Any] = None,
    note: str = "",
    level: int = logging.DEBUG,
) -> None:
    """
    Unified packet log.
    peer: mailbox name of the other side if known ("coordinator", "worker-3"), else None.
    parsed: any parsed message (dataclass) to print summary.
    """
    if not logger.isEnabledFor(level):
        return

    base = f"[{transport}][{direction}] {peer or '-'} len={len(raw)}"
    if note:
        base += f" | {note}"

    if parsed is not None:
        base += f" | parsed={parsed}"

    if LOG_HEX:
        base += f" | hex={hexdump(raw)}"

    logger.log(level, base)
