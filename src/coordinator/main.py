# src/coordinator/main.py

import argparse
import sys
from typing import List, Optional

from src.common.config import load_config
from src.common.constants import BACKENDS
from src.common.logging_utils import LOG_LEVEL, setup_logging, get_logger
from src.common.mailbox import TransportError
from src.common.protocol import ProtocolError
from src.common.rules import ClassificationError
from src.coordinator.coordinator import CoordinatorTimeout
from src.coordinator.launcher import WorkerFailure, run_parallel
from src.coordinator.report import render_report
from src.coordinator.serial import run_serial


log = get_logger("coordinator.main")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="poker-frequencies",
        description="Draw 5-card hands until all ten hand types have been seen, then report frequencies.",
    )
    p.add_argument("-w", "--workers", type=int, help="number of workers (0 = serial)")
    p.add_argument("-b", "--backend", choices=sorted(BACKENDS), help="run workers as threads or processes")
    p.add_argument("-s", "--seed", type=int, help="base seed for the draw sources")
    p.add_argument("--serial", action="store_true", help="single task, no coordinator")
    p.add_argument("--timeout", type=float, help="abort after this many seconds")
    p.add_argument("--log-level", default=LOG_LEVEL, help="DEBUG / INFO / WARNING / ERROR")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = load_config().with_overrides(
            workers=0 if args.serial else args.workers,
            backend=args.backend,
            seed=args.seed,
            timeout=args.timeout,
        )
    except ValueError as e:
        log.error(f"Bad configuration: {e}")
        return 2

    try:
        if cfg.serial:
            result = run_serial(seed=cfg.seed)
        else:
            result = run_parallel(cfg, log_level=args.log_level)
    except (ProtocolError, TransportError, ClassificationError, WorkerFailure, CoordinatorTimeout) as e:
        log.error(f"Run aborted: {e}")
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted, no report.")
        return 130

    print(render_report(result.table, result.total_hands, result.elapsed, result.workers, serial=cfg.serial))
    return 0


if __name__ == "__main__":
    sys.exit(main())
