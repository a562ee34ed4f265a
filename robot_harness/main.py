"""
stdio host for the robot harness.

Reads control messages, one JSON object per line, from stdin and writes every
outbound envelope as one JSON line to stdout. Diagnostics go to stderr.

Usage:
    python -m robot_harness.main                          # serve control messages from stdin
    python -m robot_harness.main --mode Functional --count 30
    python -m robot_harness.main --mode "Unit HitTest"
"""

import argparse
import logging
import sys

from .channels import Outbound, StreamChannel
from .config import get_log_level
from .harness import Tester
from .models import RunMode, RunOptions


def main(argv: list[str] | None = None) -> int:
    """Run the harness host.

    Returns:
        0 on success, 1 on user abort.

    Raises:
        RuntimeError: if a setting in the environment is invalid; raised
            before any control message is read.
    """
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(
        description="Differential test harness for the robot table simulator.",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in RunMode],
        help="Run a single control message with this key and exit.",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="Command count for a Functional run.",
    )
    args = parser.parse_args(argv)

    tester = Tester(Outbound.single(StreamChannel(sys.stdout)))

    if args.mode:
        tester.handle(RunOptions(key=args.mode, count=args.count))
        return 0

    try:
        for line in sys.stdin:
            line = line.strip()
            if line:
                tester.handle_message(line)
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("aborted.")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
