"""Interactive text console for a single elevator cabin."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from cabin import CabinTiming, StreamLogSink
from cabin.console import Console


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--time-unit", type=float, default=1.0, help="Seconds per time unit")
    parser.add_argument("--log-file", type=Path, help="Append cabin log lines to this file")
    parser.add_argument("--log-level", default="INFO", help="Logging level written to stderr")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s")

    if args.log_file:
        with args.log_file.open("a", encoding="utf-8") as stream:
            return Console(timing=CabinTiming(time_unit=args.time_unit), log_sink=StreamLogSink(stream)).run()
    return Console(timing=CabinTiming(time_unit=args.time_unit)).run()


if __name__ == "__main__":
    sys.exit(main())
