"""CLI for replaying timed floor calls defined in a JSON scenario."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from cabin.scenario import run_scenario


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the log and final state as JSON",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level for the cabin log")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    config = json.loads(args.config.read_text())
    config.setdefault("name", args.config.stem)
    result = run_scenario(config)
    results = result.as_dict()

    save_results(args.output, results)

    print(f"Scenario: {result.name}")
    if results["description"]:
        print(results["description"])
    print(f"Top floor: {results['top_floor']}")
    print(f"Duration: {results['duration']} units")
    print(f"Floors visited: {' -> '.join(str(floor) for floor in result.floors_visited)}")
    for rejection in result.rejected:
        print(f"  rejected at {rejection['at']}: floor {rejection['floor']} ({rejection['reason']})")
    print(f"Final floor: {result.final.current_floor}")
    if args.output:
        print(f"Saved results to {args.output}")


if __name__ == "__main__":
    main()
