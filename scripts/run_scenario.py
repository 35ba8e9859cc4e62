"""CLI for running LOOK dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from simulation import Simulation, build_simulation, load_scenario


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def print_trace(simulation: Simulation) -> None:
    def on_dispatch(payload: dict) -> None:
        print(f"  t={payload['time']:3d}: {payload['request']} -> car {payload['car_id']}")

    def on_step(payload: dict) -> None:
        for outcome in payload["outcomes"]:
            print(f"  t={payload['time']:3d}: {outcome}")

    simulation.on_event("dispatch", on_dispatch)
    simulation.on_event("step", on_step)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write the run summary as JSON",
    )
    parser.add_argument("--trace", action="store_true", help="Print every dispatch and car step")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = load_scenario(args.config)
    simulation = build_simulation(config)
    if args.trace:
        print_trace(simulation)

    print(f"Scenario: {config.name or args.config.stem}")
    if config.description:
        print(config.description)
    print("Initial status:")
    print(simulation.dispatcher.status())

    ticks = simulation.run()

    summary = simulation.summary()
    results = {
        "scenario": config.name or args.config.stem,
        "description": config.description,
        "stop_set": config.building.stop_set,
        **summary,
    }
    save_results(args.output, results)

    print(f"Finished: {summary['finished']} after {ticks} ticks")
    print("Final status:")
    print(simulation.dispatcher.status())
    for car_id, stops in summary["stop_sequences"].items():
        print(f"  car {car_id} stops: {stops}")
    if args.output:
        print(f"Saved summary to {args.output}")


if __name__ == "__main__":
    main()
