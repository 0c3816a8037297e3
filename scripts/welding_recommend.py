#!/usr/bin/env python3
"""Print an SMAW technique recommendation for a parameter snapshot.

Examples:
    python scripts/welding_recommend.py --electrode E7018 --size '1/8"' \
        --position "Vertical Up" --thickness 'Thick (>3/16")' --joint T --machine DC+
    python scripts/welding_recommend.py --electrode E6010 --machine AC \
        --stability Unstable --text
    python scripts/welding_recommend.py --list-options
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.core.knowledge.welding import (  # noqa: E402
    ParameterSnapshot,
    RecommendationResult,
    diagnose_observations,
    get_recommendations,
    list_input_options,
)
from src.utils.logging import setup_logging  # noqa: E402

logger = logging.getLogger("welding_recommend")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SMAW technique recommendation.")
    parser.add_argument("--electrode", help="Electrode classification, e.g. E7018")
    parser.add_argument("--size", dest="electrode_size", help='Electrode diameter, e.g. 1/8"')
    parser.add_argument("--position", help="Flat, Horizontal, Vertical Up, Vertical Down, Overhead")
    parser.add_argument("--thickness", dest="metal_thickness", help='Thin (<1/8"), Medium (1/8"-3/16") or Thick (>3/16")')
    parser.add_argument("--joint", dest="joint_type", help="Butt, Lap, T or Corner")
    parser.add_argument("--machine", dest="machine_type", help="AC, DC+ or DC-")
    parser.add_argument("--puddle", dest="observed_puddle", help="Stiff, Moderate or VeryFluid")
    parser.add_argument("--spread", dest="observed_spread", help="Narrow, Moderate or Wide")
    parser.add_argument("--tie-in", dest="observed_tie_in", help="Poor, Adequate or Excellent")
    parser.add_argument("--stability", dest="observed_stability", help="Unstable or Stable")
    parser.add_argument("--text", action="store_true", help="Plain text instead of JSON")
    parser.add_argument("--list-options", action="store_true", help="Print selectable values")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def format_text(snapshot: ParameterSnapshot, result: RecommendationResult) -> str:
    rows = [
        ("Amperage", result.amperage),
        ("Arc gap", result.arc_gap),
        ("Rod angle", result.rod_angle),
        ("Travel speed", result.travel_speed),
        ("Motion pattern", ", ".join(result.motion_pattern) or None),
    ]
    lines = [f"{label:<15}{value}" for label, value in rows if value]
    if result.adjustments:
        lines.append("Adjustments:")
        lines.extend(f"  - {item}" for item in result.adjustments)
    for state in diagnose_observations(snapshot, include_nominal=False):
        lines.append(f"{state.dimension.value}={state.state}: {state.diagnosis}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, json_output=False)

    if args.list_options:
        print(json.dumps(list_input_options(), ensure_ascii=False, indent=2))
        return 0

    snapshot = ParameterSnapshot.from_dict(vars(args))
    result = get_recommendations(snapshot)
    logger.debug("snapshot=%s", snapshot.to_dict())

    if args.text:
        print(format_text(snapshot, result))
    else:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
