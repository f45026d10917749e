"""
Command line entry point for the assembly engine.

Loads an item pool and a constraint file, runs the assembly pipeline and
writes a JSON report to stdout or a file.

Example:
    assessment-assemble pool.jsonl --constraints constraints.json --target-size 20 --forms 2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from assessment_toolkit import __version__
from assessment_toolkit.assembly import AssemblyConfig, AssemblyError, run_assembly
from assessment_toolkit.assembly.strategies import STRATEGIES
from assessment_toolkit.core.schemas import InvalidInputError
from assessment_toolkit.core.utils import load_constraints, load_pool, report_to_dict, write_json

logger = logging.getLogger("assessment_toolkit.cli")

EXIT_OK = 0
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assessment-assemble",
        description="Assemble assessment forms from an item pool and weighted constraints",
    )
    parser.add_argument("pool", type=Path, help="Item pool (.json or .jsonl)")
    parser.add_argument("--constraints", type=Path, required=True, help="Constraint list (.json)")
    parser.add_argument("--config", type=Path, help="JSON file with AssemblyConfig fields")
    parser.add_argument("--target-size", type=int, help="Items per form (default: length optimizer)")
    parser.add_argument("--forms", type=int, help="Number of parallel forms")
    parser.add_argument("--strategy", choices=sorted(STRATEGIES), help="Selection strategy")
    parser.add_argument("--seed", type=int, help="Seed for seeded strategies and versions")
    parser.add_argument("--versions", type=int, help="Scrambled versions per form")
    parser.add_argument("--output", type=Path, help="Write the JSON report here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load_config(args: argparse.Namespace) -> AssemblyConfig:
    config = AssemblyConfig()
    if args.config:
        try:
            with open(args.config, "r", encoding="utf-8") as f:
                config = AssemblyConfig.from_dict(json.load(f))
        except OSError as e:
            raise InvalidInputError(f"Cannot read {args.config}: {e}") from e
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            raise InvalidInputError(f"{args.config}: {e}", path="config") from e

    overrides = {
        "target_size": args.target_size,
        "number_of_forms": args.forms,
        "strategy": args.strategy,
        "seed": args.seed,
        "versions": args.versions,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        return replace(config, **overrides)
    except ValueError as e:
        raise InvalidInputError(str(e), path="config") from e


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = _load_config(args)
        pool = load_pool(args.pool)
        constraints = load_constraints(args.constraints)
        report = run_assembly(pool, constraints, config)
    except (InvalidInputError, AssemblyError) as e:
        logger.error(str(e))
        return EXIT_INVALID_INPUT

    data = report_to_dict(report)
    if args.output:
        write_json(data, args.output)
        logger.info(f"Report written to {args.output}")
    else:
        json.dump(data, sys.stdout, indent=2)
        sys.stdout.write("\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
