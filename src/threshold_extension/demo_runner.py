from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from threshold_extension.contracts import MISSING, EmptyDestinationError, StrategyTag
from threshold_extension.engine import extend
from threshold_extension.logging import configure_logging
from threshold_extension.settings import LOG_LEVELS, SettingsError

LOGGER = logging.getLogger("threshold_extension.demo")

SCENARIO_DESTINATION: tuple[str, ...] = (
    "Lorem",
    "Ipsum",
    "is",
    "simply",
    "dummy",
    "text",
    "of",
    "the",
    "printing",
    "and",
    "typesetting",
    "industry.",
)
SCENARIO_SOURCE: tuple[str, ...] = ("Where does it come from?",)

EXIT_OK = 0
EXIT_EMPTY_DESTINATION = 2
EXIT_CONFIG_ERROR = 3


def run_demo(
    destination: list[str],
    source: list[str],
    *,
    strategy: StrategyTag | None = None,
    default: Any = MISSING,
    verify: bool | None = None,
) -> dict[str, Any]:
    report = extend(destination, source, len, strategy=strategy, default=default, verify=verify)
    return {"report": report.as_payload(), "destination": list(destination)}


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aliasext",
        description="Append source words longer than every destination word, using one extension strategy.",
    )
    parser.add_argument("--destination", nargs="*", default=[], metavar="WORD", help="Destination words.")
    parser.add_argument("--source", nargs="*", default=[], metavar="WORD", help="Candidate source words.")
    parser.add_argument(
        "--scenario",
        action="store_true",
        help="Use the built-in Lorem Ipsum destination (and its sample sentence unless --source is given).",
    )
    parser.add_argument(
        "--strategy",
        choices=[tag.value for tag in StrategyTag],
        default=None,
        help="Extension strategy. Defaults to ALIASEXT_STRATEGY or scalar_only.",
    )
    parser.add_argument(
        "--default",
        type=int,
        default=None,
        help="Threshold to use when the destination is empty. Without it an empty destination is an error.",
    )
    parser.add_argument("--verify", action="store_true", default=None, help="Check post-conditions after extending.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Override ALIASEXT_LOG_LEVEL for this run.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    destination = list(args.destination)
    source = list(args.source)
    if args.scenario:
        destination = list(SCENARIO_DESTINATION)
        source = source or list(SCENARIO_SOURCE)

    try:
        configure_logging(args.log_level)
        result = run_demo(
            destination,
            source,
            strategy=StrategyTag(args.strategy) if args.strategy else None,
            default=MISSING if args.default is None else args.default,
            verify=args.verify,
        )
    except EmptyDestinationError as exc:
        LOGGER.warning("extension aborted: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_EMPTY_DESTINATION
    except SettingsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return EXIT_OK
