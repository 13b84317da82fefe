"""Command-line interface."""
import argparse
import json
import logging
import sys

from calcsuite.catalog import (
    CALCULATORS,
    UnknownCalculatorError,
    list_calculators,
    result_to_dict,
    run_calculator,
)
from calcsuite.core.domain.units import list_units
from calcsuite.core.math.numerical_safeguards import CalculatorInputError
from calcsuite.logging_config import setup_logging

EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calcsuite",
        description="Run a calculator or unit converter on a JSON payload",
    )
    parser.add_argument("slug", nargs="?", help="Calculator slug, e.g. hotel-cost")
    parser.add_argument("payload", nargs="?", default="{}", help="JSON object with the form inputs")
    parser.add_argument("--list", action="store_true", help="List calculator slugs and exit")
    parser.add_argument("--category", help="Filter --list by category")
    parser.add_argument("--units", metavar="CONVERTER", help="List unit ids of a converter and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.list:
            for slug in list_calculators(args.category):
                print(f"{slug}\t{CALCULATORS[slug].category.value}")
            return 0

        if args.units:
            print("\n".join(list_units(args.units)))
            return 0

        if not args.slug:
            parser.error("slug is required unless --list or --units is given")

        try:
            payload = json.loads(args.payload)
        except json.JSONDecodeError as e:
            raise CalculatorInputError(f"payload is not valid JSON: {e.msg}") from e

        result = run_calculator(args.slug, payload)
    except UnknownCalculatorError as e:
        print(f"error: unknown calculator {e.args[0]!r} (see --list)", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except CalculatorInputError as e:
        where = f" [{e.field}]" if e.field else ""
        print(f"error{where}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    print(json.dumps(result_to_dict(result), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
