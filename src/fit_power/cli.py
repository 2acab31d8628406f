import argparse
import logging
import sys
from pathlib import Path

import requests

from fit_power import __version_date__, get_git_hash
from fit_power.activity import decode_fit, load_activity, write_csv
from fit_power.charts import generate_power_chart
from fit_power.compare import compare_power, format_comparison_report
from fit_power.config import DEFAULTS, get_decode_url, load_config
from fit_power.estimator import estimate_power, recalc_gradient
from fit_power.models import EstimatorConfig, RiderParams


def build_parser(config: dict | None = None) -> argparse.ArgumentParser:
    """Build argument parser with defaults from config file."""
    if config is None:
        config = {}

    def get_default(key: str) -> float:
        return config.get(key, DEFAULTS[key])

    parser = argparse.ArgumentParser(
        description="Estimate cycling power from a recorded activity."
    )
    parser.add_argument(
        "input",
        help="Decoded activity JSON, or a .fit file to decode through the FIT service",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="CSV output path (default: input path with .csv suffix)",
    )
    parser.add_argument(
        "-p", "--params",
        nargs=3,
        type=float,
        metavar=("MASS", "CDA", "CRR"),
        default=None,
        help="Total mass in kg, CdA in m² and rolling coefficient, overriding the individual options",
    )
    parser.add_argument(
        "--mass",
        type=float,
        default=get_default("mass"),
        help=f"Total mass of rider + bike in kg (default: {DEFAULTS['mass']})",
    )
    parser.add_argument(
        "--cda",
        type=float,
        default=get_default("cda"),
        help=f"Drag coefficient * frontal area in m² (default: {DEFAULTS['cda']})",
    )
    parser.add_argument(
        "--crr",
        type=float,
        default=get_default("crr"),
        help=f"Rolling resistance coefficient (default: {DEFAULTS['crr']})",
    )
    parser.add_argument(
        "--drivetrain-penalty",
        type=float,
        default=get_default("drivetrain_penalty"),
        help=f"Fraction of power lost in the drivetrain (default: {DEFAULTS['drivetrain_penalty']})",
    )
    parser.add_argument(
        "--max-power",
        type=float,
        default=get_default("max_power"),
        help=f"Estimates above this many watts hold the previous value (default: {DEFAULTS['max_power']})",
    )
    parser.add_argument(
        "--headwind",
        type=float,
        default=get_default("headwind"),
        help=f"Headwind speed in km/h (default: {DEFAULTS['headwind']}). Positive = into wind, negative = tailwind.",
    )
    parser.add_argument(
        "--humidity",
        type=float,
        default=get_default("humidity"),
        help=f"Relative humidity in percent (default: {DEFAULTS['humidity']})",
    )
    parser.add_argument(
        "--recalc-gradient",
        action="store_true",
        help="Recompute gradients from altitude and distance instead of using recorded values",
    )
    parser.add_argument(
        "--chart",
        default=None,
        help="Write a PNG chart of estimated vs measured power to this path",
    )
    parser.add_argument(
        "--smoothing",
        type=int,
        default=get_default("smoothing"),
        help=f"Moving average window in samples for the chart (default: {DEFAULTS['smoothing']}, 0 or 1 disables)",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Print a comparison of estimated and measured power",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version_date__} ({get_git_hash()})",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    config = load_config()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    mass, cda, crr = args.params if args.params else (args.mass, args.cda, args.crr)
    rider = RiderParams(
        total_mass=mass,
        cda=cda,
        crr=crr,
        drivetrain_penalty=args.drivetrain_penalty,
    )
    estimator_config = EstimatorConfig(
        max_power_w=args.max_power,
        headwind_kph=args.headwind,
        humidity_percent=args.humidity,
    )

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_suffix(".csv")

    if input_path.suffix.lower() == ".fit":
        try:
            json_path = decode_fit(input_path, url=get_decode_url(config))
        except FileNotFoundError:
            print(f"Error: File not found: {input_path}", file=sys.stderr)
            sys.exit(1)
        except requests.RequestException as e:
            print(f"Error decoding FIT file: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Convert {input_path} to json")
    else:
        json_path = input_path

    print(f"input from {json_path}")
    try:
        samples = load_activity(json_path)
    except FileNotFoundError:
        print(f"Error: File not found: {json_path}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error parsing activity JSON: {e}", file=sys.stderr)
        sys.exit(1)

    if not samples:
        print("Error: Activity contains no records.", file=sys.stderr)
        sys.exit(1)

    if args.recalc_gradient:
        for sample, gradient in zip(samples, recalc_gradient(samples)):
            sample.gradient_percent = gradient

    estimate_power(samples, rider, estimator_config)

    print(f"output to {output_path}")
    try:
        write_csv(samples, output_path)
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        sys.exit(1)

    if args.chart:
        try:
            Path(args.chart).write_bytes(generate_power_chart(samples, smoothing=args.smoothing))
        except OSError as e:
            print(f"Error writing chart: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"chart to {args.chart}")

    if args.compare:
        print("")
        print(format_comparison_report(compare_power(samples, rider)))
