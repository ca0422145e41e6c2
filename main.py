"""k6-result-comparer — turn k6 summaries into a CSV, charts and a comparison."""

import logging
import sys
from argparse import ArgumentParser

from k6_comparer.batch import NoDataError, process_sources
from k6_comparer.config import load_config, load_yaml_config
from k6_comparer.table import load_results, write_csv

logger = logging.getLogger("k6_comparer.main")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="k6-compare",
        description="Parse k6 summary output and compare results across environments.",
    )
    parser.add_argument(
        "--config",
        help="Optional YAML config file",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: INFO, or LOG_LEVEL env var)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    parse_cmd = sub.add_parser("parse", help="Parse k6 .txt output folders into a CSV")
    parse_cmd.add_argument(
        "folders",
        nargs="*",
        help="Source folders; the folder name becomes the Source column",
    )
    parse_cmd.add_argument(
        "-o", "--output",
        dest="output_csv",
        help="Output CSV path (default: k6_comparison_results.csv)",
    )
    parse_cmd.add_argument(
        "--pattern",
        help="File glob inside each folder (default: *.txt)",
    )

    report_cmd = sub.add_parser("report", help="Summarise and chart a result CSV")
    report_cmd.add_argument(
        "csv",
        help="Result CSV written by the parse command",
    )
    report_cmd.add_argument(
        "--plots",
        help="Directory for PNG charts (default: K6Plots)",
    )
    report_cmd.add_argument(
        "--no-charts",
        action="store_true",
        help="Skip chart rendering",
    )
    report_cmd.add_argument(
        "--compare-filter",
        help="Only compare sources whose name contains this text",
    )
    report_cmd.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Summary format (default: text)",
    )
    return parser


def run_parse(config) -> int:
    if not config.sources:
        print("Error: no source folders given", file=sys.stderr)
        return 1
    try:
        result = process_sources(config.sources, config.file_pattern, config.strip_prefixes)
    except NoDataError as exc:
        logger.error("%s. Exiting.", exc)
        return 1

    try:
        write_csv(config.output_csv, result.rows)
    except OSError as exc:
        logger.error("Error writing CSV file %s: %s", config.output_csv, exc)
        return 1
    print(f"Processed {len(result.processed_files)} files.")
    print(f"Successfully wrote results to {config.output_csv}")
    return 0


def run_report(args, config) -> int:
    from k6_comparer.compare import build_report, format_report_json, format_report_text

    try:
        rows = load_results(args.csv)
    except FileNotFoundError:
        logger.error("CSV file not found at '%s'", args.csv)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Error reading CSV file '%s': %s", args.csv, exc)
        return 1

    if not rows:
        logger.error("No results loaded from %s", args.csv)
        return 1
    logger.info("Loaded %d data points", len(rows))

    if not args.no_charts:
        from k6_comparer.charts import generate_charts
        try:
            written = generate_charts(rows, config.plot_dir, config.color_groups)
        except OSError as exc:
            logger.error("Cannot create chart directory %s: %s", config.plot_dir, exc)
        else:
            logger.info("Saved %d charts to %s", len(written), config.plot_dir)

    reports = build_report(rows, config.compare_filter)
    if args.output == "json":
        print(format_report_json(reports))
    else:
        print(format_report_text(reports, config.compare_filter))
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    yaml_data = load_yaml_config(args.config)
    config = load_config(args, yaml_data)
    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    if args.command == "parse":
        return run_parse(config)
    return run_report(args, config)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
