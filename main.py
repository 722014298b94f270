"""slowlog: analyse MySQL slow query logs.

Reads time and query_time fields, adds time_start (time - query_time) and
query_length, sorts, and prints the records as JSON.
"""

import logging
import sys
from argparse import ArgumentParser

from slowlog.assembler import ingest
from slowlog.config import Config
from slowlog.errors import ConfigurationError, InputReadError
from slowlog.formatter import FORMATS, get_formatter
from slowlog.reader import read_file
from slowlog.sorter import parse_sort_spec, sort_records

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [SLOWLOG] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

__version__ = "1.0.0"


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="slowlog",
        description="Parse a MySQL slow query log into sorted JSON records.",
    )
    parser.add_argument(
        "-f", "--file",
        help="Log file to read, '-' for stdin (default: /dev/stdin)",
    )
    parser.add_argument(
        "-s", "--sort",
        help="Comma-separated sort rules, e.g. rows_read:desc,rows_sent:asc. "
             "Applied in order, so the last rule dominates (default: time_start:asc)",
    )
    parser.add_argument(
        "-o", "--output",
        choices=FORMATS,
        help="Output format (default: json)",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to YAML config file (default: $SLOWLOG_CONFIG)",
    )
    parser.add_argument(
        "--log-level",
        help="Diagnostic log level on stderr (default: WARNING)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def run(args) -> int:
    """Parse, sort and print. Returns the process exit code."""
    try:
        config = Config(args.config)
        level = str(args.log_level or config["logging"]["level"]).upper()
        logging.getLogger().setLevel(level)

        rules = config.rule_table()
        sort_keys = parse_sort_spec(args.sort or config["sort"])
    except (ConfigurationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    path = args.file or config["input"]["file"]
    lines = read_file(path, config["input"]["chunk_size"])

    try:
        result = ingest(lines, rules, config["query"]["separator"])
    except InputReadError as e:
        logger.error("%s", e)
        return 1

    for warning in result.warnings:
        logger.warning("%s", warning)
    logger.info("Parsed %d records, %d field warnings", len(result.records), len(result.warnings))

    records = sort_records(result.records, sort_keys)

    output_format = args.output or config["output"]["format"]
    formatter = get_formatter(output_format)
    print(formatter(records, config["output"]["indent"]))
    return 0


def main():
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(run(args))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
