from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

from algo_harness.api import run_algorithm
from algo_harness.configuration import RunParameters, build_parameters
from algo_harness.errors import ConfigError, ExitCode, HarnessError
from algo_harness.orchestration.registry import ImportPluginRegistry

logger = logging.getLogger("algo_harness.cli")

BUILTIN_ALGORITHMS = {
    "column_statistics": "plugins.column_statistics:ColumnStatisticsAlgorithm",
}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise ConfigError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="algo-harness",
        description="Configure and run a single profiling algorithm from the command line.",
    )
    parser.add_argument("--config", default=None, help="YAML file with default parameters")
    parser.add_argument(
        "-a", "--algorithm", default=None, help="algorithm class (package.module.Class) or alias"
    )
    parser.add_argument(
        "--file-key",
        "--input-key",
        "--table-key",
        dest="input_key",
        default=None,
        help="configuration key for the input files/tables",
    )
    parser.add_argument(
        "--files",
        "--inputs",
        "--tables",
        dest="inputs",
        nargs="+",
        default=None,
        help="input files/tables, or files listing them (prefixed with 'load:')",
    )
    parser.add_argument(
        "--algorithm-config",
        dest="algorithm_config",
        nargs="*",
        default=None,
        help="algorithm configuration parameters (<name>:<value>)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="how to output results "
        "(none/print/file[:run-ID]/file![:run-ID]/crate:<store>:<schema>)",
    )
    parser.add_argument(
        "--results-dir", default=None, help="directory for result files (default ./results)"
    )

    db = parser.add_argument_group("database inputs")
    db.add_argument(
        "--db-connection",
        default=None,
        help="a PGPASS file that specifies the database connection; "
        "if given, the inputs are treated as database tables",
    )
    db.add_argument(
        "--db-type", default=None, help="the type of database as it would appear in a URL"
    )

    files = parser.add_argument_group("file inputs")
    files.add_argument("--separator", default=None, help="separates fields in the input file")
    files.add_argument("--quote", default=None, help="delimits fields in the input file")
    files.add_argument("--escape", default=None, help="escapes special characters")
    files.add_argument(
        "--skip", dest="skip_lines", type=int, default=None, help="numbers of lines to skip"
    )
    files.add_argument(
        "--strict-quotes", action="store_true", default=None, help="enforce strict quotes"
    )
    files.add_argument(
        "--ignore-leading-spaces",
        action="store_true",
        default=None,
        help="ignore leading white spaces in each field",
    )
    files.add_argument("--header", action="store_true", default=None, help="first row is a header")
    files.add_argument(
        "--skip-differing-lines",
        action="store_true",
        default=None,
        help="skip lines with incorrect number of fields",
    )
    files.add_argument("--null", dest="null_string", default=None, help="representation of NULLs")

    temp = parser.add_argument_group("temp files")
    temp.add_argument("--temp", dest="temp_dir", default=None, help="directory for temp files")
    temp.add_argument(
        "--clear-temp",
        dest="clear_temp",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="delete temp files after the run (default: yes)",
    )

    experiment = parser.add_argument_group("experiment telemetry")
    experiment.add_argument(
        "--exp-key", dest="experiment", default=None, help="experiment to append the run to"
    )
    experiment.add_argument(
        "--exp-tags", dest="experiment_tags", nargs="*", default=None, help="experiment tags"
    )
    experiment.add_argument(
        "--exp-config",
        dest="experiment_config",
        nargs="*",
        default=None,
        help="extra experiment configuration (<name>:<value>)",
    )
    experiment.add_argument("--tracking-uri", default=None, help="MLflow tracking URI")

    parser.add_argument("--log-level", default=None, help="logging level (default INFO)")
    return parser


def parse_parameters(argv: Sequence[str] | None = None) -> RunParameters:
    args = build_parser().parse_args(argv)
    payload: dict[str, Any] = vars(args)
    config_path = payload.pop("config")
    return build_parameters(payload, config_path=config_path)


def main(argv: Sequence[str] | None = None) -> int:
    try:
        parameters = parse_parameters(argv)
    except ConfigError as exc:
        print(f"Could not parse command line args: {exc}", file=sys.stderr)
        build_parser().print_usage(sys.stderr)
        return int(ExitCode.ARGUMENT_ERROR)

    logging.basicConfig(
        level=parameters.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    registry = ImportPluginRegistry(aliases=BUILTIN_ALGORITHMS)

    try:
        report = run_algorithm(parameters, registry=registry)
    except HarnessError as exc:
        logger.error("%s", exc, exc_info=logger.isEnabledFor(logging.DEBUG))
        return int(exc.exit_code)

    if not report.succeeded:
        logger.error("Algorithm execution failed: %s", report.message)
    return int(report.exit_code)


if __name__ == "__main__":
    sys.exit(main())
