"""Entry point to the Dynatrace CI reporter.

This source file contains entry point to the reporter. It is implemented in
the main() function.
"""

import asyncio
import logging
from argparse import ArgumentParser
from collections.abc import Sequence
from typing import Optional

from pydantic import ValidationError
from rich.logging import RichHandler

import constants
from configuration import configuration
from log import get_logger
from models.config import Configuration, FailurePolicy
from models.records import Event, Metric
from observability.dynatrace import DeliveryReport, send_events, send_metrics
from utils.checks import InvalidConfigurationError
from utils.records import load_records
from version import __version__

FORMAT = "%(message)s"
logging.basicConfig(
    level="INFO", format=FORMAT, datefmt="[%X]", handlers=[RichHandler()]
)

logger = get_logger(__name__)


def create_argument_parser() -> ArgumentParser:
    """Create and configure argument parser object.

    The parser includes these options:
    - -v / --verbose: enable verbose output
    - -d / --dump-configuration: dump the loaded configuration to JSON and exit
    - -c / --config: path to the configuration file
    - -r / --records: path to the YAML file with metrics and events
    - --version: print reporter version and exit
    - --strict: fail with exit status 1 when any delivery fails

    Returns:
        Configured ArgumentParser for parsing the reporter CLI options.
    """
    parser = ArgumentParser(description="Report CI metrics and events to Dynatrace")
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        help="make it verbose",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "-d",
        "--dump-configuration",
        dest="dump_configuration",
        help="dump actual configuration into JSON file and quit",
        action="store_true",
        default=False,
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config_file",
        help=f"path to configuration file (default: {constants.DEFAULT_CONFIGURATION_FILE})",
        default=constants.DEFAULT_CONFIGURATION_FILE,
    )
    parser.add_argument(
        "-r",
        "--records",
        dest="records_file",
        help="path to YAML file with metrics and events to report",
        default=None,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--strict",
        dest="strict",
        help="exit with status 1 when any metric or event could not be delivered",
        action="store_true",
        default=False,
    )
    return parser


async def report(
    config: Configuration,
    token: str,
    metrics: Sequence[Metric],
    events: Sequence[Event],
    policy: FailurePolicy,
) -> Optional[DeliveryReport]:
    """Send metrics and events according to the configuration.

    The metric and event pipelines run concurrently; each of them sends its
    own requests one after another.

    Returns:
        Optional[DeliveryReport]: Merged report of both pipelines for the
        aggregate policy, None otherwise.
    """
    dynatrace = config.dynatrace
    pipelines = []
    if config.delivery.send_metrics and metrics:
        pipelines.append(
            send_metrics(
                dynatrace.base_url,
                token,
                metrics,
                policy=policy,
                timeout=dynatrace.timeout,
                verify_ssl=dynatrace.verify_ssl,
            )
        )
    if config.delivery.send_events and events:
        pipelines.append(
            send_events(
                dynatrace.base_url,
                token,
                events,
                policy=policy,
                timeout=dynatrace.timeout,
                verify_ssl=dynatrace.verify_ssl,
            )
        )
    if not pipelines:
        logger.info("Nothing to report")

    results = await asyncio.gather(*pipelines)
    if policy is not FailurePolicy.AGGREGATE:
        return None

    merged = DeliveryReport()
    for result in results:
        if result is not None:
            merged = merged.merge(result)
    return merged


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point to the reporter.

    Parses command-line arguments, loads the configuration and then:
    - If --dump-configuration is provided, writes the active configuration to
      configuration.json and exits (exits with status 1 on failure).
    - Otherwise, loads the records file and sends its metrics and events to
      Dynatrace. Delivery failures are only logged unless --strict is given.

    Raises:
        SystemExit: when configuration or records can not be loaded, when
                    configuration dumping fails, or in strict mode when a
                    delivery failed (exits with status 1).
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)

    try:
        configuration.load_configuration(args.config_file)
    except (OSError, ValidationError, InvalidConfigurationError) as e:
        logger.error("Failed to load configuration: %s", e)
        raise SystemExit(1) from e
    logger.info(
        "Reporter %s startup (v%s)", configuration.configuration.name, __version__
    )

    # -d or --dump-configuration CLI flags are used to dump the actual configuration
    # to a JSON file w/o doing any other operation
    if args.dump_configuration:
        try:
            configuration.configuration.dump()
            logger.info("Configuration dumped to configuration.json")
        except Exception as e:
            logger.error("Failed to dump configuration: %s", e)
            raise SystemExit(1) from e
        return

    if args.records_file is None:
        parser.error("the following argument is required: -r/--records")

    try:
        metrics, events = load_records(args.records_file)
        token = configuration.dynatrace_configuration.api_token
    except (OSError, ValidationError, InvalidConfigurationError) as e:
        logger.error("Failed to prepare report: %s", e)
        raise SystemExit(1) from e

    policy = (
        FailurePolicy.AGGREGATE
        if args.strict
        else configuration.delivery_configuration.failure_policy
    )
    delivery_report = asyncio.run(
        report(configuration.configuration, token, metrics, events, policy)
    )

    if delivery_report is not None:
        logger.info(
            "Delivered %d of %d requests, %d events skipped",
            len(delivery_report.outcomes) - len(delivery_report.failed),
            len(delivery_report.outcomes),
            delivery_report.skipped,
        )
        if args.strict and not delivery_report.ok:
            logger.error("%d deliveries failed", len(delivery_report.failed))
            raise SystemExit(1)
    logger.info("Reporter %s finished", configuration.configuration.name)


if __name__ == "__main__":
    main()
