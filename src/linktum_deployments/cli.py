"""Command-line entry point for linktum-deployments library."""

import logging
import sys

from .config import DeployConfig
from .constants import DEFAULT_TARGETS
from .exceptions import ConfigurationError
from .rpc import JsonRpcClient
from .sequencer import DeploymentSequencer
from .types import DeploymentReport

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def report_failure(report: DeploymentReport) -> None:
    """Print the error and any completed deployments to stderr."""
    error = report.error
    print(f"Deployment failed: {error}", file=sys.stderr)
    if error.__cause__ is not None:
        print(f"Caused by: {error.__cause__!r}", file=sys.stderr)
    if report.failed_target is not None:
        print(f"Failed while deploying {report.failed_target.name}", file=sys.stderr)
    for result in report.results:
        print(f"{result.target.name} deployed at {result.address}", file=sys.stderr)


def main() -> int:
    """
    Deploy TokenICO and LINKTUM with configuration from the environment.

    Returns:
        Process exit code: 0 if every contract deployed, 1 otherwise
    """
    try:
        config = DeployConfig.from_env()
    except ConfigurationError as e:
        print(f"Deployment failed: {e}", file=sys.stderr)
        return 1

    configure_logging(config.log_level)

    with JsonRpcClient(config.rpc_url, timeout=config.request_timeout) as rpc:
        report = DeploymentSequencer(config, rpc=rpc).execute(DEFAULT_TARGETS)

    if not report.ok:
        report_failure(report)
    return report.exit_code


def run() -> None:
    sys.exit(main())
