"""
Command line entry point

Runs the triage for the event GitHub Actions hands to the container and
maps the outcome to an exit code (0 success, 78 neutral, 1 failure).
"""

import argparse
import logging
from typing import Optional, Sequence

from .config import AppConfig, ConfigManager, ConfigurationError
from .models.triage import TriageOutcome
from .runner import TriageRunner


logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pr-triage",
        description="Label a pull request from its diff.",
    )
    parser.add_argument("--config", help="YAML config file (defaults to environment variables).")
    parser.add_argument("--event-path", help="Event payload JSON (overrides GITHUB_EVENT_PATH).")
    parser.add_argument("--sha", help="Ambient commit (overrides GITHUB_SHA).")
    parser.add_argument("--repo-path", help="Working tree of the base repository.")
    parser.add_argument("--base-ref", help="Base branch ref to diff against (default: origin/master).")
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Dump the event payload and environment and log at DEBUG level.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    config = AppConfig.from_yaml(args.config) if args.config else AppConfig.from_env()
    manager = ConfigManager(config)
    manager.update_config(**{
        'event.event_path': args.event_path,
        'event.sha': args.sha,
        'git.repo_path': args.repo_path,
        'git.base_ref': args.base_ref,
        'debug': args.debug,
    })

    try:
        config = manager.validate()
    except ConfigurationError as e:
        logger.error(str(e))
        return TriageOutcome.NEUTRAL.value

    try:
        report = TriageRunner(config).run()
    except Exception:
        logger.exception("Triage failed")
        return TriageOutcome.FAILURE.value

    logger.info(f"{report.outcome.name}: {report.reason}")
    return report.exit_code
