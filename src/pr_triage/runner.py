"""
Triage Runner

Orchestrates one pull request event: resolves the head commit, classifies
the diff against the base branch, checks for merge conflicts and sends the
reconciled labels to GitHub.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from .config import AppConfig
from .git.repository import GitRepository
from .github.client import GitHubClient, GitHubAPIError
from .github.event import EventPayloadError, read_event_payload, parse_event
from .models.event import PullRequestEvent, TRIAGE_ACTIONS
from .models.triage import TriageOutcome, TriageReport
from .triage.classifier import DiffClassifier
from .triage.reconciler import reconcile


logger = logging.getLogger(__name__)

SECRET_ENV_MARKERS = ('TOKEN', 'SECRET', 'PASSWORD', 'KEY')


def _masked_environ() -> Dict[str, str]:
    return {
        name: '***' if any(marker in name.upper() for marker in SECRET_ENV_MARKERS) else value
        for name, value in sorted(os.environ.items())
    }


class TriageRunner:
    """
    Runs the triage pipeline for a single pull request event.

    Neutral outcomes (irrelevant event, raced head commit, nothing to label,
    4xx from GitHub) are returned as reports; anything else raises.
    """

    def __init__(
        self,
        config: AppConfig,
        repository: Optional[GitRepository] = None,
        client: Optional[GitHubClient] = None,
        classifier: Optional[DiffClassifier] = None,
    ):
        """
        Initialize triage runner.

        Args:
            config: Validated application configuration
            repository: Working tree wrapper (built from config if omitted)
            client: GitHub API client (built from config if omitted)
            classifier: Diff classifier
        """
        self.config = config
        self.repository = repository or GitRepository(
            repo_path=config.git.repo_path,
            remote=config.git.remote,
            merge_user_name=config.git.merge_user_name,
            merge_user_email=config.git.merge_user_email,
            timeout_seconds=config.git.timeout_seconds,
        )
        self.client = client or GitHubClient(
            token=config.github.token,
            base_url=config.github.api_base_url,
            api_version=config.github.api_version,
            timeout_seconds=config.github.timeout_seconds,
        )
        self.classifier = classifier or DiffClassifier()

    def run(self) -> TriageReport:
        """Load the event file and triage it."""
        if not self.config.event.event_path:
            raise EventPayloadError("GITHUB_EVENT_PATH is not set")
        payload = read_event_payload(self.config.event.event_path)
        if self.config.debug:
            logger.debug(f"Event payload:\n{json.dumps(payload, indent=2)}")
            logger.debug(f"Environment:\n{json.dumps(_masked_environ(), indent=2)}")
        return self.triage(payload)

    def triage(self, payload: Dict[str, Any]) -> TriageReport:
        """
        Triage a decoded event payload.

        Args:
            payload: GitHub pull_request event

        Returns:
            TriageReport with SUCCESS or NEUTRAL outcome
        """
        # Only opened / synchronize events carry code changes, other events
        # need not be pull request payloads at all
        action = payload.get('action')
        if action not in TRIAGE_ACTIONS:
            return self._neutral(f"Ignoring '{action}' event")

        event = parse_event(payload)

        head = self.resolve_head(event)
        if head is None:
            return self._neutral(
                f"Head of PR #{event.number} moved since the event was sent, "
                "leaving it to the next event"
            )

        base_ref = self.config.git.base_ref
        self.repository.checkout(base_ref)

        changed_files = self.repository.changed_files(base_ref, head)
        derived = self.classifier.classify(
            changed_files,
            diff_provider=lambda path: self.repository.file_diff(base_ref, head, path),
            exists=lambda path: self.repository.exists_at(base_ref, path),
        )

        conflicts = self.repository.has_conflicts(head)
        result = reconcile(derived, conflicts, event.labels)

        if result.is_noop:
            return TriageReport(
                outcome=TriageOutcome.NEUTRAL,
                reason=self._log_neutral(f"No labels added to PR #{event.number}."),
                result=result,
                changed_files=tuple(changed_files),
            )

        try:
            self.client.apply(event.owner, event.repo, event.number, result)
        except GitHubAPIError as e:
            if not e.is_client_error:
                raise
            return TriageReport(
                outcome=TriageOutcome.NEUTRAL,
                reason=self._log_neutral(f"HTTP Response: {e.status_code}"),
                result=result,
                changed_files=tuple(changed_files),
            )

        verb = "Replaced" if result.replace else "Added"
        return TriageReport(
            outcome=TriageOutcome.SUCCESS,
            reason=f"{verb} labels of PR #{event.number} on {event.full_name}",
            result=result,
            changed_files=tuple(changed_files),
        )

    def resolve_head(self, event: PullRequestEvent) -> Optional[str]:
        """
        Return the commit to triage, or None when the event is stale.

        GITHUB_SHA is the PR head only when the branch lives in the base
        repository. For forks it points somewhere else, so the real head is
        fetched from refs/pull/<n>/head. If that differs from the event's
        head, the branch was force-pushed meanwhile and a newer synchronize
        event will follow.
        """
        if event.head_sha == self.config.event.sha:
            return event.head_sha

        logger.info(f"GITHUB_SHA {self.config.event.sha} is not the PR head {event.head_sha}")
        fetched = self.repository.fetch_pull_head(event.number)
        if fetched != event.head_sha:
            logger.warning(f"Fetched PR head {fetched} does not match event head {event.head_sha}")
            return None
        return event.head_sha

    def _neutral(self, reason: str) -> TriageReport:
        return TriageReport(outcome=TriageOutcome.NEUTRAL, reason=self._log_neutral(reason))

    @staticmethod
    def _log_neutral(reason: str) -> str:
        logger.info(reason)
        return reason
