"""
GitHub API Client

Handles GitHub API authentication, rate limit bookkeeping and the label
update calls for pull requests.
"""

import logging
from typing import Dict, List, Optional
from datetime import datetime
import requests

from ..models.triage import ReconciliationResult


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data

    @property
    def is_client_error(self) -> bool:
        """True for 4xx responses."""
        return self.status_code is not None and 400 <= self.status_code < 500


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client for pull request labels.

    Requests are never retried: a failed call ends the invocation and the
    next pull request event will label the PR again.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        api_version: str = "v3",
        timeout_seconds: int = 30,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub token
            base_url: GitHub API base URL (default: https://api.github.com)
            api_version: REST API version used in the Accept header
            timeout_seconds: Per-request timeout
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self.session = self._create_session()
        self.rate_limit_remaining: Optional[int] = None
        self.rate_limit_reset: Optional[datetime] = None

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with authentication headers."""
        session = requests.Session()
        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': f'application/vnd.github.{self.api_version}+json',
            'User-Agent': 'PR-Triage/1.0'
        })
        return session

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, PUT, ...)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API and transport errors
            RateLimitExceeded: When rate limit is exceeded
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout_seconds)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

        self._update_rate_limit(response)

        if response.status_code == 429:
            raise RateLimitExceeded(self.rate_limit_reset or datetime.now())

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def add_labels(self, owner: str, repo: str, number: int, labels: List[str]) -> List[Dict]:
        """
        Add labels to an issue or pull request.

        Returns:
            Labels of the issue after the update
        """
        logger.info(f"Adding labels to PR #{number} on {owner}/{repo}: {', '.join(repr(l) for l in labels)}...")

        # POST adds; PUT on this URL would replace every existing label
        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{number}/labels',
            json={'labels': list(labels)}
        )
        return response.json()

    def replace_labels(self, owner: str, repo: str, number: int, labels: List[str]) -> List[Dict]:
        """
        Replace all labels of an issue or pull request.

        Returns:
            Labels of the issue after the update
        """
        logger.info(f"Replacing labels of PR #{number} on {owner}/{repo}: {', '.join(repr(l) for l in labels)}...")

        response = self._make_request(
            'PUT',
            f'/repos/{owner}/{repo}/issues/{number}/labels',
            json={'labels': list(labels)}
        )
        return response.json()

    def apply(self, owner: str, repo: str, number: int, result: ReconciliationResult) -> List[Dict]:
        """Send a reconciliation result with the matching endpoint."""
        if result.replace:
            return self.replace_labels(owner, repo, number, list(result.labels))
        return self.add_labels(owner, repo, number, list(result.labels))
