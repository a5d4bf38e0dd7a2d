"""
GitHub Integration Layer

This module provides the event payload loader and the GitHub API client
used to update pull request labels.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .event import EventPayloadError, parse_event, read_event_payload

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'RateLimitExceeded',
    'EventPayloadError',
    'parse_event',
    'read_event_payload',
]
