"""
Pull Request Event Loader

Reads the GitHub Actions event payload and turns it into a validated
PullRequestEvent.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from ..models.event import PullRequestEvent


logger = logging.getLogger(__name__)


class EventPayloadError(Exception):
    """Event payload is missing, unreadable or malformed"""


def read_event_payload(event_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read the raw event JSON.

    Args:
        event_path: Path of the event file (GITHUB_EVENT_PATH)

    Returns:
        Decoded payload
    """
    path = Path(event_path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        raise EventPayloadError(f"Cannot read event payload {path}: {e}") from e

    if not isinstance(payload, dict):
        raise EventPayloadError(f"Event payload must be a JSON object: {path}")
    return payload


def parse_event(payload: Dict[str, Any]) -> PullRequestEvent:
    """
    Extract the pull request fields needed for triage.

    Raises:
        EventPayloadError: When a required field is missing or invalid
    """
    try:
        event = PullRequestEvent.from_payload(payload)
    except (KeyError, TypeError) as e:
        raise EventPayloadError(f"Missing field in event payload: {e}") from e
    except ValidationError as e:
        raise EventPayloadError(f"Invalid event payload: {e}") from e

    logger.debug(f"Parsed {event.action} event for {event.full_name}#{event.number}")
    return event

