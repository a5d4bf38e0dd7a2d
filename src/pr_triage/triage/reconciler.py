"""
Label Reconciler

Merges derived labels with the labels already on a pull request and
decides between adding labels and replacing all of them.
"""

import logging
from typing import Iterable

from ..models.labels import LabelKey, CONFLICTS_LABEL, display_names
from ..models.triage import ReconciliationResult, UpdateMode


logger = logging.getLogger(__name__)


def reconcile(
    derived: Iterable[LabelKey],
    conflict_detected: bool,
    current_labels: Iterable[str],
) -> ReconciliationResult:
    """
    Compute the label update for a pull request.

    The conflicts label is the only one ever removed: GitHub's add endpoint
    cannot remove labels, so a resolved conflict switches to replace mode and
    carries every other current label forward. All other labels are strictly
    additive, even when a later push drops the change that triggered them.

    Args:
        derived: Label keys produced by the classifier
        conflict_detected: Whether the PR currently conflicts with base
        current_labels: Label names already attached to the PR

    Returns:
        ReconciliationResult (no-op when there is nothing to send)
    """
    current = set(label for label in current_labels if label)
    labels = set(display_names(derived))
    replace = False

    if conflict_detected:
        logger.info("Pull request with conflicts")
        labels.add(CONFLICTS_LABEL)
    elif CONFLICTS_LABEL in current:
        logger.info("Pull request doesn't have conflicts anymore")
        replace = True

    if replace:
        labels |= current - {CONFLICTS_LABEL}
        return ReconciliationResult.build(UpdateMode.REPLACE, labels)

    # Skip labels that are already set so a fully-labelled PR needs no request
    return ReconciliationResult.build(UpdateMode.ADD, labels - current)
