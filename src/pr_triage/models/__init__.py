"""
Data Models

PR 트리아지 시스템의 핵심 데이터 모델들
"""

from .labels import LabelKey, LABEL_CATALOG, CONFLICTS_LABEL, display_name, display_names
from .event import PullRequestEvent, TRIAGE_ACTIONS
from .triage import UpdateMode, ReconciliationResult, TriageOutcome, TriageReport

__all__ = [
    "LabelKey",
    "LABEL_CATALOG",
    "CONFLICTS_LABEL",
    "display_name",
    "display_names",
    "PullRequestEvent",
    "TRIAGE_ACTIONS",
    "UpdateMode",
    "ReconciliationResult",
    "TriageOutcome",
    "TriageReport",
]
