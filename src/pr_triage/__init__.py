"""
PR Triage

GitHub Pull Request 변경 내용 기반 자동 라벨링 액션
"""

__version__ = "1.0.0"

from .runner import TriageRunner
from .triage import DiffClassifier, classify, reconcile

__all__ = ["TriageRunner", "DiffClassifier", "classify", "reconcile"]
