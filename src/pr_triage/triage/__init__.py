"""
Triage Engine

Diff classification and label reconciliation for pull requests.
"""

from .classifier import DiffClassifier, classify
from .reconciler import reconcile

__all__ = ['DiffClassifier', 'classify', 'reconcile']
