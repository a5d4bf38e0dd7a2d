"""
Git Integration Layer

Working tree operations needed to diff and merge-test pull requests.
"""

from .repository import GitRepository, GitCommandError

__all__ = ['GitRepository', 'GitCommandError']
