"""Revision-history access and change selection."""

from .changes import ChangeSelection, ChangeSelector, SelectionState
from .history import GitError, GitHistory

__all__ = ["ChangeSelection", "ChangeSelector", "GitError", "GitHistory", "SelectionState"]
