from .core import commit_changes, Change, CommitSummary

__all__ = ["commit_changes", "Change", "CommitSummary"]
