"""
Git command execution used alongside manifest edits.
"""

from .git_runner import CommandResult, GitCommandRunner

__all__ = ["CommandResult", "GitCommandRunner"]
