"""
Error taxonomy.

All errors are local and recoverable by the caller. During normal play
the navigation machine never triggers them; seeing one means the
embedding layer misused a collaborator.
"""


class QuestError(Exception):
    """Base class for core errors."""


class InvalidStateError(QuestError):
    """Operation is not valid in the current state (double start, answer after end)."""


class InvalidSpecError(QuestError):
    """A SessionSpec is malformed (no prompts, bad sizing)."""


class NotFoundError(QuestError):
    """A referenced prompt or session does not exist."""
