"""
Custom exceptions for the Legislative Red Team core.

Only two kinds of failure reach callers from parsing: MalformedInputError
(fatal to one parse call) and structural validation issues (non-fatal,
reported by USLMParser.validate). The graph and detector add phase and
cancellation errors.
"""
from typing import Optional


class RedTeamError(Exception):
    """Base exception for Legislative Red Team errors."""
    pass


class MalformedInputError(RedTeamError):
    """XML could not be tokenized at all."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class GraphSealedError(RedTeamError):
    """Mutation attempted on a graph that has entered its read-only phase."""
    pass


class DetectionCancelledError(RedTeamError):
    """Circular-reference traversal was cancelled by the caller."""
    pass
