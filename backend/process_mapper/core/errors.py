"""Domain exceptions for the process map engine.

Nothing here is fatal to a request on its own: generator errors are recovered
inside the pipeline, and the API layer translates the rest into HTTP errors.
"""

from __future__ import annotations


class ProcessMapError(Exception):
    """Base class for all process map errors."""


class GeneratorUnavailableError(ProcessMapError):
    """Raised when the generative adapter cannot produce a response."""


class MalformedPayloadError(ProcessMapError):
    """Raised when generator output cannot be parsed into a process map."""


class InvalidTransitionError(ProcessMapError):
    """Raised when a mapping session is asked for a step its state forbids."""

    def __init__(self, current: str, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Cannot {action} while session is in state '{current}'")


class SessionNotFoundError(ProcessMapError):
    """Raised when a session id is unknown to the store."""


class ProcessNotFoundError(ProcessMapError):
    """Raised when a process id does not exist in the map."""


class DuplicateProcessNameError(ProcessMapError):
    """Raised when an edit would give two processes the same name."""
