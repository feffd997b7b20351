"""
Error Taxonomy
==============
Every failure the editor can hit is one of these. None of them is fatal:
the view reports the message and the session stays usable.
"""
from typing import Optional


class ArtifactError(Exception):
    """Base class for all editor errors."""


class ValidationError(ArtifactError):
    """A picked file has the wrong type or extension. The user must re-pick."""

    def __init__(self, reason: str, filename: Optional[str] = None) -> None:
        self.reason = reason
        self.filename = filename
        if filename:
            super().__init__(f"{filename}: {reason}")
        else:
            super().__init__(reason)


class IncompleteCompositeError(ArtifactError):
    """Save or publish was attempted without both layers."""

    def __init__(self, message: str = "Please add 2D and 3D layers") -> None:
        super().__init__(message)


class SceneLoadError(ArtifactError):
    """A 3D container could not be loaded. The layer is treated as not set."""


class TransportError(ArtifactError):
    """Network or backend failure on save, list or publish."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


class InvalidTransitionError(ArtifactError):
    """The editor state machine does not allow this operation in the current mode."""


class RequestInFlightError(ArtifactError):
    """A save or publish of the current composite is already pending."""
