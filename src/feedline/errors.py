"""Errors raised by the editor's collaborators.

The editing core itself never raises; these cover the feedback session and
the clipboard reader. None of them is fatal to the editor, the host shows
``status_text(exc)`` and keeps accepting input.
"""

from __future__ import annotations


class FeedlineError(Exception):
    """Base class for collaborator failures."""


class FeedbackTimeout(FeedlineError):
    """The feedback session did not answer in time."""


class TransportUnavailable(FeedlineError):
    """The feedback session could not be reached."""


class MalformedPayload(FeedlineError):
    """A feedback payload did not have the expected shape."""


class ClipboardUnavailable(FeedlineError):
    """The clipboard held no image or could not be read."""


def status_text(exc: BaseException) -> str:
    """Return the one-line status message for a collaborator error."""
    detail = str(exc)
    if isinstance(exc, FeedbackTimeout):
        prefix = "Timed out waiting for feedback"
    elif isinstance(exc, TransportUnavailable):
        prefix = "Feedback session unavailable"
    elif isinstance(exc, MalformedPayload):
        prefix = "Received malformed feedback payload"
    elif isinstance(exc, ClipboardUnavailable):
        prefix = "Clipboard unavailable"
    else:
        prefix = "Unexpected error"
    return f"{prefix}: {detail}" if detail else prefix
