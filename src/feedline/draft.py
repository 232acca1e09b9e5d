"""Feedback draft: pasted text blocks, pasted images and slash commands.

The draft collects everything the user attaches before pressing Enter and
turns the final submission into the payload the feedback session expects::

    {"interactive_feedback": "...", "images": [{"name": "...", "data": "..."}]}
"""

from __future__ import annotations

import json
import re
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from feedline.errors import MalformedPayload

DEFAULT_FEEDBACK = "User submitted feedback"

HELP_TEXT = """\
BASIC USAGE:
  Type your feedback message (supports multiple lines)
  Press Opt+Enter for a new line, Enter to submit

KEYBOARD SHORTCUTS:
  Ctrl+C     Press twice to exit
  Escape     Press twice to clear the input
  Opt+Enter  Insert new line
  Enter      Submit feedback
  Ctrl+V     Paste image from clipboard

COMMANDS:
  /help      Show this help message
  /paste     Paste image from clipboard (/img, /image)
  /d1, /d2   Delete pasted text #1, #2, ...
  /i1, /i2   Delete image #1, #2, ..."""

_PASTE_COMMANDS = frozenset({"/paste", "/img", "/image"})
_DELETE_TEXT_RE = re.compile(r"^/d(\d+)$")
_DELETE_IMAGE_RE = re.compile(r"^/i(\d+)$")
_WHITESPACE_RUN_RE = re.compile(r"\s+")
_NEWLINE_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class PastedText:
    content: str
    timestamp: float


@dataclass(frozen=True)
class FeedbackImage:
    name: str
    data: str


@dataclass
class FeedbackResult:
    """Feedback text plus attached images, as exchanged with the session."""

    feedback_text: str
    images: list[FeedbackImage] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "interactive_feedback": self.feedback_text,
            "images": [{"name": img.name, "data": img.data} for img in self.images],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False)


@dataclass
class CommandOutcome:
    """What a slash command did. ``status`` is shown on the status line."""

    handled: bool
    status: str = ""
    help_text: str | None = None
    request_image_paste: bool = False


def normalize_pasted_text(text: str) -> str:
    """Trim, drop blank lines, collapse whitespace and join with a literal ``\\n``."""
    lines = (line.strip() for line in _NEWLINE_RE.split(text.strip()))
    return "\\n".join(_WHITESPACE_RUN_RE.sub(" ", line) for line in lines if line)


def parse_feedback_result(payload: Any) -> FeedbackResult:
    """Validate a decoded feedback payload.

    Raises:
        MalformedPayload: If required fields are missing or mistyped.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            raise MalformedPayload(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedPayload("payload must be an object")

    text = payload.get("interactive_feedback")
    if not isinstance(text, str):
        raise MalformedPayload("'interactive_feedback' must be a string")

    raw_images = payload.get("images") or []
    if not isinstance(raw_images, list):
        raise MalformedPayload("'images' must be a list")

    images: list[FeedbackImage] = []
    for index, item in enumerate(raw_images):
        if not isinstance(item, dict):
            raise MalformedPayload(f"image #{index + 1} must be an object")
        name, data = item.get("name"), item.get("data")
        if not isinstance(name, str) or not isinstance(data, str):
            raise MalformedPayload(f"image #{index + 1} needs string 'name' and 'data'")
        images.append(FeedbackImage(name=name, data=data))

    return FeedbackResult(feedback_text=text, images=images)


class FeedbackDraft:
    """Attachments gathered alongside the typed feedback."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self.pasted_texts: list[PastedText] = []
        self.images: list[FeedbackImage] = []

    def add_pasted_text(self, text: str) -> str:
        """Store a normalized paste and return the status message."""
        content = normalize_pasted_text(text)
        self.pasted_texts.append(PastedText(content=content, timestamp=self._clock()))
        return (
            f"Text pasted ({len(content)} characters). "
            "Content will be included when you submit."
        )

    def add_image(self, data: str) -> str:
        """Store a base64 PNG and return the status message."""
        self.images.append(FeedbackImage(name=f"image_{len(self.images) + 1}.png", data=data))
        return f"Image pasted successfully! ({len(self.images)} images total)"

    def handle_command(self, value: str) -> CommandOutcome:
        """Run *value* as a slash command if it is one."""
        if value == "/help":
            return CommandOutcome(handled=True, help_text=HELP_TEXT)

        if value in _PASTE_COMMANDS:
            return CommandOutcome(handled=True, request_image_paste=True)

        match = _DELETE_TEXT_RE.match(value)
        if match:
            index = int(match.group(1)) - 1
            if 0 <= index < len(self.pasted_texts):
                del self.pasted_texts[index]
                return CommandOutcome(handled=True, status=f"Deleted pasted content #{index + 1}")
            return CommandOutcome(
                handled=True,
                status=f"Invalid paste number. Available: 1-{len(self.pasted_texts)}",
            )

        match = _DELETE_IMAGE_RE.match(value)
        if match:
            index = int(match.group(1)) - 1
            if 0 <= index < len(self.images):
                del self.images[index]
                return CommandOutcome(handled=True, status=f"Deleted image #{index + 1}")
            return CommandOutcome(
                handled=True,
                status=f"Invalid image number. Available: 1-{len(self.images)}",
            )

        return CommandOutcome(handled=False)

    def build_submission(self, value: str) -> FeedbackResult:
        """Combine the typed *value* with every attachment."""
        combined = value
        if self.pasted_texts:
            pasted = "\n\n".join(p.content for p in self.pasted_texts)
            combined = f"{value}\n\n{pasted}"
        return FeedbackResult(
            feedback_text=combined or DEFAULT_FEEDBACK,
            images=list(self.images),
        )

    def clear(self) -> None:
        self.pasted_texts.clear()
        self.images.clear()
