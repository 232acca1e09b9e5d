"""feedline: terminal line editing with double-press and paste-burst gestures."""

# Clipboard collaborator
from feedline.clipboard import (
    CLIPBOARD_ERROR_MESSAGE,
    get_image_from_clipboard,
    is_image_paste_supported,
    read_clipboard_image,
)

# Text cursor model
from feedline.cursor import TextCursor

# Key dispatch
from feedline.dispatch import InputCallbacks, KeyDispatcher, Rule

# Gesture detection
from feedline.double_press import DoublePress

# Feedback draft and payloads
from feedline.draft import (
    CommandOutcome,
    FeedbackDraft,
    FeedbackImage,
    FeedbackResult,
    normalize_pasted_text,
    parse_feedback_result,
)

# Errors
from feedline.errors import (
    ClipboardUnavailable,
    FeedbackTimeout,
    FeedlineError,
    MalformedPayload,
    TransportUnavailable,
    status_text,
)

# Key decoding
from feedline.keys import KeyEvent, parse_key_event

# Configuration
from feedline.options import TextInputOptions

# Paste coalescing
from feedline.paste import PasteBurstCoalescer

# Component
from feedline.text_input import TextInput

# Theme
from feedline.theme import Theme, get_theme, reset_theme, set_theme

__all__ = [
    # Clipboard
    "CLIPBOARD_ERROR_MESSAGE",
    "get_image_from_clipboard",
    "is_image_paste_supported",
    "read_clipboard_image",
    # Cursor
    "TextCursor",
    # Dispatch
    "InputCallbacks",
    "KeyDispatcher",
    "Rule",
    # Gestures
    "DoublePress",
    # Draft
    "CommandOutcome",
    "FeedbackDraft",
    "FeedbackImage",
    "FeedbackResult",
    "normalize_pasted_text",
    "parse_feedback_result",
    # Errors
    "ClipboardUnavailable",
    "FeedbackTimeout",
    "FeedlineError",
    "MalformedPayload",
    "TransportUnavailable",
    "status_text",
    # Keys
    "KeyEvent",
    "parse_key_event",
    # Options
    "TextInputOptions",
    # Paste
    "PasteBurstCoalescer",
    # Component
    "TextInput",
    # Theme
    "Theme",
    "get_theme",
    "reset_theme",
    "set_theme",
]
