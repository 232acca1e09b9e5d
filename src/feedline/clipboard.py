"""Reading PNG images from the system clipboard.

Only macOS is supported: the image is written out with ``osascript`` and
read back as base64.
"""

from __future__ import annotations

import base64
import logging
import subprocess
import sys
import tempfile
from pathlib import Path

from feedline.errors import ClipboardUnavailable

logger = logging.getLogger(__name__)

CLIPBOARD_ERROR_MESSAGE = (
    "No image data in clipboard. Please copy an image first "
    "(e.g., use Cmd+Shift+4 to screenshot to clipboard)"
)

_PROBE_SCRIPT = "the clipboard as «class PNGf»"


def is_image_paste_supported() -> bool:
    return sys.platform == "darwin"


def _write_script(path: Path) -> list[str]:
    return [
        "osascript",
        "-e",
        "set png_data to (the clipboard as «class PNGf»)",
        "-e",
        f'set fp to open for access POSIX file "{path}" with write permission',
        "-e",
        "write png_data to fp",
        "-e",
        "close access fp",
    ]


def read_clipboard_image() -> str:
    """Return the clipboard image as base64 PNG data.

    Raises:
        ClipboardUnavailable: On unsupported platforms, when the clipboard
            holds no image, or when ``osascript`` fails.
    """
    if not is_image_paste_supported():
        raise ClipboardUnavailable("image paste is only supported on macOS")

    with tempfile.TemporaryDirectory(prefix="feedline-") as tmp:
        target = Path(tmp) / "clipboard.png"
        try:
            subprocess.run(
                ["osascript", "-e", _PROBE_SCRIPT],
                check=True,
                capture_output=True,
            )
            subprocess.run(_write_script(target), check=True, capture_output=True)
            data = target.read_bytes()
        except (subprocess.CalledProcessError, OSError) as exc:
            raise ClipboardUnavailable("no image data in clipboard") from exc

    if not data:
        raise ClipboardUnavailable("clipboard image is empty")
    return base64.b64encode(data).decode("ascii")


def get_image_from_clipboard() -> str | None:
    """Return the clipboard image as base64, or ``None`` if there is none."""
    try:
        return read_clipboard_image()
    except ClipboardUnavailable as exc:
        logger.info("Clipboard image read failed: %s", exc)
        return None
