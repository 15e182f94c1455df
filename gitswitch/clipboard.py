"""Clipboard access."""

import logging
import platform
import shutil
import subprocess
from typing import Protocol

from .exceptions import ExternalToolError

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    def write(self, text: str) -> None:
        ...


def clipboard_command() -> list[str]:
    """Command that reads stdin into the system clipboard."""
    system = platform.system().lower()

    if system == "darwin":  # macOS
        return ["pbcopy"]
    if system == "windows":
        return ["clip"]
    if system == "linux":
        # Try different clipboard commands available on Linux
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard"]
        if shutil.which("xsel"):
            return ["xsel", "--clipboard", "--input"]
        if shutil.which("wl-copy"):
            return ["wl-copy"]
        raise ExternalToolError(
            "No clipboard command found",
            details="Please install xclip, xsel, or wl-copy",
        )
    raise ExternalToolError(f"Unsupported operating system: {system}")


class SystemClipboard:
    """Clipboard backed by the platform's copy command."""

    def write(self, text: str) -> None:
        cmd = clipboard_command()
        logger.debug(f"Copying {len(text)} characters with {cmd[0]}")
        try:
            subprocess.run(cmd, input=text.encode(), check=True, capture_output=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise ExternalToolError(f"Could not copy to clipboard: {e}") from e
