"""Active profile tracking."""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ActiveProfileTracker:
    """Persists the name of the selected profile in a sentinel file.

    The file is read at most once per tracker; later reads come from memory.
    The name is not validated against the store, so it can outlive the
    profile it refers to.
    """

    def __init__(self, sentinel: Path) -> None:
        self.sentinel = sentinel
        self._loaded = False
        self._current: Optional[str] = None

    def get(self) -> Optional[str]:
        """Name of the active profile, if any."""
        if not self._loaded:
            try:
                self._current = self.sentinel.read_text(encoding="utf-8").strip() or None
            except FileNotFoundError:
                self._current = None
            self._loaded = True
            logger.debug(f"Active profile: {self._current}")
        return self._current

    def set(self, name: str) -> None:
        """Record ``name`` as the active profile."""
        self.sentinel.parent.mkdir(parents=True, exist_ok=True)
        self.sentinel.write_text(name, encoding="utf-8")
        self._current = name
        self._loaded = True
