"""Global git identity (user.name / user.email) management."""

import configparser
import logging
from pathlib import Path
from typing import Optional, Protocol

import git
from git.config import get_config_path

from .exceptions import ExternalToolError

logger = logging.getLogger(__name__)

USER_SECTION = "user"


def global_config_path() -> Path:
    """Path of the user's global git configuration."""
    return Path(get_config_path("global"))


class IdentityWriter(Protocol):
    """Reads and applies the git identity at global scope."""

    def read(self) -> tuple[Optional[str], Optional[str]]:
        ...

    def apply(self, name: Optional[str], email: Optional[str]) -> None:
        ...


class GitIdentity:
    """Git identity stored in a git config file, ``~/.gitconfig`` by default."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or global_config_path()

    def read(self) -> tuple[Optional[str], Optional[str]]:
        """Return the configured ``(user.name, user.email)``."""
        if not self.config_path.exists():
            return None, None

        try:
            with git.GitConfigParser(str(self.config_path), read_only=True) as config:
                name = config.get_value(USER_SECTION, "name", "")
                email = config.get_value(USER_SECTION, "email", "")
        except (OSError, configparser.Error) as e:
            raise ExternalToolError(
                "Couldn't read git config",
                details=f"{self.config_path}: {e}",
            ) from e

        return (str(name) or None), (str(email) or None)

    def apply(self, name: Optional[str], email: Optional[str]) -> None:
        """Set ``user.name`` and ``user.email``; ``None`` values are left as is."""
        values = {"name": name, "email": email}
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with git.GitConfigParser(str(self.config_path), read_only=False) as config:
                for option, value in values.items():
                    if value is not None:
                        config.set_value(USER_SECTION, option, value)
        except (OSError, configparser.Error) as e:
            raise ExternalToolError(
                "Couldn't set global git config",
                details=f"{self.config_path}: {e}",
            ) from e

        logger.info(f"Applied git identity name={name!r} email={email!r}")
