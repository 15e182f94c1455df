"""Profile management module for git-switch."""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .exceptions import (
    CorruptConfigError,
    InvalidProfileNameError,
    ProfileExistsError,
    ProfileNotFoundError,
)
from .ssh import KeyPair, KeyStore

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"
CURRENT_FILE = "current"
PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9._-]*$")


@dataclass
class ProfileRecord:
    """Git identity stored for a profile."""
    name: str
    display_name: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert record to the config.json document.

        The profile name is the directory name and is not stored; ``name``
        in the document is the git ``user.name``.
        """
        data: dict[str, Any] = {}
        if self.display_name:
            data["name"] = self.display_name
        if self.email:
            data["email"] = self.email
        return data

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "ProfileRecord":
        """Create record from a config.json document."""
        return cls(
            name=name,
            display_name=data.get("name"),
            email=data.get("email"),
        )


def validate_profile_name(name: str) -> str:
    """Return ``name`` if it can be used as a profile directory."""
    if not name:
        raise InvalidProfileNameError("Profile name cannot be empty")
    if name == CURRENT_FILE or not PROFILE_NAME_PATTERN.match(name):
        raise InvalidProfileNameError(
            f"Invalid profile name: {name}",
            profile_name=name,
            details="Use letters, digits, '.', '_' or '-' and do not start with '.' or '-'",
        )
    return name


class ProfileStore:
    """Directory-backed collection of profiles.

    Each profile lives in ``<root>/<name>/`` with ``config.json``,
    ``privatekey`` and ``publickey``. The ``current`` entry in the root is
    the active profile sentinel and is never a profile.
    """

    def __init__(self, root: Path, key_store: KeyStore) -> None:
        self.root = root
        self.key_store = key_store

    def ensure_root(self) -> None:
        """Create the store directory on first use."""
        self.root.mkdir(parents=True, exist_ok=True)

    def profile_dir(self, name: str) -> Path:
        return self.root / name

    def list(self) -> list[str]:
        """Names of all profiles, sorted."""
        if not self.root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.root.iterdir()
            if entry.is_dir() and entry.name != CURRENT_FILE
        )

    def exists(self, name: str) -> bool:
        """Whether ``name`` is a valid profile name with a directory in the store.

        Names such as ``..`` or ``a/b`` never exist, so no operation can
        reach outside the store.
        """
        if not name or name == CURRENT_FILE or not PROFILE_NAME_PATTERN.match(name):
            return False
        return self.profile_dir(name).is_dir()

    def read(self, name: str) -> ProfileRecord:
        """Load a profile's record from its config.json."""
        if not self.exists(name):
            raise ProfileNotFoundError(f"Profile not found: {name}", profile_name=name)

        config_path = self.profile_dir(name) / CONFIG_FILE
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ProfileNotFoundError(
                f"Profile {name} has no {CONFIG_FILE}",
                profile_name=name,
            ) from e
        except json.JSONDecodeError as e:
            raise CorruptConfigError(
                f"Profile {name} has an invalid {CONFIG_FILE}",
                profile_name=name,
                details=str(e),
            ) from e

        if not isinstance(data, dict):
            raise CorruptConfigError(
                f"Profile {name} has an invalid {CONFIG_FILE}",
                profile_name=name,
                details="Expected a JSON object",
            )
        return ProfileRecord.from_dict(name, data)

    def write(self, record: ProfileRecord) -> None:
        """Replace a profile's config.json wholesale."""
        config_path = self.profile_dir(record.name) / CONFIG_FILE
        config_path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
        logger.debug(f"Wrote {config_path}")

    def key_pair(self, name: str) -> KeyPair:
        """Key files of an existing profile."""
        if not self.exists(name):
            raise ProfileNotFoundError(f"Profile not found: {name}", profile_name=name)
        return KeyPair.in_directory(self.profile_dir(name))

    def create(
        self,
        record: ProfileRecord,
        use_existing_key: bool = False,
    ) -> ProfileRecord:
        """Create a profile directory, its config and its key pair.

        With ``use_existing_key`` the current SSH key pair is adopted,
        otherwise a new one is generated with the profile name as comment.
        """
        name = validate_profile_name(record.name)
        if self.exists(name):
            raise ProfileExistsError(f"Profile '{name}' already exists", profile_name=name)
        if use_existing_key:
            self.key_store.check_existing()

        self.ensure_root()
        profile_dir = self.profile_dir(name)
        profile_dir.mkdir()
        self.write(record)

        if use_existing_key:
            self.key_store.provision_from_existing(profile_dir)
        else:
            self.key_store.provision_new_keypair(profile_dir, comment=name)

        logger.info(f"Created profile {name}")
        return record

    def delete(self, name: str) -> None:
        """Remove every file of a profile, then its directory."""
        if not self.exists(name):
            raise ProfileNotFoundError(f"Profile not found: {name}", profile_name=name)

        profile_dir = self.profile_dir(name)
        for entry in sorted(profile_dir.iterdir()):
            entry.unlink()
        profile_dir.rmdir()

        logger.info(f"Deleted profile {name}")
