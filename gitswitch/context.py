"""Store location and collaborators shared by every command."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .clipboard import Clipboard, SystemClipboard
from .identity import GitIdentity, IdentityWriter
from .profile import CURRENT_FILE, ProfileStore
from .ssh import SSH_DIR, KeyGenerator, KeyStore, SSHKeyGenerator
from .tracker import ActiveProfileTracker

logger = logging.getLogger(__name__)

DEFAULT_ROOT = Path.home() / ".git-switch"
ROOT_ENV = "GIT_SWITCH_HOME"
SSH_DIR_ENV = "GIT_SWITCH_SSH_DIR"
GIT_CONFIG_ENV = "GIT_SWITCH_GIT_CONFIG"
LOG_FILE = "git-switch.log"


def resolve_root(root: Optional[Path] = None) -> Path:
    """Store root from the argument, ``GIT_SWITCH_HOME`` or the default."""
    if root is None:
        root = Path(os.environ[ROOT_ENV]) if os.environ.get(ROOT_ENV) else DEFAULT_ROOT
    return root.expanduser().absolute()


def resolve_ssh_dir(ssh_dir: Optional[Path] = None) -> Path:
    """SSH directory from the argument, ``GIT_SWITCH_SSH_DIR`` or ``~/.ssh``."""
    if ssh_dir is None:
        ssh_dir = Path(os.environ[SSH_DIR_ENV]) if os.environ.get(SSH_DIR_ENV) else SSH_DIR
    return ssh_dir.expanduser().absolute()


def default_identity() -> GitIdentity:
    config_path = os.environ.get(GIT_CONFIG_ENV)
    return GitIdentity(Path(config_path).expanduser() if config_path else None)


@dataclass
class StoreContext:
    """Everything a command needs: paths plus injected collaborators."""
    root: Path
    ssh_dir: Path
    identity: IdentityWriter = field(default_factory=default_identity)
    key_generator: KeyGenerator = field(default_factory=SSHKeyGenerator)
    clipboard: Clipboard = field(default_factory=SystemClipboard)

    def __post_init__(self) -> None:
        self.key_store = KeyStore(self.ssh_dir, self.key_generator)
        self.store = ProfileStore(self.root, self.key_store)
        self.tracker = ActiveProfileTracker(self.root / CURRENT_FILE)

    @classmethod
    def from_env(
        cls,
        root: Optional[Path] = None,
        ssh_dir: Optional[Path] = None,
    ) -> "StoreContext":
        """Build a context with the system collaborators."""
        context = cls(root=resolve_root(root), ssh_dir=resolve_ssh_dir(ssh_dir))
        logger.debug(f"Using store {context.root} and SSH directory {context.ssh_dir}")
        return context
