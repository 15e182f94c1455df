"""SSH key management module for git-switch."""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .exceptions import ExternalToolError, KeyNotFoundError, SSHKeyError

logger = logging.getLogger(__name__)

SSH_DIR = Path.home() / ".ssh"
PRIVATE_KEY_NAME = "privatekey"
PUBLIC_KEY_NAME = "publickey"
ACTIVE_PRIVATE_KEY = "id_rsa"
ACTIVE_PUBLIC_KEY = "id_rsa.pub"
DEFAULT_KEY_TYPE = "rsa"
DEFAULT_RSA_BITS = 4096


@dataclass
class KeyPair:
    """Represents an SSH key pair on disk."""
    private_key: Path
    public_key: Path

    @classmethod
    def in_directory(cls, directory: Path) -> "KeyPair":
        """Key pair stored in a profile directory."""
        return cls(
            private_key=directory / PRIVATE_KEY_NAME,
            public_key=directory / PUBLIC_KEY_NAME,
        )

    def exists(self) -> bool:
        """Check if both private and public keys exist."""
        return self.private_key.exists() and self.public_key.exists()

    def get_public_key(self) -> str:
        """Get the contents of the public key file."""
        if not self.public_key.exists():
            raise KeyNotFoundError(f"Public key not found: {self.public_key}")
        return self.public_key.read_text().strip()


class KeyGenerator(Protocol):
    """Creates a new asymmetric key pair."""

    def generate(self, private_key: Path, comment: str) -> KeyPair:
        ...


class SSHKeyGenerator:
    """Key generator backed by ``ssh-keygen``."""

    def __init__(
        self,
        key_type: str = DEFAULT_KEY_TYPE,
        bits: int | None = DEFAULT_RSA_BITS,
    ) -> None:
        self.key_type = key_type
        self.bits = bits

    def generate(self, private_key: Path, comment: str) -> KeyPair:
        """Generate a key pair at ``private_key`` and ``<private_key>.pub``."""
        cmd = [
            "ssh-keygen", "-q",
            "-t", self.key_type,
            "-f", str(private_key),
            "-C", comment,
            "-N", "",
        ]
        if self.key_type == "rsa" and self.bits:
            cmd.extend(["-b", str(self.bits)])

        logger.debug(f"Running {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            raise ExternalToolError(
                "Failed to generate SSH key",
                details=e.stderr.strip() if e.stderr else None,
            ) from e
        except FileNotFoundError as e:
            raise ExternalToolError(
                "ssh-keygen is not installed",
                details="Please install OpenSSH to generate keys",
            ) from e

        return KeyPair(
            private_key=private_key,
            public_key=private_key.with_name(private_key.name + ".pub"),
        )


class KeyStore:
    """Owns the profile key files and the links that make one pair active."""

    def __init__(self, ssh_dir: Path, key_generator: KeyGenerator) -> None:
        self.ssh_dir = ssh_dir
        self.key_generator = key_generator

    @property
    def private_key_link(self) -> Path:
        return self.ssh_dir / ACTIVE_PRIVATE_KEY

    @property
    def public_key_link(self) -> Path:
        return self.ssh_dir / ACTIVE_PUBLIC_KEY

    def ensure_ssh_dir(self) -> None:
        """Ensure SSH directory exists with correct permissions."""
        try:
            self.ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise SSHKeyError(f"Could not create SSH directory: {e}") from e

    def check_existing(self) -> None:
        """Raise if there is no current key pair to adopt."""
        for link in (self.private_key_link, self.public_key_link):
            if not link.exists():
                raise KeyNotFoundError(
                    f"No SSH key found at {link}",
                    details="Create the profile with a new key pair instead",
                )

    def provision_from_existing(self, profile_dir: Path) -> KeyPair:
        """Move the current SSH key pair into ``profile_dir`` and link it back.

        Each file is moved and then relinked before the next one is touched.
        A failure part way leaves the files exactly as far as it got.
        """
        self.check_existing()
        pair = KeyPair.in_directory(profile_dir)

        for link, target in (
            (self.private_key_link, pair.private_key),
            (self.public_key_link, pair.public_key),
        ):
            if link.is_symlink():
                # Already managed by another profile: keep that profile's copy
                shutil.copyfile(link.resolve(), target)
                link.unlink()
            else:
                shutil.move(str(link), str(target))
            link.symlink_to(target.absolute())
            logger.debug(f"Adopted {link} as {target}")

        return pair

    def provision_new_keypair(self, profile_dir: Path, comment: str) -> KeyPair:
        """Generate a fresh key pair stored under ``profile_dir``."""
        pair = KeyPair.in_directory(profile_dir)
        generated = self.key_generator.generate(pair.private_key, comment)

        if generated.private_key != pair.private_key:
            generated.private_key.rename(pair.private_key)
        if generated.public_key != pair.public_key:
            generated.public_key.rename(pair.public_key)

        try:
            pair.private_key.chmod(0o600)
            pair.public_key.chmod(0o644)
        except OSError as e:
            raise SSHKeyError(f"Failed to set key permissions: {e}") from e

        logger.info(f"Generated key pair for {comment} in {profile_dir}")
        return pair

    def activate(self, profile_dir: Path) -> KeyPair:
        """Point the active SSH key links at the key pair in ``profile_dir``."""
        pair = KeyPair.in_directory(profile_dir)
        if not pair.exists():
            raise KeyNotFoundError(
                f"Key pair missing in {profile_dir}",
                details="The profile directory must contain privatekey and publickey",
            )

        links = (
            (self.private_key_link, pair.private_key),
            (self.public_key_link, pair.public_key),
        )
        for link, _ in links:
            if link.exists() and not link.is_symlink():
                raise SSHKeyError(
                    f"Refusing to replace unmanaged key {link}",
                    details="Adopt it first with: git-switch add --use-existing-key",
                )

        self.ensure_ssh_dir()
        for link, target in links:
            if link.is_symlink():
                link.unlink()
            link.symlink_to(target.absolute())

        logger.info(f"Activated key pair from {profile_dir}")
        return pair
