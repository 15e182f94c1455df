"""Test configuration and fixtures."""

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional

import pytest

from gitswitch.context import StoreContext
from gitswitch.dispatcher import CommandDispatcher
from gitswitch.exceptions import ExternalToolError
from gitswitch.ssh import KeyPair


class FakeIdentity:
    """In-memory global git identity."""

    def __init__(self, name: Optional[str] = None, email: Optional[str] = None) -> None:
        self.name = name
        self.email = email
        self.applied: list[tuple[Optional[str], Optional[str]]] = []
        self.fail = False

    def read(self) -> tuple[Optional[str], Optional[str]]:
        return self.name, self.email

    def apply(self, name: Optional[str], email: Optional[str]) -> None:
        if self.fail:
            raise ExternalToolError("Couldn't set global git config")
        self.applied.append((name, email))
        if name is not None:
            self.name = name
        if email is not None:
            self.email = email


class FakeKeyGenerator:
    """Writes placeholder key files instead of running ssh-keygen."""

    def __init__(self) -> None:
        self.comments: list[str] = []

    def generate(self, private_key: Path, comment: str) -> KeyPair:
        self.comments.append(comment)
        public_key = private_key.with_name(private_key.name + ".pub")
        private_key.write_text(f"PRIVATE KEY {comment}\n")
        public_key.write_text(f"ssh-rsa AAAAB3Nza {comment}\n")
        return KeyPair(private_key=private_key, public_key=public_key)


class FakeClipboard:
    def __init__(self) -> None:
        self.contents: Optional[str] = None

    def write(self, text: str) -> None:
        self.contents = text


class FakePrompter:
    """Answers prompts from preset values."""

    def __init__(
        self,
        name: str = "work",
        texts: Optional[dict[str, Optional[str]]] = None,
        yes: bool = True,
        choice: Optional[str] = None,
    ) -> None:
        self.name = name
        self.texts = texts or {}
        self.yes = yes
        self.choice = choice
        self.questions: list[str] = []

    def ask_profile_name(self, validate: Callable[[str], str]) -> str:
        self.questions.append("name")
        return validate(self.name)

    def ask_text(self, question: str, default: Optional[str] = None) -> Optional[str]:
        self.questions.append(question)
        return self.texts.get(question, default)

    def ask_yes_no(self, question: str, default: bool = True) -> bool:
        self.questions.append(question)
        return self.yes

    def choose_profile(self, question: str, profiles: Sequence[str]) -> str:
        self.questions.append(question)
        return self.choice or profiles[0]


@pytest.fixture
def temp_home(tmp_path: Path) -> Path:
    """Create a temporary home directory for testing."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def ssh_dir(temp_home: Path) -> Path:
    return temp_home / ".ssh"


@pytest.fixture
def existing_key(ssh_dir: Path) -> Path:
    """A plain id_rsa key pair like the one a user already has."""
    ssh_dir.mkdir(mode=0o700, exist_ok=True)
    (ssh_dir / "id_rsa").write_text("PRIVATE KEY original\n")
    (ssh_dir / "id_rsa.pub").write_text("ssh-rsa AAAAoriginal me@laptop\n")
    return ssh_dir / "id_rsa"


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity(name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def key_generator() -> FakeKeyGenerator:
    return FakeKeyGenerator()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def context(
    temp_home: Path,
    ssh_dir: Path,
    identity: FakeIdentity,
    key_generator: FakeKeyGenerator,
    clipboard: FakeClipboard,
) -> StoreContext:
    return StoreContext(
        root=temp_home / ".git-switch",
        ssh_dir=ssh_dir,
        identity=identity,
        key_generator=key_generator,
        clipboard=clipboard,
    )


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def dispatcher(context: StoreContext, prompter: FakePrompter) -> CommandDispatcher:
    return CommandDispatcher(context, prompter=prompter)
