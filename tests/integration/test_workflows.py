"""Integration tests for complete user workflows."""

import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner

from gitswitch.cli import cli
from gitswitch.context import StoreContext
from gitswitch.identity import GitIdentity
from gitswitch.profile import ProfileRecord
from gitswitch.ssh import KeyPair, SSHKeyGenerator


class RecordingKeyGenerator:
    def __init__(self) -> None:
        self.comments: list[str] = []

    def generate(self, private_key: Path, comment: str) -> KeyPair:
        self.comments.append(comment)
        public_key = private_key.with_name(private_key.name + ".pub")
        private_key.write_text(f"PRIVATE KEY {comment}\n")
        public_key.write_text(f"ssh-rsa AAAA {comment}\n")
        return KeyPair(private_key, public_key)


@pytest.fixture
def temp_workspace(tmp_path: Path) -> Path:
    """Create a temporary home for the store, SSH keys and git config."""
    workspace = tmp_path / "workspace"
    (workspace / ".ssh").mkdir(parents=True)
    return workspace


def make_context(workspace: Path, key_generator) -> StoreContext:
    return StoreContext(
        root=workspace / ".git-switch",
        ssh_dir=workspace / ".ssh",
        identity=GitIdentity(workspace / ".gitconfig"),
        key_generator=key_generator,
    )


def test_add_then_switch_workflow(temp_workspace: Path) -> None:
    """Empty store, add a profile with a new key, then switch to it."""
    key_generator = RecordingKeyGenerator()
    context = make_context(temp_workspace, key_generator)
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["add", "work", "--display-name", "Ada", "--email", "a@b.com", "--new-key"],
        obj=context,
    )
    assert result.exit_code == 0, result.output
    assert key_generator.comments == ["work"]
    assert context.store.list() == ["work"]

    result = runner.invoke(cli, ["switch", "work"], obj=context)
    assert result.exit_code == 0, result.output

    # A fresh context reads everything back from disk
    reloaded = make_context(temp_workspace, key_generator)
    assert reloaded.tracker.get() == "work"
    link = temp_workspace / ".ssh" / "id_rsa"
    assert link.is_symlink()
    assert link.resolve() == (temp_workspace / ".git-switch" / "work" / "privatekey").resolve()
    assert reloaded.identity.read() == ("Ada", "a@b.com")


def test_adopt_existing_key_then_alternate(temp_workspace: Path) -> None:
    """Adopt the user's key as one profile, generate another, and switch back and forth."""
    ssh_dir = temp_workspace / ".ssh"
    (ssh_dir / "id_rsa").write_text("PRIVATE KEY original\n")
    (ssh_dir / "id_rsa.pub").write_text("ssh-rsa AAAAoriginal\n")
    (temp_workspace / ".gitconfig").write_text("[user]\n\tname = Me\n\temail = me@home.org\n")
    context = make_context(temp_workspace, RecordingKeyGenerator())
    runner = CliRunner()

    assert runner.invoke(cli, ["add", "personal", "--use-existing-key"], obj=context).exit_code == 0
    assert runner.invoke(
        cli, ["add", "work", "--display-name", "Me", "--email", "me@work.com"], obj=context
    ).exit_code == 0

    for name, email, key_text in [
        ("work", "me@work.com", "PRIVATE KEY work\n"),
        ("personal", "me@home.org", "PRIVATE KEY original\n"),
    ]:
        result = runner.invoke(cli, [name], obj=context)
        assert result.exit_code == 0, result.output
        assert (ssh_dir / "id_rsa").read_text() == key_text
        assert context.identity.read() == ("Me", email)

    result = runner.invoke(cli, ["remove", "personal", "--yes"], obj=context)
    assert result.exit_code == 0, result.output
    result = runner.invoke(cli, ["key", "--print"], obj=context)
    assert result.exit_code == 1
    assert "Profile not found: personal" in result.output


@pytest.mark.skipif(shutil.which("ssh-keygen") is None, reason="ssh-keygen is not installed")
def test_generate_real_key(temp_workspace: Path) -> None:
    context = make_context(temp_workspace, SSHKeyGenerator(key_type="ed25519", bits=None))

    context.store.create(ProfileRecord(name="work"))

    pair = context.store.key_pair("work")
    assert pair.exists()
    assert pair.get_public_key().startswith("ssh-ed25519 ")
    assert pair.get_public_key().endswith(" work")
