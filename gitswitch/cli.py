"""Command-line interface."""

import logging
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar, cast

import click

from .context import StoreContext
from .dispatcher import CommandDispatcher, Verb, resolve_verb
from .exceptions import GitSwitchError, ProfileExistsError
from .logs import attach_log_file
from .ui_common import console, print_error
from .version import __version__

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def store_context(ctx: click.Context) -> StoreContext:
    """The StoreContext of this invocation, created on first use."""
    root_ctx = ctx.find_root()
    if root_ctx.obj is None:
        root_ctx.obj = StoreContext.from_env(
            root=root_ctx.params.get("root"),
            ssh_dir=root_ctx.params.get("ssh_dir"),
        )
    return cast(StoreContext, root_ctx.obj)


def dispatcher(ctx: click.Context) -> CommandDispatcher:
    return CommandDispatcher(store_context(ctx))


def handle_errors(f: F) -> F:
    """Decorator to handle errors in CLI commands."""
    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except ProfileExistsError as e:
            logger.info(str(e))
            print_error(str(e), e.details)
            console.print("Use a different name, or remove it first: "
                          f"[command]git-switch remove {e.profile_name}[/command]")
            sys.exit(1)
        except GitSwitchError as e:
            logger.info(f"{type(e).__name__}: {e}")
            print_error(str(e), e.details)
            sys.exit(1)
        except OSError as e:
            logger.error(f"Filesystem error: {e}", exc_info=True)
            print_error(str(e))
            sys.exit(1)
    return cast(F, wrapper)


class VerbGroup(click.Group):
    """Group that picks a default verb and accepts ``git-switch <profile>``."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and args[0] not in self.commands and not args[0].startswith("-"):
            try:
                verb, args = resolve_verb(args, store_context(ctx).store.list())
            except GitSwitchError as e:
                print_error(str(e))
                ctx.exit(1)
            return super().resolve_command(ctx, [verb.value, *args])
        return super().resolve_command(ctx, args)


@click.group(cls=VerbGroup, invoke_without_command=True)
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="GIT_SWITCH_HOME",
    help="Profile store directory (default: ~/.git-switch)",
)
@click.option(
    "--ssh-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="GIT_SWITCH_SSH_DIR",
    help="SSH directory holding id_rsa (default: ~/.ssh)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(__version__, prog_name="git-switch")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, ssh_dir: Path | None, debug: bool) -> None:
    """Switch between git identities and their SSH keys."""
    attach_log_file(store_context(ctx).root)

    if debug:
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        for handler in root_logger.handlers:
            handler.setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")

    if ctx.invoked_subcommand is None:
        verb, _ = resolve_verb([], store_context(ctx).store.list())
        logger.debug(f"No command given, running {verb.value}")
        ctx.invoke(cast(click.Command, cli.get_command(ctx, verb.value)))


@cli.command()
@click.argument("name", required=False)
@click.option("--display-name", help="Git user.name for this profile")
@click.option("--email", help="Git user.email for this profile")
@click.option(
    "--use-existing-key/--new-key",
    default=None,
    help="Adopt the current ~/.ssh/id_rsa or generate a new key pair",
)
@click.pass_context
@handle_errors
def add(
    ctx: click.Context,
    name: str | None,
    display_name: str | None,
    email: str | None,
    use_existing_key: bool | None,
) -> None:
    """Add a new profile."""
    dispatcher(ctx).add(
        name=name,
        display_name=display_name,
        email=email,
        use_existing_key=use_existing_key,
    )


@cli.command()
@click.argument("name", required=False)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@handle_errors
def remove(ctx: click.Context, name: str | None, yes: bool) -> None:
    """Remove a profile and its key pair."""
    dispatcher(ctx).remove(name, assume_yes=yes)


@cli.command()
@click.argument("name", required=False)
@click.pass_context
@handle_errors
def switch(ctx: click.Context, name: str | None) -> None:
    """Switch to a different profile."""
    dispatcher(ctx).switch(name)


@cli.command(name=Verb.LIST.value)
@click.pass_context
@handle_errors
def list_profiles(ctx: click.Context) -> None:
    """List all profiles."""
    dispatcher(ctx).list()


@cli.command()
@click.option("--print", "print_only", is_flag=True, help="Print the key instead of copying it")
@click.pass_context
@handle_errors
def key(ctx: click.Context, print_only: bool) -> None:
    """Copy the active profile's public key to the clipboard."""
    dispatcher(ctx).key(print_only=print_only)


@cli.command()
@click.pass_context
@handle_errors
def reset(ctx: click.Context) -> None:
    """Re-apply the active profile's keys and identity."""
    dispatcher(ctx).reset()


@cli.command()
@click.pass_context
@handle_errors
def current(ctx: click.Context) -> None:
    """Show the active profile."""
    dispatcher(ctx).current()


@cli.command()
@click.argument("name")
@click.option("--display-name", help="New git user.name")
@click.option("--email", help="New git user.email")
@click.pass_context
@handle_errors
def edit(ctx: click.Context, name: str, display_name: str | None, email: str | None) -> None:
    """Change a profile's name or email."""
    dispatcher(ctx).edit(name, display_name=display_name, email=email)
