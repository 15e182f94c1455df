"""Interactive prompts and tables for git-switch."""

from collections.abc import Callable, Sequence
from typing import Optional, Protocol

from rich import box
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .exceptions import GitSwitchError
from .profile import ProfileRecord
from .ui_common import confirm_action, console, print_error


class Prompter(Protocol):
    """Line-oriented questions asked by the commands."""

    def ask_profile_name(self, validate: Callable[[str], str]) -> str:
        ...

    def ask_text(self, question: str, default: Optional[str] = None) -> Optional[str]:
        ...

    def ask_yes_no(self, question: str, default: bool = True) -> bool:
        ...

    def choose_profile(self, question: str, profiles: Sequence[str]) -> str:
        ...


class RichPrompter:
    """Prompter that asks on the terminal through rich."""

    def ask_profile_name(self, validate: Callable[[str], str]) -> str:
        """Prompt for a new profile name until ``validate`` accepts it."""
        console.print(
            "[dim]Choose a name for this profile (e.g., personal, work, opensource)[/dim]"
        )
        while True:
            name = Prompt.ask("[cyan]What would you like to name this profile?[/cyan]").strip()
            try:
                return validate(name)
            except GitSwitchError as e:
                print_error(str(e), e.details)

    def ask_text(self, question: str, default: Optional[str] = None) -> Optional[str]:
        if default is None:
            answer = Prompt.ask(f"[cyan]{question}[/cyan]", default="", show_default=False)
        else:
            answer = Prompt.ask(f"[cyan]{question}[/cyan]", default=default)
        return answer.strip() or None

    def ask_yes_no(self, question: str, default: bool = True) -> bool:
        return confirm_action(f"[cyan]{question}[/cyan]", default=default)

    def choose_profile(self, question: str, profiles: Sequence[str]) -> str:
        """Let the user pick one of ``profiles``."""
        if len(profiles) == 1:
            if Confirm.ask(f"[cyan]{question}[/cyan] ({profiles[0]})", default=True):
                return profiles[0]
            raise GitSwitchError("Operation cancelled by user")
        return Prompt.ask(f"[cyan]{question}[/cyan]", choices=list(profiles))


def print_profile_table(profiles: Sequence[ProfileRecord], active: Optional[str] = None) -> None:
    """Print profiles in a table format."""
    table = Table(
        title="Git Profiles",
        box=box.ROUNDED,
        header_style="bold cyan",
        border_style="blue",
    )

    table.add_column("Profile", style="cyan")
    table.add_column("Name", style="blue")
    table.add_column("Email", style="green")
    table.add_column("Active", justify="center", style="bold green")

    for profile in profiles:
        table.add_row(
            profile.name,
            profile.display_name or "",
            profile.email or "",
            "✓" if profile.name == active else "",
        )

    console.print(table)
    console.print()
