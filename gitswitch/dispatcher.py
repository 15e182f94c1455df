"""Commands that switch, add and remove identity profiles."""

import logging
from collections.abc import Sequence
from enum import Enum
from typing import Optional

from .context import StoreContext
from .exceptions import (
    CorruptConfigError,
    ExternalToolError,
    NoActiveProfileError,
    ProfileExistsError,
    ProfileNotFoundError,
    UnrecognizedArgumentError,
)
from .profile import ProfileRecord, validate_profile_name
from .ui import Prompter, RichPrompter, print_profile_table
from .ui_common import console, print_info, print_success, print_warning

logger = logging.getLogger(__name__)


class Verb(str, Enum):
    """Commands understood on the command line."""
    ADD = "add"
    REMOVE = "remove"
    SWITCH = "switch"
    LIST = "list"
    KEY = "key"
    RESET = "reset"
    CURRENT = "current"
    EDIT = "edit"

    @classmethod
    def parse(cls, token: str) -> Optional["Verb"]:
        try:
            return cls(token)
        except ValueError:
            return None


def resolve_verb(tokens: Sequence[str], profiles: Sequence[str]) -> tuple[Verb, list[str]]:
    """Split the command line into a verb and its remaining arguments.

    Without tokens the verb is ``switch`` when profiles exist and ``add``
    otherwise. A leading profile name is shorthand for ``switch <name>``.
    """
    if not tokens:
        return (Verb.SWITCH if profiles else Verb.ADD), []

    verb = Verb.parse(tokens[0])
    if verb is not None:
        return verb, list(tokens[1:])
    if tokens[0] in profiles:
        return Verb.SWITCH, list(tokens)
    raise UnrecognizedArgumentError(tokens[0])


class CommandDispatcher:
    """Runs the profile commands against a store."""

    def __init__(self, context: StoreContext, prompter: Optional[Prompter] = None) -> None:
        self.context = context
        self.prompter = prompter or RichPrompter()

    @property
    def store(self):
        return self.context.store

    @property
    def tracker(self):
        return self.context.tracker

    def _check_new_name(self, name: str) -> str:
        validate_profile_name(name)
        if self.store.exists(name):
            raise ProfileExistsError(f"Profile '{name}' already exists", profile_name=name)
        return name

    def _identity_defaults(self) -> tuple[Optional[str], Optional[str]]:
        try:
            return self.context.identity.read()
        except ExternalToolError as e:
            logger.warning(f"{e}: {e.details}")
            return None, None

    def _choose(self, question: str) -> str:
        profiles = self.store.list()
        if not profiles:
            raise ProfileNotFoundError(
                "No profiles found",
                details="Create one with: git-switch add",
            )
        return self.prompter.choose_profile(question, profiles)

    def add(
        self,
        name: Optional[str] = None,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
        use_existing_key: Optional[bool] = None,
    ) -> ProfileRecord:
        """Create a profile and apply its identity.

        Without ``name`` every missing field is asked for; with it the
        missing fields fall back to the current global git identity.
        """
        default_name, default_email = self._identity_defaults()
        key_link = self.context.key_store.private_key_link
        key_is_linked = key_link.is_symlink()
        has_key = key_link.exists() and not key_is_linked
        interactive = name is None

        if interactive:
            name = self.prompter.ask_profile_name(self._check_new_name)
        else:
            self._check_new_name(name)

        if display_name is None:
            display_name = (
                self.prompter.ask_text("What's your name?", default=default_name)
                if interactive else default_name
            )
        if email is None:
            email = (
                self.prompter.ask_text("What email would you like to use?", default=default_email)
                if interactive else default_email
            )
        if use_existing_key is None:
            use_existing_key = has_key and (
                self.prompter.ask_yes_no("Would you like to use the current SSH keypair?")
                if interactive else True
            )

        record = ProfileRecord(name=name, display_name=display_name, email=email)
        print_info(f"Adding {name} profile")
        self.store.create(record, use_existing_key=use_existing_key)
        print_success(f"Profile '{name}' created")

        if use_existing_key and key_is_linked:
            # The active links now point at the copies in the new profile
            self.tracker.set(name)
            print_info(f"The active SSH keys now belong to {name}")

        self.context.identity.apply(record.display_name, record.email)
        return record

    def switch(self, name: Optional[str] = None, reset: bool = False) -> bool:
        """Make ``name`` the active profile.

        Returns False when it already is and ``reset`` is not set. The key
        swap is not undone if applying the identity fails afterwards.
        """
        if name is None:
            name = self._choose("Which profile do you want to use?")
        if not self.store.exists(name):
            raise ProfileNotFoundError(f"{name} profile doesn't exist", profile_name=name)

        if self.tracker.get() == name and not reset:
            print_info(f"Already using {name}")
            return False

        record = self.store.read(name)
        print_info(f"Switching to {name} profile")
        self.context.key_store.activate(self.store.profile_dir(name))

        identity_error = None
        try:
            self.context.identity.apply(record.display_name, record.email)
        except ExternalToolError as e:
            logger.error(f"Identity not applied for {name}: {e.details or e}")
            print_warning("SSH keys were switched but the git identity was not updated")
            identity_error = e

        self.tracker.set(name)
        if identity_error is not None:
            raise identity_error

        print_success(f"Now using {name}")
        return True

    def remove(self, name: Optional[str] = None, assume_yes: bool = False) -> bool:
        """Delete a profile and its key pair."""
        if name is None:
            name = self._choose("Which profile do you want to remove?")
        if not self.store.exists(name):
            raise ProfileNotFoundError(f"No profile named {name} was found", profile_name=name)

        if not assume_yes and not self.prompter.ask_yes_no(
            f"Are you sure you want to delete profile '{name}'?", default=False
        ):
            print_info("Operation cancelled")
            return False

        print_info(f"Removing {name} profile")
        self.store.delete(name)
        print_success(f"Deleted {name}")

        if self.tracker.get() == name:
            print_warning(f"{name} is still recorded as the active profile")
        return True

    def list(self) -> list[str]:
        """Show all profiles and return their names."""
        names = self.store.list()
        if not names:
            print_info("No profiles found. Create one with: git-switch add")
            return names

        records = []
        for name in names:
            try:
                records.append(self.store.read(name))
            except (CorruptConfigError, ProfileNotFoundError) as e:
                logger.warning(str(e))
                records.append(ProfileRecord(name=name))

        print_profile_table(records, active=self.tracker.get())
        return names

    def key(self, print_only: bool = False) -> str:
        """Copy the active profile's public key to the clipboard."""
        current = self.tracker.get()
        if not current:
            raise NoActiveProfileError("You must select a profile before you can copy its key")

        public_key = self.store.key_pair(current).get_public_key()
        if print_only:
            console.print(public_key, soft_wrap=True, markup=False, highlight=False)
        else:
            self.context.clipboard.write(public_key)
            print_success(f"Copied the public key for {current} to your clipboard")
        return public_key

    def reset(self) -> bool:
        """Re-apply the active profile's keys and identity."""
        current = self.tracker.get()
        if not current:
            raise NoActiveProfileError("Can't reset if no profile is set")

        print_info(f"Resetting git profile for {current}")
        return self.switch(current, reset=True)

    def current(self) -> str:
        current = self.tracker.get()
        if not current:
            raise NoActiveProfileError()
        console.print(current, markup=False, highlight=False)
        return current

    def edit(
        self,
        name: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> ProfileRecord:
        """Replace a profile's name and email."""
        record = self.store.read(name)

        if display_name is None and email is None:
            display_name = self.prompter.ask_text("What's your name?", default=record.display_name)
            email = self.prompter.ask_text("What email would you like to use?", default=record.email)

        updated = ProfileRecord(
            name=name,
            display_name=record.display_name if display_name is None else display_name,
            email=record.email if email is None else email,
        )
        self.store.write(updated)
        print_success(f"Profile '{name}' updated")

        if self.tracker.get() == name:
            self.context.identity.apply(updated.display_name, updated.email)
        return updated
