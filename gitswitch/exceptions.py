"""Custom exceptions for git-switch."""


class GitSwitchError(Exception):
    """Base exception for git-switch."""

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ProfileError(GitSwitchError):
    """Profile-related errors."""

    def __init__(
        self,
        message: str,
        profile_name: str | None = None,
        details: str | None = None,
    ) -> None:
        self.profile_name = profile_name
        super().__init__(message, details=details)


class ProfileExistsError(ProfileError):
    """A profile with the requested name already exists."""
    pass


class ProfileNotFoundError(ProfileError):
    """The requested profile (or one of its files) does not exist."""
    pass


class InvalidProfileNameError(ProfileError):
    """The profile name cannot be used as a directory name."""
    pass


class CorruptConfigError(ProfileError):
    """A profile's config.json could not be parsed."""
    pass


class NoActiveProfileError(GitSwitchError):
    """The command needs an active profile and none is selected."""

    def __init__(self, message: str = "No profile is currently active") -> None:
        super().__init__(
            message,
            details="Select one with: git-switch switch <profile>",
        )


class UnrecognizedArgumentError(GitSwitchError):
    """An unknown verb or extra argument was passed on the command line."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"{argument} is not a recognized argument")


class SSHKeyError(GitSwitchError):
    """Errors related to SSH key files and links."""
    pass


class ExternalToolError(GitSwitchError):
    """A collaborator (git config, ssh-keygen, clipboard) failed."""
    pass


class KeyNotFoundError(SSHKeyError):
    """An SSH key file that should exist is missing."""
    pass
