"""git-switch - Switch between git identities and their SSH keys."""

from gitswitch.context import StoreContext
from gitswitch.dispatcher import CommandDispatcher
from gitswitch.profile import ProfileRecord, ProfileStore
from gitswitch.version import __version__

__all__ = ["CommandDispatcher", "ProfileRecord", "ProfileStore", "StoreContext", "__version__"]
