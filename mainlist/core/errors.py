"""Exception types raised by the core and the Spotify adapters."""
from typing import Optional


class MainlistError(Exception):
    """Base class for errors the command layer reports to the user."""


class RemoteStoreError(MainlistError):
    """A Spotify Web API call failed (HTTP error, network error, bad response)."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class NotLinkedError(MainlistError):
    """No usable Spotify token; the user has to connect first."""


class AuthError(MainlistError):
    """Refreshing the Spotify access token failed."""


class LocatorError(MainlistError):
    """The MAIN playlist could not be looked up."""


class CreationError(LocatorError):
    """Spotify rejected creating the MAIN playlist or returned no id."""


class MutationError(MainlistError):
    """Adding or removing tracks failed or was not confirmed by a snapshot."""


class UnknownBindingError(MainlistError):
    """No command is bound to the requested key combination."""
