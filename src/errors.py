"""Errors surfaced to the user as command response text."""


class SilencerError(Exception):
    """Base class. The message is what the invoking user sees."""


class ResolutionError(SilencerError):
    """A user id or username is not in the host's directory."""


class DecodeError(SilencerError):
    """A stored block list is not a JSON array of strings."""


class PersistError(SilencerError):
    """The key/value store could not be read or written."""


class UnknownCommand(SilencerError):
    """The subcommand token matches no known form."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unknown command: {token}")
