# saffron_platform/exceptions.py
from typing import Optional


class SaffronError(Exception):
    """Base class for all console errors."""
    pass


class CommandRejected(SaffronError):
    """Raised when a command line is malformed and never reaches dispatch."""
    pass


class EmptyCommandError(CommandRejected):
    """Raised when the command field is missing or blank."""
    pass


class RootKeywordError(CommandRejected):
    """Raised when a command does not start with the expected root keyword."""
    pass


class UnsafeCharacterError(CommandRejected):
    """Raised when a command contains shell metacharacters."""
    pass


class UnsupportedCommandError(SaffronError):
    """Raised when a subcommand or action is not registered."""
    pass


class CommandArgumentError(SaffronError):
    """Raised when positional arguments or flags have the wrong shape."""
    pass


class BackendError(SaffronError):
    """Raised when the authorization service cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(SaffronError):
    """Raised when the configuration cannot produce a working platform."""
    pass
