"""Error taxonomy of the linter."""

from typing import Optional


class ConventionLinterError(Exception):
    """Base class for all errors raised by the linter."""


class ConfigurationError(ConventionLinterError):
    """A check's options do not match its declared schema. Disables that check only."""

    def __init__(self, check_id: str, message: str) -> None:
        super().__init__(f"{check_id}: {message}")
        self.check_id = check_id
        self.reason = message


class SourceParseError(ConventionLinterError):
    """The file could not be turned into a syntax tree. Fatal for that file."""

    def __init__(self, path: str, message: str, line: Optional[int] = None) -> None:
        location = f"{path}:{line}" if line else path
        super().__init__(f"{location}: {message}")
        self.path = path
        self.line = line


class FixRejectedError(ConventionLinterError):
    """A composed rewrite produced source that no longer parses."""
