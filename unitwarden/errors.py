"""Exceptions raised by unitwarden operations."""

from pathlib import Path
from typing import Optional


class UnitWardenError(Exception):
    """Base exception for unitwarden errors."""

    pass


# Precondition failures

class FragmentError(UnitWardenError):
    """Raised when a drop-in fragment cannot be created."""

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class FragmentExistsError(FragmentError):
    """Raised when the fragment to create already exists."""

    def __init__(self, path: Path):
        super().__init__(f"Fragment config already exists at {path}", path)


class FragmentConflictError(FragmentError):
    """Raised when a fragment of the other kind is in place."""

    def __init__(self, path: Path):
        super().__init__(f"Conflicting config already exists at {path}", path)


# External format failures

class FormatError(UnitWardenError):
    """Raised when external output or config files do not parse."""

    pass


class MalformedStatusError(FormatError):
    """Raised when systemctl status output does not have the expected layout."""

    pass


class DirectiveParseError(FormatError):
    """Raised when a unit config file directive cannot be parsed."""

    def __init__(self, message: str, path: Path, lineno: Optional[int] = None):
        location = f"{path}:{lineno}" if lineno is not None else str(path)
        super().__init__(f"{location}: {message}")
        self.path = path
        self.lineno = lineno


class SnippetNotFoundError(FormatError):
    """Raised when the profiling result snippet is missing from the journal."""

    pass


class OptionParseError(FormatError):
    """Raised when an option line cannot be parsed."""

    pass


# Subprocess failures

class SystemctlError(UnitWardenError):
    """Raised when a systemctl invocation exits with a failure status."""

    def __init__(self, verb: str, returncode: int):
        super().__init__(f"systemctl {verb} failed with exit status {returncode}")
        self.verb = verb
        self.returncode = returncode
