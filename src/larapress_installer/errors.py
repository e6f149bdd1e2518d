"""Errors raised while scaffolding a new application."""

from typing import Optional


class ScaffoldError(Exception):
    """Base class for scaffolding faults.

    Carries the file path involved (if any) and the underlying cause so the
    CLI can print a single diagnostic line.
    """

    def __init__(self, message: str, path=None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.cause = cause

    def __str__(self):
        text = self.message
        if self.path:
            text = f"{text} ({self.path})"
        if self.cause is not None:
            text = f"{text}: {self.cause}"
        return text


class TargetExistsError(ScaffoldError):
    """The target directory already exists."""


class FetchError(ScaffoldError):
    """The release archive could not be downloaded."""


class ExtractError(ScaffoldError):
    """The release archive could not be extracted."""


class PermissionWarning(ScaffoldError):
    """Writable directories could not be prepared. Never fatal."""


class WriteError(ScaffoldError):
    """A configuration file could not be written."""


class ManifestParseError(ScaffoldError):
    """composer.json is missing or is not a JSON object."""


class EnvReadError(ScaffoldError):
    """The environment file or its template could not be read."""


class DelegatedProcessFailure(ScaffoldError):
    """An install command exited non-zero."""

    def __init__(self, exit_code: int):
        super().__init__(f"Dependency installation failed with exit code {exit_code}")
        self.exit_code = exit_code
