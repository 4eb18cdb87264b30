# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Error hierarchy for the Version Branch Action.

Every failure is surfaced to the entry point unchanged; there is no local
recovery. A missing *target* branch is not an error and never raises.
"""

from __future__ import annotations


class VersionBranchError(Exception):
    """Base class for all errors raised by the action."""


class InvalidInputError(VersionBranchError):
    """An input (branch, mode, version, prefix) is missing or malformed."""


class InvalidVersionError(InvalidInputError):
    """A version string is not valid SemVer 2.0.0."""


class InvalidModeError(InvalidInputError):
    """The requested bump mode is not one of the recognized values."""


class BaseBranchNotFoundError(VersionBranchError):
    """The base branch does not exist in the repository."""


class BackendError(VersionBranchError):
    """A GitHub lookup or mutation failed.

    Attributes:
        status_code: HTTP status reported by the backend, if any.
        cause: The original exception raised by the HTTP layer.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.cause = cause


class NetworkError(VersionBranchError):
    """A request timed out or could not connect."""
