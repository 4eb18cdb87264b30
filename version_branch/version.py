# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Semantic version value type.

Parsing is strict SemVer 2.0.0 (no leading zeros, no missing components);
precedence follows the specification's ordering rules, ignoring build
metadata.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
    - python-semver: https://python-semver.readthedocs.io/
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

import semver

from version_branch.errors import InvalidVersionError


PrereleaseComponent = str | int


def _split_identifiers(text: str | None) -> tuple[PrereleaseComponent, ...]:
    """Split a dot-separated identifier string into typed components.

    Purely numeric identifiers become ints so they compare numerically.

    Examples:
        >>> _split_identifiers("beta.3")
        ('beta', 3)
        >>> _split_identifiers(None)
        ()
    """
    if not text:
        return ()
    return tuple(int(part) if part.isdigit() else part for part in text.split("."))


def _join_identifiers(components: tuple[PrereleaseComponent, ...]) -> str:
    return ".".join(str(component) for component in components)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """An immutable, totally ordered semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[PrereleaseComponent, ...] = ()
    build: tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        """True when the version carries prerelease components."""
        return len(self.prerelease) > 0

    def to_semver(self) -> semver.Version:
        """Return the equivalent ``semver.Version``."""
        return semver.Version(
            self.major,
            self.minor,
            self.patch,
            prerelease=_join_identifiers(self.prerelease) or None,
            build=".".join(self.build) or None,
        )

    def __str__(self) -> str:
        """Return the canonical rendering (e.g., '1.2.3-beta.4')."""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{_join_identifiers(self.prerelease)}"
        if self.build:
            text += f"+{'.'.join(self.build)}"
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.to_semver().compare(other.to_semver()) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.to_semver().compare(other.to_semver()) < 0

    def __hash__(self) -> int:
        # Build metadata does not take part in equality
        return hash((self.major, self.minor, self.patch, self.prerelease))


def parse_version(text: str) -> SemanticVersion:
    """Parse a SemVer 2.0.0 string.

    Surrounding whitespace and a single leading 'v' are accepted and dropped.

    Args:
        text: The version string (e.g., '1.2.3', 'v2.0.0-beta.3').

    Returns:
        The parsed SemanticVersion.

    Raises:
        InvalidVersionError: If the string is not a valid semantic version.

    Examples:
        >>> str(parse_version("v1.2.3-rc.1"))
        '1.2.3-rc.1'
        >>> parse_version("01.2.3")
        Traceback (most recent call last):
        ...
        version_branch.errors.InvalidVersionError: Invalid semantic version: '01.2.3'
    """
    if not isinstance(text, str):
        raise InvalidVersionError(f"Invalid semantic version: {text!r}")

    candidate = text.strip()
    if candidate.startswith("v"):
        candidate = candidate[1:]

    try:
        parsed = semver.Version.parse(candidate)
    except ValueError as e:
        raise InvalidVersionError(f"Invalid semantic version: {text!r}") from e

    return SemanticVersion(
        major=parsed.major,
        minor=parsed.minor,
        patch=parsed.patch,
        prerelease=_split_identifiers(parsed.prerelease),
        build=tuple(parsed.build.split(".")) if parsed.build else (),
    )

