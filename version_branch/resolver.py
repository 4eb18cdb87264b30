# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Next-version resolution for version branches.

Maps a base version and a bump request to the resulting version, following
the release types of the npm ``semver`` package: major, minor and patch
(optionally as a "pre-" variant when a prerelease identifier is given) and
prerelease.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
    - npm semver inc(): https://github.com/npm/node-semver#functions
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

from version_branch.errors import InvalidModeError, InvalidVersionError
from version_branch.version import (
    PrereleaseComponent,
    SemanticVersion,
    parse_version,
)

logger = logging.getLogger(__name__)

BUMP_MODES = ("major", "minor", "patch", "prerelease")

# Dot-separated SemVer prerelease identifiers
PRERELEASE_ID_PATTERN = re.compile(r"^[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*$")


@dataclass(frozen=True)
class BumpRequest:
    """Inputs to a version resolution.

    Attributes:
        base_version: Current version of the base branch.
        mode: One of BUMP_MODES. Ignored when explicit_version is set.
        prerelease_id: Prerelease identifier (e.g., 'beta'), or None.
        explicit_version: Version that overrides any arithmetic, or None.
    """

    base_version: SemanticVersion
    mode: str = ""
    prerelease_id: str | None = None
    explicit_version: SemanticVersion | None = None

    def __post_init__(self) -> None:
        # An empty identifier means "no identifier"
        if not self.prerelease_id:
            object.__setattr__(self, "prerelease_id", None)


@dataclass(frozen=True)
class ResolvedVersion:
    """Result of a version resolution."""

    version: SemanticVersion
    is_prerelease: bool
    prerelease_id: str
    prerelease_increment: str

    def __str__(self) -> str:
        return str(self.version)


def validate_mode(mode: str, explicit_version: object | None = None) -> None:
    """Ensure a bump mode is usable.

    Any mode, including an invalid one, is accepted when an explicit version
    is supplied.

    Raises:
        InvalidModeError: If no explicit version is given and mode is not one
            of BUMP_MODES.
    """
    if explicit_version:
        return
    if mode not in BUMP_MODES:
        raise InvalidModeError(f"Invalid version-level: {mode!r} (expected one of {', '.join(BUMP_MODES)})")


def split_prerelease(components: tuple[PrereleaseComponent, ...]) -> tuple[str, str]:
    """Split prerelease components into (identifier, increment).

    The last component is the increment; the leading components, joined with
    '.', are the identifier. The input is left untouched.

    Examples:
        >>> split_prerelease(("beta", 4))
        ('beta', '4')
        >>> split_prerelease(("alpha", "x", 0))
        ('alpha.x', '0')
        >>> split_prerelease((0,))
        ('', '0')
        >>> split_prerelease(())
        ('', '')
    """
    if not components:
        return "", ""
    *identifier, increment = components
    return ".".join(str(part) for part in identifier), str(increment)


def _parse_identifier(prerelease_id: str) -> tuple[PrereleaseComponent, ...]:
    if not PRERELEASE_ID_PATTERN.match(prerelease_id):
        raise InvalidVersionError(f"Invalid prerelease identifier: {prerelease_id!r}")
    # Round-trip through the parser so leading-zero numerics are rejected too
    return parse_version(f"0.0.0-{prerelease_id}").prerelease


def _bump_field(version: SemanticVersion, field: str) -> SemanticVersion:
    """Increment one of major/minor/patch and reset everything below it."""
    if field == "major":
        return SemanticVersion(version.major + 1, 0, 0)
    if field == "minor":
        return SemanticVersion(version.major, version.minor + 1, 0)
    return SemanticVersion(version.major, version.minor, version.patch + 1)


def _advance_prerelease(
    version: SemanticVersion,
    identifier: tuple[PrereleaseComponent, ...],
) -> SemanticVersion:
    """Advance the prerelease of ``version``, keyed by ``identifier``.

    The right-most numeric component is incremented, or 0 is appended when
    there is none. If an identifier is given and the result does not continue
    it (``<identifier>.<more>``), the prerelease restarts at
    ``<identifier>.0``.

    Examples:
        >>> str(_advance_prerelease(parse_version("1.0.0-beta.1.2"), ("beta",)))
        '1.0.0-beta.1.3'
        >>> str(_advance_prerelease(parse_version("1.0.0-alpha.4"), ("beta",)))
        '1.0.0-beta.0'
    """
    components = list(version.prerelease)
    if not components:
        components = [0]
    else:
        for index in range(len(components) - 1, -1, -1):
            if isinstance(components[index], int):
                components[index] += 1
                break
        else:
            components.append(0)

    if identifier:
        width = len(identifier)
        continues = len(components) > width and tuple(components[:width]) == identifier
        if not continues:
            components = [*identifier, 0]

    return replace(version, prerelease=tuple(components), build=())


def _release_type(mode: str, prerelease_id: str | None) -> str:
    if mode == "prerelease":
        return "prerelease"
    return f"pre{mode}" if prerelease_id else mode


def resolve_version(request: BumpRequest) -> ResolvedVersion:
    """Compute the version a bump request resolves to.

    Args:
        request: The base version and bump options.

    Returns:
        ResolvedVersion with the new version and its prerelease breakdown.

    Raises:
        InvalidModeError: If no explicit version is given and the mode is not
            recognized.
        InvalidVersionError: If the prerelease identifier is not valid SemVer.

    Examples:
        >>> base = parse_version("1.2.3")
        >>> str(resolve_version(BumpRequest(base, "minor")))
        '1.3.0'
        >>> str(resolve_version(BumpRequest(base, "patch", "beta")))
        '1.2.4-beta.0'
        >>> str(resolve_version(BumpRequest(parse_version("2.0.0-beta.3"), "prerelease")))
        '2.0.0-beta.4'
    """
    if request.explicit_version is not None:
        logger.info("Using explicit version '%s' (version-level ignored)", request.explicit_version)
        new_version = request.explicit_version
    else:
        validate_mode(request.mode)
        identifier = _parse_identifier(request.prerelease_id) if request.prerelease_id else ()
        release_type = _release_type(request.mode, request.prerelease_id)
        logger.info("Release type: %s", release_type)

        base = request.base_version
        if release_type == "prerelease":
            start = base if base.is_prerelease else _bump_field(base, "patch")
            new_version = _advance_prerelease(start, identifier)
        elif release_type.startswith("pre"):
            new_version = _advance_prerelease(_bump_field(base, request.mode), identifier)
        else:
            new_version = _bump_field(base, request.mode)

    logger.info("New version: %s", new_version)

    prerelease_id, prerelease_increment = split_prerelease(new_version.prerelease)
    return ResolvedVersion(
        version=new_version,
        is_prerelease=new_version.is_prerelease,
        prerelease_id=prerelease_id,
        prerelease_increment=prerelease_increment,
    )
