# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Version branch naming and synchronization.

This module derives the branch name for a resolved version and makes sure
that branch exists on the remote, pointing at the base branch's head commit.
Synchronization is idempotent: an existing branch is never moved, overwritten
or deleted.

References:
    - Git references: https://docs.github.com/en/rest/git/refs
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import TYPE_CHECKING

from version_branch.errors import BackendError, BaseBranchNotFoundError

if TYPE_CHECKING:
    from version_branch.github_api import GitHubAPI
    from version_branch.resolver import ResolvedVersion
    from version_branch.version import SemanticVersion

logger = logging.getLogger(__name__)

# Characters invalid in git refs (branch names and tags)
# See: https://git-scm.com/docs/git-check-ref-format
INVALID_PREFIX_CHARS = ["..", "~", "^", ":", "\\", " ", "\t", "\n", "*", "?", "["]


def validate_prefix(prefix: str) -> bool:
    """Validate that a prefix can start a git branch name.

    An empty prefix is allowed; the branch is then named after the version
    alone.

    Args:
        prefix: The prefix string to validate.

    Returns:
        True if the prefix is valid, False otherwise.

    Examples:
        >>> validate_prefix("release-")
        True
        >>> validate_prefix("")
        True
        >>> validate_prefix("bad..prefix")  # Contains '..' - invalid
        False

    References:
        - git-check-ref-format: https://git-scm.com/docs/git-check-ref-format
    """
    for invalid_char in INVALID_PREFIX_CHARS:
        if invalid_char in prefix:
            logger.warning(
                "Prefix '%s' contains invalid character %s",
                prefix,
                repr(invalid_char),
            )
            return False

    return True


def branch_name(prefix: str, version: SemanticVersion | ResolvedVersion) -> str:
    """Build the branch name for a version.

    The prefix is used verbatim and the version in its canonical form.

    Examples:
        >>> from version_branch.version import parse_version
        >>> branch_name("release-", parse_version("1.3.0"))
        'release-1.3.0'
        >>> branch_name("", parse_version("1.2.3-beta.4"))
        '1.2.3-beta.4'
    """
    return f"{prefix}{version}"


@dataclass(frozen=True)
class BranchSync:
    """Outcome of synchronizing a version branch."""

    base_branch: str
    head_branch: str
    commit_sha: str
    already_existed: bool


@dataclass(frozen=True)
class BranchSyncResult:
    """Everything the bump flow reports about a version branch."""

    base_branch: str
    base_version: SemanticVersion
    head_branch: str
    head_version: ResolvedVersion
    branch_already_existed: bool

    def to_outputs(self) -> dict[str, str]:
        """Return the action outputs for this result."""
        version = self.head_version.version
        return {
            "base-branch": self.base_branch,
            "base-version": str(self.base_version),
            "head-branch": self.head_branch,
            "head-version": str(version),
            "is-new-branch": _bool_output(not self.branch_already_existed),
            "is-prerelease": _bool_output(self.head_version.is_prerelease),
            "major": str(version.major),
            "minor": str(version.minor),
            "patch": str(version.patch),
            "pre-id": self.head_version.prerelease_id,
            "pre-inc": self.head_version.prerelease_increment,
        }


def _bool_output(value: bool) -> str:
    return "true" if value else "false"


def _is_not_found(error: BackendError) -> bool:
    return error.status_code == HTTPStatus.NOT_FOUND


def check_base_branch(api: GitHubAPI, base_branch: str) -> None:
    """Ensure the base branch exists.

    Raises:
        BaseBranchNotFoundError: If the backend reports the branch as not found.
        BackendError: If the lookup fails for any other reason.
    """
    try:
        api.get_ref(base_branch)
    except BackendError as e:
        if _is_not_found(e):
            raise BaseBranchNotFoundError(f"Base: {base_branch}, not found.") from e
        logger.error("Unknown error occurred when attempting to get ref: heads/%s", base_branch)
        raise


def sync_branch(
    api: GitHubAPI,
    base_branch: str,
    head_branch: str,
    dry_run: bool = False,
    base_checked: bool = False,
) -> BranchSync:
    """Ensure ``head_branch`` exists, branching from ``base_branch`` if absent.

    At most one mutation is made: the head branch is created only when the
    lookup reported it as not found.

    Args:
        api: GitHubAPI instance for ref operations.
        base_branch: Branch to branch from (e.g., 'main').
        head_branch: Branch to ensure (e.g., 'release-1.3.0').
        dry_run: Log the creation instead of performing it.
        base_checked: The caller already ran check_base_branch; skip the
            repeat lookup.

    Returns:
        BranchSync describing the base commit and whether the branch existed.

    Raises:
        BaseBranchNotFoundError: If the base branch does not exist.
        BackendError: If any other lookup or the creation fails.
    """
    if not base_checked:
        check_base_branch(api, base_branch)

    commit_sha = api.get_commit(base_branch)
    logger.debug("Base branch '%s' is at %s", base_branch, commit_sha[:7])

    try:
        api.get_ref(head_branch)
        already_existed = True
    except BackendError as e:
        if not _is_not_found(e):
            logger.error("Unknown error occurred when attempting to get ref: heads/%s", head_branch)
            raise
        already_existed = False

    if already_existed:
        logger.info("Branch '%s' already exists", head_branch)
    elif dry_run:
        logger.info("[DRY-RUN] Would create branch '%s' at %s", head_branch, commit_sha[:7])
    else:
        api.create_ref(head_branch, commit_sha)
        logger.info("Created branch '%s' at %s", head_branch, commit_sha[:7])

    return BranchSync(
        base_branch=base_branch,
        head_branch=head_branch,
        commit_sha=commit_sha,
        already_existed=already_existed,
    )
