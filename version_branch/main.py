# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Main entry point for the Version Branch Action.

This module reads the action inputs, selects the bump or pull-request lookup
flow and reports the outcome as action outputs.

References:
    - GitHub Actions Environment Variables:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
    - GitHub Actions Outputs:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
"""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from dataclasses import dataclass

from version_branch.branch import (
    BranchSyncResult,
    branch_name,
    check_base_branch,
    sync_branch,
    validate_prefix,
)
from version_branch.errors import InvalidInputError, InvalidVersionError
from version_branch.github_api import GitHubAPI
from version_branch.manifest import (
    DEFAULT_MANIFEST_PATH,
    fetch_manifest,
    fetch_manifest_version,
    parse_manifest_version,
)
from version_branch.resolver import BUMP_MODES, BumpRequest, resolve_version, validate_mode
from version_branch.version import parse_version

logger = logging.getLogger(__name__)

# ASCII digits only; int() would also take "4_2" and non-ASCII digits
PR_NUMBER_PATTERN = re.compile(r"[0-9]+")


@dataclass
class ActionInputs:
    """Parsed action inputs from environment variables or CLI arguments."""

    token: str
    repository: str
    base_branch: str = ""
    version_level: str = ""
    name_prefix: str = ""
    pre_id: str | None = None
    custom_version: str | None = None
    pr_number: int | None = None
    manifest_path: str = DEFAULT_MANIFEST_PATH
    debug: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class PullRequestVersions:
    """Versions on both sides of an existing pull request.

    Versions are the manifest strings as written; only the head version is
    parsed, to decide whether it is a prerelease.
    """

    base_branch: str
    base_version: str
    head_branch: str
    head_version: str
    is_prerelease: bool

    def to_outputs(self) -> dict[str, str]:
        """Return the action outputs for this lookup."""
        return {
            "base-branch": self.base_branch,
            "base-version": self.base_version,
            "head-branch": self.head_branch,
            "head-version": self.head_version,
            "is-prerelease": "true" if self.is_prerelease else "false",
        }


def _input(name: str, default: str = "") -> str:
    """Read an action input from the environment.

    The runner exports input 'pre-id' as INPUT_PRE-ID; workflows that set the
    variable themselves usually spell it INPUT_PRE_ID. Both are accepted.
    """
    key = f"INPUT_{name.upper()}"
    return os.environ.get(key, os.environ.get(key.replace("-", "_"), default))


def _parse_pr_number(value: str) -> int | None:
    """Convert the pr-number input to a positive int, or None when absent.

    Examples:
        >>> _parse_pr_number("42")
        42
        >>> _parse_pr_number("") is None
        True
        >>> _parse_pr_number("0") is None
        True
    """
    value = value.strip()
    if not value:
        return None
    if not PR_NUMBER_PATTERN.fullmatch(value):
        logger.warning("pr-number '%s' is not a number, ignoring", value)
        return None
    number = int(value)
    return number if number > 0 else None


def parse_inputs(args: list[str] | None = None) -> ActionInputs:
    """Parse action inputs from CLI arguments or environment variables.

    CLI arguments take precedence over environment variables.
    When run as a GitHub Action, environment variables are used.
    When run from CLI, arguments can be provided directly.

    Args:
        args: Optional list of CLI arguments. If None, uses environment
              variables only (GitHub Actions mode). Pass sys.argv[1:] for
              CLI mode.

    Returns:
        ActionInputs with parsed values.
    """
    parser = argparse.ArgumentParser(
        description="Version Branch Action - Create a branch for the next semantic version",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (used as defaults when CLI args not provided):
  INPUT_GITHUB-TOKEN, GITHUB_TOKEN  GitHub token for authentication
  GITHUB_REPOSITORY                 Repository in owner/repo format
  INPUT_BASE-BRANCH                 Branch to read the current version from
  INPUT_VERSION-LEVEL               major, minor, patch or prerelease
  INPUT_NAME-PREFIX                 Prefix for the new branch name
  INPUT_PRE-ID                      Prerelease identifier (e.g. beta)
  INPUT_CUSTOM-VERSION              Explicit version, overrides version-level
  INPUT_PR-NUMBER                   Pull request to read versions from
  INPUT_MANIFEST-PATH               Manifest holding the version (default: package.json)
  INPUT_DEBUG                       Enable debug logging (true/false)
  INPUT_DRY-RUN                     Dry-run mode, don't create branches (true/false)

Examples:
  # Run with environment variables (GitHub Actions mode)
  python -m version_branch.main

  # Propose the next minor version from main
  python -m version_branch.main --base-branch main --version-level minor --name-prefix release-

  # Read versions from an existing pull request
  python -m version_branch.main --pr-number 42
        """,
    )

    parser.add_argument(
        "--token",
        default=_input("github-token", _input("token", os.environ.get("GITHUB_TOKEN", ""))),
        help="GitHub token for authentication (default: from INPUT_GITHUB-TOKEN or GITHUB_TOKEN env)",
    )
    parser.add_argument(
        "--repository",
        default=os.environ.get("GITHUB_REPOSITORY", ""),
        help="Repository in owner/repo format (default: from GITHUB_REPOSITORY env)",
    )
    parser.add_argument(
        "--base-branch",
        default=_input("base-branch"),
        help="Branch whose manifest version is the starting point",
    )
    parser.add_argument(
        "--version-level",
        default=_input("version-level"),
        help=f"Version level to bump ({', '.join(BUMP_MODES)})",
    )
    parser.add_argument(
        "--name-prefix",
        default=_input("name-prefix"),
        help="Prefix for the new branch name (default: none)",
    )
    parser.add_argument(
        "--pre-id",
        default=_input("pre-id"),
        help="Prerelease identifier (e.g. alpha, beta, rc)",
    )
    parser.add_argument(
        "--custom-version",
        default=_input("custom-version"),
        help="Explicit version to use instead of bumping",
    )
    parser.add_argument(
        "--pr-number",
        default=_input("pr-number"),
        help="Pull request number; switches to version lookup mode",
    )
    parser.add_argument(
        "--manifest-path",
        default=_input("manifest-path", DEFAULT_MANIFEST_PATH),
        help="Path of the manifest holding the version (default: package.json)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_input("debug", "false").lower() == "true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=_input("dry-run", "false").lower() == "true",
        help="Dry-run mode - don't actually create branches",
    )

    # Use empty list for GitHub Actions mode (env vars only), or provided args for CLI
    parsed = parser.parse_args(args if args is not None else [])

    if not validate_prefix(parsed.name_prefix):
        logger.error(
            "Invalid name-prefix '%s': must not contain "
            "invalid git ref characters (.. ~ ^ : \\ space tab newline * ? [)",
            parsed.name_prefix,
        )
        sys.exit(1)

    return ActionInputs(
        token=parsed.token,
        repository=parsed.repository,
        base_branch=parsed.base_branch.strip(),
        version_level=parsed.version_level.strip(),
        name_prefix=parsed.name_prefix,
        pre_id=parsed.pre_id.strip() or None,
        custom_version=parsed.custom_version.strip() or None,
        pr_number=_parse_pr_number(parsed.pr_number),
        manifest_path=parsed.manifest_path or DEFAULT_MANIFEST_PATH,
        debug=parsed.debug,
        dry_run=parsed.dry_run,
    )


def set_outputs(outputs: dict[str, str]) -> None:
    """Write action outputs to GITHUB_OUTPUT file.

    Args:
        outputs: Output names mapped to their values.

    References:
        - https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
    """
    output_file = os.environ.get("GITHUB_OUTPUT", "")
    if not output_file:
        logger.warning("GITHUB_OUTPUT not set, outputs will not be written")
        return

    with open(output_file, "a") as f:
        for name, value in outputs.items():
            f.write(f"{name}={value}\n")

    logger.info("Set outputs: %s", ", ".join(f"{name}={value}" for name, value in outputs.items()))


def configure_logging(debug: bool) -> None:
    """Configure logging based on debug flag.

    Args:
        debug: If True, enable DEBUG level logging.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def create_version_branch(api: GitHubAPI, inputs: ActionInputs) -> BranchSyncResult:
    """Resolve the next version of the base branch and ensure its branch exists.

    Args:
        api: GitHubAPI instance.
        inputs: Action inputs.

    Returns:
        BranchSyncResult describing the base and the (new or existing) head branch.

    Raises:
        InvalidInputError: If the base branch is missing, the version level is
            not recognized, or a version is malformed.
        BaseBranchNotFoundError: If the base branch does not exist.
        BackendError: If a GitHub call fails.
        NetworkError: If the manifest cannot be fetched.
    """
    if not inputs.base_branch:
        raise InvalidInputError("Must provide base branch.")
    validate_mode(inputs.version_level, inputs.custom_version)

    explicit_version = None
    if inputs.custom_version:
        try:
            explicit_version = parse_version(inputs.custom_version)
        except InvalidVersionError as e:
            raise InvalidVersionError(f"Custom version: {inputs.custom_version}, is invalid.") from e

    # Fail on a missing base branch before reading its manifest
    check_base_branch(api, inputs.base_branch)

    base_version = fetch_manifest_version(
        api.owner, api.name, inputs.base_branch, path=inputs.manifest_path, token=inputs.token
    )
    logger.info("Base version: %s", base_version)

    resolved = resolve_version(
        BumpRequest(
            base_version=base_version,
            mode=inputs.version_level,
            prerelease_id=inputs.pre_id,
            explicit_version=explicit_version,
        )
    )

    head_branch = branch_name(inputs.name_prefix, resolved.version)
    sync = sync_branch(api, inputs.base_branch, head_branch, dry_run=inputs.dry_run, base_checked=True)

    return BranchSyncResult(
        base_branch=inputs.base_branch,
        base_version=base_version,
        head_branch=head_branch,
        head_version=resolved,
        branch_already_existed=sync.already_existed,
    )


def extract_pull_request_versions(api: GitHubAPI, inputs: ActionInputs) -> PullRequestVersions:
    """Read the manifest versions on both sides of a pull request.

    Nothing is created or modified.

    Args:
        api: GitHubAPI instance.
        inputs: Action inputs; pr_number must be set.

    Returns:
        PullRequestVersions for the pull request.

    Raises:
        BackendError: If the pull request cannot be fetched.
        InvalidVersionError: If the head manifest version is malformed.
        NetworkError: If a manifest cannot be fetched.
    """
    if inputs.pr_number is None:
        raise InvalidInputError("Must provide a pull request number.")

    base_branch, head_branch = api.get_pull_request_branches(inputs.pr_number)
    logger.info("Pull request #%d: %s <- %s", inputs.pr_number, base_branch, head_branch)

    base_manifest = fetch_manifest(api.owner, api.name, base_branch, path=inputs.manifest_path, token=inputs.token)
    head_manifest = fetch_manifest(api.owner, api.name, head_branch, path=inputs.manifest_path, token=inputs.token)
    head_version = parse_manifest_version(head_manifest, head_branch)

    return PullRequestVersions(
        base_branch=base_branch,
        base_version=base_manifest.version,
        head_branch=head_branch,
        head_version=head_manifest.version,
        is_prerelease=head_version.is_prerelease,
    )


def main(args: list[str] | None = None) -> None:
    """Main entry point for the action."""
    inputs = parse_inputs(args)
    configure_logging(inputs.debug)

    logger.debug(
        "Inputs: base-branch=%s, version-level=%s, name-prefix=%s, pre-id=%s, custom-version=%s, pr-number=%s",
        inputs.base_branch,
        inputs.version_level,
        inputs.name_prefix,
        inputs.pre_id,
        inputs.custom_version,
        inputs.pr_number,
    )

    if not inputs.token:
        logger.error("GitHub token is required. Set INPUT_GITHUB-TOKEN or GITHUB_TOKEN.")
        sys.exit(1)

    try:
        api = GitHubAPI(token=inputs.token, repository=inputs.repository)
        if inputs.pr_number is None:
            logger.info("Pull request number not provided, creating version branch")
            outputs = create_version_branch(api, inputs).to_outputs()
        else:
            logger.info("Pull request number: %d, found", inputs.pr_number)
            outputs = extract_pull_request_versions(api, inputs).to_outputs()
    except Exception as e:
        logger.error("%s", e, exc_info=inputs.debug)
        sys.exit(1)

    set_outputs(outputs)


if __name__ == "__main__":  # pragma: no cover
    main(sys.argv[1:])
