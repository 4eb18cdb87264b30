# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Package manifest retrieval.

Reads the manifest (``package.json`` by default) of a branch straight from
raw.githubusercontent.com and extracts its version.

References:
    - Requests: https://requests.readthedocs.io/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from version_branch.errors import BackendError, InvalidVersionError, NetworkError
from version_branch.version import SemanticVersion, parse_version

logger = logging.getLogger(__name__)

RAW_CONTENT_BASE = "https://raw.githubusercontent.com"
DEFAULT_MANIFEST_PATH = "package.json"
# Seconds before a manifest request is abandoned
DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Manifest:
    """Name and version read from a manifest file."""

    name: str
    version: str


def manifest_url(owner: str, repo: str, branch: str, path: str = DEFAULT_MANIFEST_PATH) -> str:
    """Build the raw content URL of a manifest on a branch.

    Examples:
        >>> manifest_url("octo", "app", "main")
        'https://raw.githubusercontent.com/octo/app/main/package.json'
    """
    return f"{RAW_CONTENT_BASE}/{owner}/{repo}/{branch}/{path.lstrip('/')}"


def fetch_manifest(
    owner: str,
    repo: str,
    branch: str,
    path: str = DEFAULT_MANIFEST_PATH,
    token: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Manifest:
    """Fetch and decode the manifest of a branch.

    Args:
        owner: Repository owner.
        repo: Repository name.
        branch: Branch to read the manifest from.
        path: Manifest path relative to the repository root.
        token: Optional token, needed for private repositories.
        timeout: Request timeout in seconds.

    Returns:
        Manifest with the name and raw version string.

    Raises:
        NetworkError: On timeout or connection failure.
        BackendError: On a non-2xx response.
        InvalidVersionError: If the body is not a JSON object with a version.
    """
    url = manifest_url(owner, repo, branch, path)
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"token {token}"

    logger.debug("Fetching manifest %s", url)
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
        raise NetworkError(f"Failed to fetch {path} from '{branch}': {e}") from e

    if not response.ok:
        raise BackendError(
            f"Failed to fetch {path} from '{branch}': HTTP {response.status_code}",
            status_code=response.status_code,
        )

    try:
        data: Any = response.json()
    except ValueError as e:
        raise InvalidVersionError(f"{path} on '{branch}' is not valid JSON") from e

    if not isinstance(data, dict) or not isinstance(data.get("version"), str):
        raise InvalidVersionError(f"{path} on '{branch}' has no version field")

    return Manifest(name=str(data.get("name", "")), version=data["version"])


def fetch_manifest_version(
    owner: str,
    repo: str,
    branch: str,
    path: str = DEFAULT_MANIFEST_PATH,
    token: str | None = None,
) -> SemanticVersion:
    """Fetch the manifest of a branch and parse its version.

    Raises:
        InvalidVersionError: If the manifest version is not valid SemVer.
        NetworkError: On timeout or connection failure.
        BackendError: On a non-2xx response.
    """
    return parse_manifest_version(fetch_manifest(owner, repo, branch, path=path, token=token), branch)


def parse_manifest_version(manifest: Manifest, branch: str) -> SemanticVersion:
    """Parse the version of a fetched manifest.

    Raises:
        InvalidVersionError: If the version is not valid SemVer.
    """
    try:
        return parse_version(manifest.version)
    except InvalidVersionError as e:
        raise InvalidVersionError(f"Version {manifest.version!r} of '{branch}' is invalid.") from e
