"""Shared pytest fixtures for the test suite."""

from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from github.GithubException import GithubException

from version_branch.errors import BackendError
from version_branch.manifest import Manifest, parse_manifest_version


def make_backend_error(status: int, message: str = "error") -> BackendError:
    """Create a BackendError as GitHubAPI raises it for a failed call.

    Args:
        status: HTTP status the backend reported (e.g., 404).
        message: Error message.
    """
    cause = GithubException(status, {"message": message}, None)
    return BackendError(message, status_code=status, cause=cause)


def not_found() -> BackendError:
    """Create the BackendError raised for a missing ref."""
    return make_backend_error(404, "Not Found")


class FakeRefStore:
    """In-memory stand-in for GitHubAPI's ref operations.

    Branches map to commit SHAs; created refs are recorded so tests can
    assert on mutations.
    """

    def __init__(self, branches: dict[str, str] | None = None, repository: str = "owner/repo") -> None:
        self.branches = dict(branches or {})
        self.created: list[tuple[str, str]] = []
        self.owner, self.name = repository.split("/")

    def get_ref(self, branch_name: str) -> str:
        if branch_name not in self.branches:
            raise not_found()
        return self.branches[branch_name]

    def get_commit(self, branch_name: str) -> str:
        return self.get_ref(branch_name)

    def create_ref(self, branch_name: str, commit_sha: str) -> None:
        if branch_name in self.branches:
            raise make_backend_error(422, "Reference already exists")
        self.branches[branch_name] = commit_sha
        self.created.append((branch_name, commit_sha))


@pytest.fixture
def mock_github_api() -> MagicMock:
    """Create a mock GitHubAPI instance for unit tests."""
    mock_api = MagicMock()
    mock_api.owner = "owner"
    mock_api.name = "repo"
    mock_api.get_ref.return_value = "base-sha"
    mock_api.get_commit.return_value = "base-sha"
    mock_api.create_ref.return_value = None
    return mock_api


@pytest.fixture
def fake_ref_store() -> FakeRefStore:
    """A ref store holding only 'main' at commit 'abc123def456'."""
    return FakeRefStore({"main": "abc123def456"})


@pytest.fixture
def mock_github_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock GitHub environment variables."""
    env_vars = {
        "GITHUB_REPOSITORY": "owner/repo",
        "GITHUB_TOKEN": "test-token",
        "GITHUB_OUTPUT": "/dev/null",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def mock_pygithub() -> Generator[dict[str, Any], None, None]:
    """Patch PyGithub for unit tests."""
    with patch("version_branch.github_api.Github") as mock_github:
        mock_repo = MagicMock()
        mock_github.return_value.get_repo.return_value = mock_repo
        yield {"github": mock_github, "repo": mock_repo}


@pytest.fixture
def manifest_versions() -> Generator[dict[str, str], None, None]:
    """Patch the manifest fetches; map branch names to raw manifest versions."""
    versions: dict[str, str] = {}

    def fake_manifest(owner: str, repo: str, branch: str, path: str = "package.json", token: str | None = None):
        if branch not in versions:
            raise make_backend_error(404, f"No manifest on {branch}")
        return Manifest(name="app", version=versions[branch])

    def fake_version(owner: str, repo: str, branch: str, path: str = "package.json", token: str | None = None):
        return parse_manifest_version(fake_manifest(owner, repo, branch, path, token), branch)

    with (
        patch("version_branch.main.fetch_manifest", side_effect=fake_manifest),
        patch("version_branch.main.fetch_manifest_version", side_effect=fake_version),
    ):
        yield versions
