# Copyright (c) 2026 Mark Ferrell. MIT License.
"""GitHub API wrapper for branch reference and pull request operations.

Every PyGithub failure is re-raised as a BackendError carrying the HTTP
status, and transport failures as a NetworkError, so callers can branch on
the status code instead of on PyGithub exception classes.

References:
    - GitHub REST API: https://docs.github.com/en/rest
    - PyGithub Documentation: https://pygithub.readthedocs.io/
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

import requests
from github import Auth, Github
from github.GithubException import GithubException

from version_branch.errors import BackendError, NetworkError

# Seconds before a GitHub API request is abandoned
DEFAULT_TIMEOUT = 30


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    """Re-raise PyGithub and transport errors as action errors."""
    try:
        yield
    except GithubException as e:
        raise BackendError(f"Failed to {action}: {e}", status_code=e.status, cause=e) from e
    except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
        raise NetworkError(f"Failed to {action}: {e}") from e


class GitHubAPI:
    """Wrapper around PyGithub for branch reference operations.

    Handles authentication via token input, defaulting to GITHUB_TOKEN
    environment variable if not provided.

    References:
        - Authentication: https://docs.github.com/en/rest/authentication
        - GITHUB_TOKEN: https://docs.github.com/en/actions/security-for-github-actions/security-guides/automatic-token-authentication
    """

    def __init__(
        self,
        token: str | None = None,
        repository: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub token for authentication. Defaults to GITHUB_TOKEN env var.
            repository: Repository in 'owner/repo' format. Defaults to GITHUB_REPOSITORY env var.
            timeout: Request timeout in seconds.

        Raises:
            ValueError: If the token or repository is missing.
            BackendError: If the repository cannot be fetched.

        References:
            - Get a repository: https://docs.github.com/en/rest/repos/repos#get-a-repository
        """
        self._token = token or os.environ.get("GITHUB_TOKEN", "")
        self._repository = repository or os.environ.get("GITHUB_REPOSITORY", "")

        if not self._token:
            raise ValueError("GitHub token is required. Set GITHUB_TOKEN or pass token parameter.")
        if not self._repository:
            raise ValueError("Repository is required. Set GITHUB_REPOSITORY or pass repository parameter.")

        self._github = Github(auth=Auth.Token(self._token), timeout=timeout)
        with _translate_errors(f"get repository '{self._repository}'"):
            self._repo = self._github.get_repo(self._repository)

    @property
    def owner(self) -> str:
        """Repository owner (the part before '/')."""
        return self._repository.split("/", 1)[0]

    @property
    def name(self) -> str:
        """Repository name (the part after '/')."""
        return self._repository.split("/", 1)[-1]

    def get_ref(self, branch_name: str) -> str:
        """Look up a branch reference.

        Args:
            branch_name: Name of the branch (e.g., 'main'), without 'refs/heads/'.

        Returns:
            SHA of the commit the branch points to.

        Raises:
            BackendError: If the lookup fails; status_code is 404 when the
                branch does not exist.

        References:
            - Get a reference: https://docs.github.com/en/rest/git/refs#get-a-reference
        """
        # NOTE: the ref must omit 'refs/'
        with _translate_errors(f"get ref 'heads/{branch_name}'"):
            ref = self._repo.get_git_ref(f"heads/{branch_name}")
            return ref.object.sha

    def get_commit(self, branch_name: str) -> str:
        """Get the head commit of a branch.

        Args:
            branch_name: Name of the branch (e.g., 'main').

        Returns:
            SHA of the branch's head commit.

        Raises:
            BackendError: If the commit cannot be fetched.

        References:
            - Get a commit: https://docs.github.com/en/rest/commits/commits#get-a-commit
        """
        # NOTE: the ref must include 'refs/'
        with _translate_errors(f"get commit for 'refs/heads/{branch_name}'"):
            commit = self._repo.get_commit(f"refs/heads/{branch_name}")
            return commit.sha

    def create_ref(self, branch_name: str, commit_sha: str) -> None:
        """Create a branch pointing at a commit.

        Args:
            branch_name: Name of the branch to create (e.g., 'release-1.3.0').
            commit_sha: SHA of the commit the branch points to.

        Raises:
            BackendError: If creation fails (e.g., 422 when it already exists).

        References:
            - Create a reference: https://docs.github.com/en/rest/git/refs#create-a-reference
        """
        with _translate_errors(f"create ref 'refs/heads/{branch_name}'"):
            self._repo.create_git_ref(ref=f"refs/heads/{branch_name}", sha=commit_sha)

    def get_pull_request_branches(self, number: int) -> tuple[str, str]:
        """Get the base and head branch names of a pull request.

        Args:
            number: Pull request number.

        Returns:
            Tuple of (base_branch, head_branch).

        Raises:
            BackendError: If the pull request cannot be fetched.

        References:
            - Get a pull request: https://docs.github.com/en/rest/pulls/pulls#get-a-pull-request
        """
        with _translate_errors(f"get pull request #{number}"):
            pull = self._repo.get_pull(number)
            return pull.base.ref, pull.head.ref
