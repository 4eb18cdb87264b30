"""Unit tests for github_api.py - GitHubAPI wrapper methods."""

from unittest.mock import MagicMock, patch

import pytest
import requests
from github.GithubException import GithubException, UnknownObjectException

from version_branch.errors import BackendError, NetworkError
from version_branch.github_api import DEFAULT_TIMEOUT, GitHubAPI


class TestGitHubAPIInit:
    """Tests for GitHubAPI initialization and token handling."""

    def test_init_with_explicit_token_and_repo(self):
        """GitHubAPI initializes with explicit token and repository."""
        with patch("version_branch.github_api.Github") as mock_github:
            mock_repo = MagicMock()
            mock_github.return_value.get_repo.return_value = mock_repo

            api = GitHubAPI(token="test-token", repository="owner/repo")

            mock_github.assert_called_once()
            assert mock_github.call_args.kwargs["timeout"] == DEFAULT_TIMEOUT
            assert mock_github.call_args.kwargs["auth"].token == "test-token"
            mock_github.return_value.get_repo.assert_called_once_with("owner/repo")
            assert api.owner == "owner"
            assert api.name == "repo"

    def test_init_with_env_vars(self, monkeypatch):
        """GitHubAPI uses environment variables when parameters not provided."""
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        monkeypatch.setenv("GITHUB_REPOSITORY", "env-owner/env-repo")

        with patch("version_branch.github_api.Github") as mock_github:
            GitHubAPI()

            assert mock_github.call_args.kwargs["auth"].token == "env-token"
            mock_github.return_value.get_repo.assert_called_once_with("env-owner/env-repo")

    def test_init_missing_token_raises_error(self, monkeypatch):
        """GitHubAPI raises ValueError when token is missing."""
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        monkeypatch.setenv("GITHUB_REPOSITORY", "owner/repo")

        with pytest.raises(ValueError, match="GitHub token is required"):
            GitHubAPI()

    def test_init_missing_repository_raises_error(self, monkeypatch):
        """GitHubAPI raises ValueError when repository is missing."""
        monkeypatch.setenv("GITHUB_TOKEN", "test-token")
        monkeypatch.delenv("GITHUB_REPOSITORY", raising=False)

        with pytest.raises(ValueError, match="Repository is required"):
            GitHubAPI()

    def test_init_unknown_repository(self):
        """GitHubAPI raises BackendError when the repository can't be fetched."""
        with patch("version_branch.github_api.Github") as mock_github:
            mock_github.return_value.get_repo.side_effect = UnknownObjectException(404, "Not Found", None)

            with pytest.raises(BackendError) as exc_info:
                GitHubAPI(token="test-token", repository="owner/missing")

            assert exc_info.value.status_code == 404


class TestGetRef:
    """Tests for GitHubAPI.get_ref method."""

    def test_get_ref_returns_sha(self, mock_pygithub):
        """get_ref looks up heads/<branch> and returns its SHA."""
        mock_ref = MagicMock()
        mock_ref.object.sha = "commit-sha-123"
        mock_pygithub["repo"].get_git_ref.return_value = mock_ref

        api = GitHubAPI(token="test-token", repository="owner/repo")
        result = api.get_ref("release/1.0.0")

        assert result == "commit-sha-123"
        mock_pygithub["repo"].get_git_ref.assert_called_once_with("heads/release/1.0.0")

    def test_get_ref_not_found(self, mock_pygithub):
        """get_ref raises BackendError with status 404 for a missing branch."""
        mock_pygithub["repo"].get_git_ref.side_effect = UnknownObjectException(404, "Not Found", None)

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(BackendError) as exc_info:
            api.get_ref("missing")

        assert exc_info.value.status_code == 404
        assert isinstance(exc_info.value.cause, GithubException)

    def test_get_ref_server_error(self, mock_pygithub):
        """get_ref keeps the status of other failures."""
        mock_pygithub["repo"].get_git_ref.side_effect = GithubException(500, "Server Error", None)

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(BackendError) as exc_info:
            api.get_ref("main")

        assert exc_info.value.status_code == 500

    def test_get_ref_timeout(self, mock_pygithub):
        """get_ref raises NetworkError when the request times out."""
        mock_pygithub["repo"].get_git_ref.side_effect = requests.exceptions.ReadTimeout("timed out")

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(NetworkError):
            api.get_ref("main")


class TestGetCommit:
    """Tests for GitHubAPI.get_commit method."""

    def test_get_commit_uses_full_ref(self, mock_pygithub):
        """get_commit looks up refs/heads/<branch>."""
        mock_pygithub["repo"].get_commit.return_value = MagicMock(sha="head-sha")

        api = GitHubAPI(token="test-token", repository="owner/repo")
        result = api.get_commit("main")

        assert result == "head-sha"
        mock_pygithub["repo"].get_commit.assert_called_once_with("refs/heads/main")

    def test_get_commit_failure(self, mock_pygithub):
        """get_commit raises BackendError on API failure."""
        mock_pygithub["repo"].get_commit.side_effect = GithubException(422, "No commit found", None)

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(BackendError):
            api.get_commit("main")


class TestCreateRef:
    """Tests for GitHubAPI.create_ref method."""

    def test_create_ref_uses_full_ref(self, mock_pygithub):
        """create_ref creates refs/heads/<branch> at the commit."""
        api = GitHubAPI(token="test-token", repository="owner/repo")
        api.create_ref("release-1.3.0", "commit-sha-456")

        mock_pygithub["repo"].create_git_ref.assert_called_once_with(
            ref="refs/heads/release-1.3.0",
            sha="commit-sha-456",
        )

    def test_create_ref_already_exists(self, mock_pygithub):
        """create_ref raises BackendError when the reference exists."""
        mock_pygithub["repo"].create_git_ref.side_effect = GithubException(
            422, {"message": "Reference already exists"}, None
        )

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(BackendError) as exc_info:
            api.create_ref("release-1.3.0", "commit-sha-456")

        assert exc_info.value.status_code == 422

    def test_create_ref_connection_error(self, mock_pygithub):
        """create_ref raises NetworkError when the connection fails."""
        mock_pygithub["repo"].create_git_ref.side_effect = requests.exceptions.ConnectionError("refused")

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(NetworkError):
            api.create_ref("release-1.3.0", "commit-sha-456")


class TestGetPullRequestBranches:
    """Tests for GitHubAPI.get_pull_request_branches method."""

    def test_returns_base_and_head(self, mock_pygithub):
        """get_pull_request_branches returns (base, head) ref names."""
        mock_pull = MagicMock()
        mock_pull.base.ref = "main"
        mock_pull.head.ref = "release-2.0.0"
        mock_pygithub["repo"].get_pull.return_value = mock_pull

        api = GitHubAPI(token="test-token", repository="owner/repo")
        result = api.get_pull_request_branches(42)

        assert result == ("main", "release-2.0.0")
        mock_pygithub["repo"].get_pull.assert_called_once_with(42)

    def test_missing_pull_request(self, mock_pygithub):
        """get_pull_request_branches raises BackendError for an unknown PR."""
        mock_pygithub["repo"].get_pull.side_effect = UnknownObjectException(404, "Not Found", None)

        api = GitHubAPI(token="test-token", repository="owner/repo")

        with pytest.raises(BackendError) as exc_info:
            api.get_pull_request_branches(999)

        assert exc_info.value.status_code == 404
