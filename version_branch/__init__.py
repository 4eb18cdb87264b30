# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Version Branch Action - Core modules."""

from version_branch.branch import BranchSyncResult, branch_name, sync_branch
from version_branch.github_api import GitHubAPI
from version_branch.resolver import BumpRequest, ResolvedVersion, resolve_version
from version_branch.version import SemanticVersion, parse_version

__all__ = [
    "BranchSyncResult",
    "BumpRequest",
    "GitHubAPI",
    "ResolvedVersion",
    "SemanticVersion",
    "branch_name",
    "parse_version",
    "resolve_version",
    "sync_branch",
]
