"""gitprovider type definitions.

This module exports all data model types used by the SDK.
"""

from gitprovider.types.enums import (
    IdentityType,
    MergeMethod,
    RepositoryPermission,
    RepositoryVisibility,
    TransportType,
)
from gitprovider.types.orgs import OrganizationInfo, TeamInfo
from gitprovider.types.repos import (
    CommitFile,
    CommitInfo,
    DeployKeyInfo,
    DeployTokenInfo,
    PullRequestInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    TeamAccessInfo,
    TreeEntry,
    TreeInfo,
    validate_and_default,
)

__all__ = [
    # Enums
    "IdentityType",
    "MergeMethod",
    "RepositoryPermission",
    "RepositoryVisibility",
    "TransportType",
    # Organization types
    "OrganizationInfo",
    "TeamInfo",
    # Repository types
    "RepositoryInfo",
    "RepositoryCreateOptions",
    "TeamAccessInfo",
    "DeployKeyInfo",
    "DeployTokenInfo",
    "CommitInfo",
    "CommitFile",
    "PullRequestInfo",
    "TreeEntry",
    "TreeInfo",
    "validate_and_default",
]
