"""GitLab collection clients and the resources they return."""

from gitprovider.gitlab.clients.commits import BranchClient, Commit, CommitClient
from gitprovider.gitlab.clients.deploykeys import DeployKey, DeployKeyClient
from gitprovider.gitlab.clients.deploytokens import DeployToken, DeployTokenClient
from gitprovider.gitlab.clients.files import FileClient, TreeClient
from gitprovider.gitlab.clients.organizations import Organization, OrganizationsClient, Team, TeamsClient
from gitprovider.gitlab.clients.pullrequests import PullRequest, PullRequestClient
from gitprovider.gitlab.clients.repositories import (
    OrgRepositoriesClient,
    OrgRepository,
    UserRepositoriesClient,
    UserRepository,
)
from gitprovider.gitlab.clients.teamaccess import TeamAccess, TeamAccessClient

__all__ = [
    # Collection clients
    "OrganizationsClient",
    "TeamsClient",
    "OrgRepositoriesClient",
    "UserRepositoriesClient",
    "DeployKeyClient",
    "DeployTokenClient",
    "TeamAccessClient",
    "CommitClient",
    "BranchClient",
    "PullRequestClient",
    "FileClient",
    "TreeClient",
    # Resources
    "Organization",
    "Team",
    "OrgRepository",
    "UserRepository",
    "DeployKey",
    "DeployToken",
    "TeamAccess",
    "Commit",
    "PullRequest",
]
