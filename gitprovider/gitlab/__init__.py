"""GitLab provider for gitprovider."""

from gitprovider.gitlab.api import GitLabAPI
from gitprovider.gitlab.client import DEFAULT_DOMAIN, PROVIDER_ID, Client, new_client
from gitprovider.gitlab.permissions import from_gitlab_permission, to_gitlab_permission

__all__ = [
    "Client",
    "new_client",
    "GitLabAPI",
    "DEFAULT_DOMAIN",
    "PROVIDER_ID",
    "to_gitlab_permission",
    "from_gitlab_permission",
]
