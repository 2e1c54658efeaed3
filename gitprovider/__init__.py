"""gitprovider - declarative management of Git hosting resources on GitLab."""

from gitprovider.exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    DestructiveCallDisallowedError,
    DomainUnsupportedError,
    GitProviderError,
    HTTPError,
    InvalidArgumentError,
    InvalidCredentialsError,
    InvalidPermissionLevelError,
    InvalidServerDataError,
    MergeStatusUnavailableError,
    NoProviderSupportError,
    NotFoundError,
    RateLimitedError,
    UnexpectedEventError,
    ValidationError,
)
from gitprovider.gitlab import Client, new_client
from gitprovider.logging import configure_logging, get_logger
from gitprovider.reconcile import reconcile
from gitprovider.refs import (
    OrganizationRef,
    OrgRepositoryRef,
    RepositoryRef,
    UserRef,
    UserRepositoryRef,
    parse_org_repository_url,
    parse_organization_url,
    parse_user_repository_url,
    parse_user_url,
)
from gitprovider.transport import HTTPTransport, RetryConfig
from gitprovider.types import (
    CommitFile,
    CommitInfo,
    DeployKeyInfo,
    DeployTokenInfo,
    IdentityType,
    MergeMethod,
    OrganizationInfo,
    PullRequestInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    TeamInfo,
    TransportType,
    TreeEntry,
    TreeInfo,
    validate_and_default,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Main Client
    "Client",
    "new_client",
    # References
    "OrganizationRef",
    "OrgRepositoryRef",
    "RepositoryRef",
    "UserRef",
    "UserRepositoryRef",
    "parse_organization_url",
    "parse_user_url",
    "parse_org_repository_url",
    "parse_user_repository_url",
    # Types
    "IdentityType",
    "MergeMethod",
    "RepositoryPermission",
    "RepositoryVisibility",
    "TransportType",
    "OrganizationInfo",
    "TeamInfo",
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
    # Reconciliation
    "reconcile",
    # Exceptions
    "GitProviderError",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidServerDataError",
    "InvalidCredentialsError",
    "DestructiveCallDisallowedError",
    "DomainUnsupportedError",
    "NoProviderSupportError",
    "InvalidPermissionLevelError",
    "InvalidArgumentError",
    "ValidationError",
    "HTTPError",
    "RateLimitedError",
    "ConfigurationError",
    "UnexpectedEventError",
    "MergeStatusUnavailableError",
    # Transport
    "HTTPTransport",
    "RetryConfig",
    # Logging
    "configure_logging",
    "get_logger",
]
