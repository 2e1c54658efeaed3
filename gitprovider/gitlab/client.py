"""
GitLab provider client.

Provides the entry point for managing GitLab resources.
"""

import os
from typing import Any

import httpx

from gitprovider.exceptions import ConfigurationError, NoProviderSupportError
from gitprovider.gitlab.api import GitLabAPI
from gitprovider.gitlab.clients import OrganizationsClient, OrgRepositoriesClient, UserRepositoriesClient
from gitprovider.transport import BearerTokenAuth, HTTPTransport, PrivateTokenAuth, RetryConfig, TransportHook
from gitprovider.types.enums import RepositoryPermission

PROVIDER_ID = "gitlab"
DEFAULT_DOMAIN = "gitlab.com"

TOKEN_TYPE_PAT = "pat"
TOKEN_TYPE_OAUTH2 = "oauth2"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


def _split_domain(domain: str | None) -> tuple[str, str]:
    """
    Return (domain, base URL of the v4 API) for a domain option.

    The domain may carry an explicit "http://" or "https://" scheme, e.g. for a
    self-hosted instance; refs are always compared against the bare host.
    """
    if not domain:
        domain = DEFAULT_DOMAIN
    scheme = "https"
    for prefix in ("https://", "http://"):
        if domain.startswith(prefix):
            scheme = prefix[:-3]
            domain = domain[len(prefix):]
            break
    domain = domain.rstrip("/")
    if not domain:
        raise ConfigurationError("domain cannot be empty")
    return domain, f"{scheme}://{domain}/api/v4"


def _auth_for(token: str | None, token_type: str) -> httpx.Auth | None:
    if token_type not in (TOKEN_TYPE_PAT, TOKEN_TYPE_OAUTH2):
        raise ConfigurationError(f"Invalid token type: {token_type}. Must be 'pat' or 'oauth2'")
    if not token:
        return None
    if token_type == TOKEN_TYPE_OAUTH2:
        return BearerTokenAuth(token)
    return PrivateTokenAuth(token)


class Client:
    """
    Main client for managing GitLab resources.

    Aggregates the organization and repository clients.

    Example:
        ```python
        from gitprovider import OrgRepositoryRef, OrganizationRef, RepositoryInfo
        from gitprovider.gitlab import new_client

        with new_client(token="glpat-...") as client:
            ref = OrgRepositoryRef.of(OrganizationRef("gitlab.com", "my-group"), "demo")
            repo, changed = client.org_repositories.reconcile(
                ref, RepositoryInfo(description="Demo", visibility="private")
            )
        ```
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str | None = None,
        token_type: str = TOKEN_TYPE_PAT,
        domain: str | None = None,
        destructive_calls: bool = False,
        pre_chain_hook: TransportHook | None = None,
        post_chain_hook: TransportHook | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize the GitLab client.

        Args:
            token: Personal access token or OAuth2 token. Without a token only
                public resources are accessible.
            token_type: "pat" (sent as PRIVATE-TOKEN) or "oauth2" (sent as Bearer)
            domain: GitLab instance, e.g. "gitlab.example.com" (default: gitlab.com)
            destructive_calls: Allow deleting repositories
            pre_chain_hook: Wraps the transport chain (caching, logging, instrumentation)
            post_chain_hook: Provides the innermost transport
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Configuration for retry behavior (optional)

        Raises:
            ConfigurationError: If an option is invalid
        """
        self.domain, self.base_url = _split_domain(domain)
        self.timeout = timeout

        # Create transport layer
        self._transport = HTTPTransport(
            base_url=self.base_url,
            auth=_auth_for(token, token_type),
            timeout=timeout,
            retry_config=retry_config,
            pre_chain_hook=pre_chain_hook,
            post_chain_hook=post_chain_hook,
        )
        self._api = GitLabAPI(self._transport, self.domain, destructive_calls)

        # Initialize collection clients
        self.organizations = OrganizationsClient(self._api)
        self.org_repositories = OrgRepositoriesClient(self._api)
        self.user_repositories = UserRepositoriesClient(self._api)

    @classmethod
    def from_env(
        cls,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        pre_chain_hook: TransportHook | None = None,
        post_chain_hook: TransportHook | None = None,
    ) -> "Client":
        """
        Create a client from environment variables.

        Environment variables:
            GITLAB_TOKEN: Access token (required)
            GITLAB_TOKEN_TYPE: "pat" or "oauth2" (optional, default: pat)
            GITLAB_DOMAIN: GitLab instance (optional, default: gitlab.com)
            GITLAB_DESTRUCTIVE_CALLS: "true" or "1" to allow deletes (optional)

        Returns:
            Configured Client instance

        Raises:
            ConfigurationError: If a variable is missing or invalid
        """
        token = os.environ.get("GITLAB_TOKEN")
        token_type = os.environ.get("GITLAB_TOKEN_TYPE", TOKEN_TYPE_PAT).lower()
        domain = os.environ.get("GITLAB_DOMAIN") or None
        destructive = os.environ.get("GITLAB_DESTRUCTIVE_CALLS", "").lower()

        if not token:
            raise ConfigurationError("GITLAB_TOKEN environment variable not set")

        if destructive in _TRUE_VALUES:
            destructive_calls = True
        elif destructive in _FALSE_VALUES:
            destructive_calls = False
        else:
            raise ConfigurationError(
                f"Invalid GITLAB_DESTRUCTIVE_CALLS: {destructive}. Must be 'true' or 'false'"
            )

        return cls(
            token=token,
            token_type=token_type,
            domain=domain,
            destructive_calls=destructive_calls,
            pre_chain_hook=pre_chain_hook,
            post_chain_hook=post_chain_hook,
            timeout=timeout,
            retry_config=retry_config,
        )

    def supported_domain(self) -> str:
        """The domain refs must use, e.g. "gitlab.com"."""
        return self.domain

    def provider_id(self) -> str:
        return PROVIDER_ID

    def raw(self) -> GitLabAPI:
        """The underlying GitLab API client (for advanced use cases)."""
        return self._api

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport (for advanced use cases)."""
        return self._transport

    def has_token_permission(self, permission: RepositoryPermission | str) -> bool:
        raise NoProviderSupportError("token permission checks are not supported by GitLab")

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "Client":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()


def new_client(
    token: str | None = None,
    token_type: str = TOKEN_TYPE_PAT,
    *,
    domain: str | None = None,
    destructive_calls: bool = False,
    pre_chain_hook: TransportHook | None = None,
    post_chain_hook: TransportHook | None = None,
    timeout: float = Client.DEFAULT_TIMEOUT,
    retry_config: RetryConfig | None = None,
) -> Client:
    """
    Create a GitLab client.

    See Client for the meaning of each option.

    Raises:
        ConfigurationError: If an option is invalid
    """
    return Client(
        token=token,
        token_type=token_type,
        domain=domain,
        destructive_calls=destructive_calls,
        pre_chain_hook=pre_chain_hook,
        post_chain_hook=post_chain_hook,
        timeout=timeout,
        retry_config=retry_config,
    )
