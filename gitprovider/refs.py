"""
References to identities and repositories.

A reference identifies a resource without fetching it. References are frozen
value objects; they are created by the caller and never mutated.
"""

from dataclasses import dataclass
from typing import Protocol, Union
from urllib.parse import urlsplit

from gitprovider.exceptions import InvalidArgumentError
from gitprovider.types.enums import IdentityType, TransportType
from gitprovider.validation import Validator


class IdentityRef(Protocol):
    """A reference to a user account or an organization."""

    domain: str

    def get_identity(self) -> str: ...

    def get_type(self) -> IdentityType: ...

    def validate_fields(self, validator: Validator) -> None: ...


@dataclass(frozen=True)
class UserRef:
    """A user account, e.g. ``UserRef("gitlab.com", "alice")``."""

    # e.g. "gitlab.com" or "self-hosted-gitlab.com:6443"
    domain: str
    user_login: str

    def get_identity(self) -> str:
        return self.user_login

    def get_type(self) -> IdentityType:
        return IdentityType.USER

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.get_identity()}"

    def validate_fields(self, validator: Validator) -> None:
        if not self.domain:
            validator.required("Domain")
        if not self.user_login:
            validator.required("UserLogin")


@dataclass(frozen=True)
class OrganizationRef:
    """An organization, optionally narrowed down to nested sub-organizations."""

    domain: str
    # URL-friendly name, e.g. "fluxcd"
    organization: str
    # "gitlab.com/fluxcd/engineering/frontend" yields ("engineering", "frontend")
    sub_organizations: tuple[str, ...] = ()

    def get_identity(self) -> str:
        return "/".join([self.organization, *self.sub_organizations])

    def get_type(self) -> IdentityType:
        if self.sub_organizations:
            return IdentityType.SUBORGANIZATION
        return IdentityType.ORGANIZATION

    def __str__(self) -> str:
        return f"https://{self.domain}/{self.get_identity()}"

    def validate_fields(self, validator: Validator) -> None:
        if not self.domain:
            validator.required("Domain")
        if not self.organization:
            validator.required("Organization")


@dataclass(frozen=True)
class OrgRepositoryRef:
    """A repository owned by an organization."""

    domain: str
    organization: str
    repository_name: str
    sub_organizations: tuple[str, ...] = ()

    @classmethod
    def of(cls, org: OrganizationRef, repository_name: str) -> "OrgRepositoryRef":
        return cls(org.domain, org.organization, repository_name, org.sub_organizations)

    @property
    def organization_ref(self) -> OrganizationRef:
        return OrganizationRef(self.domain, self.organization, self.sub_organizations)

    def get_identity(self) -> str:
        return self.organization_ref.get_identity()

    def get_type(self) -> IdentityType:
        return self.organization_ref.get_type()

    def get_repository(self) -> str:
        return self.repository_name

    def get_clone_url(self, transport: TransportType | str) -> str:
        return get_clone_url(self, transport)

    def __str__(self) -> str:
        return f"{self.organization_ref}/{self.repository_name}"

    def validate_fields(self, validator: Validator) -> None:
        self.organization_ref.validate_fields(validator)
        if not self.repository_name:
            validator.required("RepositoryName")


@dataclass(frozen=True)
class UserRepositoryRef:
    """A repository owned by a user account."""

    domain: str
    user_login: str
    repository_name: str

    @classmethod
    def of(cls, user: UserRef, repository_name: str) -> "UserRepositoryRef":
        return cls(user.domain, user.user_login, repository_name)

    @property
    def user_ref(self) -> UserRef:
        return UserRef(self.domain, self.user_login)

    def get_identity(self) -> str:
        return self.user_login

    def get_type(self) -> IdentityType:
        return IdentityType.USER

    def get_repository(self) -> str:
        return self.repository_name

    def get_clone_url(self, transport: TransportType | str) -> str:
        return get_clone_url(self, transport)

    def __str__(self) -> str:
        return f"{self.user_ref}/{self.repository_name}"

    def validate_fields(self, validator: Validator) -> None:
        self.user_ref.validate_fields(validator)
        if not self.repository_name:
            validator.required("RepositoryName")


RepositoryRef = Union[OrgRepositoryRef, UserRepositoryRef]


def get_clone_url(ref: RepositoryRef, transport: TransportType | str) -> str:
    """
    Return the URL to clone ref over the given transport.

    An unknown transport yields an empty string.
    """
    try:
        transport = TransportType(transport)
    except ValueError:
        return ""
    if transport is TransportType.HTTPS:
        return f"{ref}.git"
    if transport is TransportType.GIT:
        return f"git@{ref.domain}:{ref.get_identity()}/{ref.get_repository()}.git"
    return f"ssh://git@{ref.domain}/{ref.get_identity()}/{ref.get_repository()}"


# ============================================================================
# URL parsing
# ============================================================================


def _url_error(code: str, message: str, url: str) -> InvalidArgumentError:
    return InvalidArgumentError(f"{message}: {url}", code=code)


def _parse_url(url: str) -> tuple[str, list[str]]:
    if not url:
        raise InvalidArgumentError("url cannot be empty", code="URL_INVALID")
    parts = urlsplit(url)
    # Only explicit https URLs round-trip cleanly
    if parts.scheme != "https":
        raise _url_error("URL_UNSUPPORTED_SCHEME", "unsupported URL scheme, only HTTPS supported", url)
    if parts.fragment or parts.query or parts.username or parts.password:
        raise _url_error(
            "URL_UNSUPPORTED_PARTS",
            "URL cannot have fragments, query values nor user information",
            url,
        )
    path_parts = parts.path.strip("/").split("/")
    if any(not p for p in path_parts):
        raise _url_error("URL_INVALID", "invalid organization, user or repository URL", url)
    return parts.netloc, path_parts


def parse_organization_url(url: str) -> OrganizationRef:
    """Parse e.g. ``https://gitlab.com/fluxcd/engineering`` into an OrganizationRef."""
    domain, parts = _parse_url(url)
    return OrganizationRef(domain, parts[0], tuple(parts[1:]))


def parse_user_url(url: str) -> UserRef:
    """Parse e.g. ``https://gitlab.com/alice`` into a UserRef."""
    org = parse_organization_url(url)
    if org.sub_organizations:
        raise _url_error("URL_INVALID", "invalid organization, user or repository URL", url)
    return UserRef(org.domain, org.organization)


def _parse_repository_url(url: str) -> tuple[OrganizationRef, str]:
    org = parse_organization_url(url)
    # The repository name is the last path part
    if not org.sub_organizations:
        raise _url_error("URL_MISSING_REPO_NAME", "missing repository name", url)
    repo_name = org.sub_organizations[-1].removesuffix(".git")
    return OrganizationRef(org.domain, org.organization, org.sub_organizations[:-1]), repo_name


def parse_org_repository_url(url: str) -> OrgRepositoryRef:
    """Parse an HTTPS clone URL into an OrgRepositoryRef."""
    org, repo_name = _parse_repository_url(url)
    return OrgRepositoryRef.of(org, repo_name)


def parse_user_repository_url(url: str) -> UserRepositoryRef:
    """Parse an HTTPS clone URL into a UserRepositoryRef."""
    org, repo_name = _parse_repository_url(url)
    if org.sub_organizations:
        raise _url_error("URL_INVALID", "invalid organization, user or repository URL", url)
    return UserRepositoryRef(org.domain, org.organization, repo_name)
