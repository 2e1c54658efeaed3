"""Reference checks run before any GitLab request is made."""

from gitprovider.exceptions import DomainUnsupportedError, InvalidArgumentError, NoProviderSupportError
from gitprovider.refs import IdentityRef, OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
from gitprovider.types.enums import IdentityType
from gitprovider.validation import validate_targets


def validate_identity_fields(ref: IdentityRef, expected_domain: str) -> None:
    """
    Check that ref points at the client's domain and at a supported identity type.

    Raises:
        DomainUnsupportedError: If ref.domain differs from expected_domain
        NoProviderSupportError: If ref points at a sub-organization
        InvalidArgumentError: If ref has any other identity type
    """
    if ref.domain != expected_domain:
        raise DomainUnsupportedError(f"domain {ref.domain!r} not supported by this client")
    identity_type = ref.get_type()
    if identity_type in (IdentityType.ORGANIZATION, IdentityType.USER):
        return
    if identity_type == IdentityType.SUBORGANIZATION:
        raise NoProviderSupportError("sub-organizations are not supported by this client")
    raise InvalidArgumentError(f"invalid identity type: {identity_type}")


def validate_organization_ref(ref: OrganizationRef, expected_domain: str) -> None:
    validate_targets("OrganizationRef", ref)
    validate_identity_fields(ref, expected_domain)


def validate_user_ref(ref: UserRef, expected_domain: str) -> None:
    validate_targets("UserRef", ref)
    validate_identity_fields(ref, expected_domain)


def validate_org_repository_ref(ref: OrgRepositoryRef, expected_domain: str) -> None:
    validate_targets("OrgRepositoryRef", ref)
    validate_identity_fields(ref, expected_domain)


def validate_user_repository_ref(ref: UserRepositoryRef, expected_domain: str) -> None:
    validate_targets("UserRepositoryRef", ref)
    validate_identity_fields(ref, expected_domain)


def repository_path(ref: OrgRepositoryRef | UserRepositoryRef) -> str:
    """Return the "namespace/project" path GitLab uses as the project id."""
    return f"{ref.get_identity()}/{ref.get_repository()}"
