"""
Tests for desired-state types and the permission mapping.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from gitprovider.exceptions import InvalidPermissionLevelError, ValidationError
from gitprovider.gitlab.permissions import from_gitlab_permission, to_gitlab_permission
from gitprovider.testing import generate_ssh_public_key
from gitprovider.types import (
    DeployKeyInfo,
    DeployTokenInfo,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    validate_and_default,
)

KNOWN_LEVELS = {10, 20, 30, 40, 50}


# ============================================================================
# Permissions
# ============================================================================


@given(permission=st.sampled_from(list(RepositoryPermission)))
@settings(max_examples=20)
def test_permission_round_trip(permission: RepositoryPermission) -> None:
    """
    Property 1: The permission mapping is a bijection

    For every permission P, from_gitlab_permission(to_gitlab_permission(P)) SHALL be P.
    """
    level = to_gitlab_permission(permission)

    assert level in KNOWN_LEVELS
    assert from_gitlab_permission(level) is permission


@given(level=st.integers().filter(lambda n: n not in KNOWN_LEVELS))
@settings(max_examples=100)
def test_unknown_access_levels_rejected(level: int) -> None:
    """
    Property 2: Unknown access levels are never rounded

    For any integer that is not a known GitLab access level,
    from_gitlab_permission SHALL raise InvalidPermissionLevelError.
    """
    with pytest.raises(InvalidPermissionLevelError):
        from_gitlab_permission(level)


def test_permission_levels() -> None:
    assert [to_gitlab_permission(p) for p in RepositoryPermission] == [10, 20, 30, 40, 50]
    assert to_gitlab_permission("push") == 30


@pytest.mark.parametrize("value", ["owner", "", "PUSH"])
def test_unknown_permission_rejected(value: str) -> None:
    with pytest.raises(InvalidPermissionLevelError) as exc_info:
        to_gitlab_permission(value)

    assert exc_info.value.value == value


def test_bool_is_not_an_access_level() -> None:
    with pytest.raises(InvalidPermissionLevelError):
        from_gitlab_permission(True)


# ============================================================================
# Info validation and defaulting
# ============================================================================


def test_repository_info_defaults() -> None:
    info = RepositoryInfo(description="d")

    defaulted = validate_and_default(info)

    assert defaulted == RepositoryInfo(description="d", default_branch="main", visibility=RepositoryVisibility.PRIVATE)
    assert info.visibility is None


def test_repository_info_keeps_set_fields() -> None:
    defaulted = validate_and_default(RepositoryInfo(default_branch="trunk", visibility="public"))

    assert defaulted.default_branch == "trunk"
    assert defaulted.visibility is RepositoryVisibility.PUBLIC


def test_repository_info_invalid_visibility() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_and_default(RepositoryInfo(visibility="secret"))

    assert exc_info.value.errors[0].field_path == "Repository.Visibility"


def test_team_access_info_defaults_to_pull() -> None:
    defaulted = validate_and_default(TeamAccessInfo(name="org/devs"))

    assert defaulted.permission is RepositoryPermission.PULL


def test_deploy_key_info_defaults_read_only() -> None:
    defaulted = validate_and_default(DeployKeyInfo(name="ci", key=generate_ssh_public_key()))

    assert defaulted.read_only is True


def test_deploy_key_info_requires_fields() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_and_default(DeployKeyInfo())

    assert [e.field_path for e in exc_info.value.errors] == ["DeployKey.Name", "DeployKey.Key"]


def test_deploy_token_info_requires_name() -> None:
    with pytest.raises(ValidationError):
        validate_and_default(DeployTokenInfo(username="bot"))

    assert validate_and_default(DeployTokenInfo(name="ci")) == DeployTokenInfo(name="ci")


# ============================================================================
# Info equality
# ============================================================================


def test_unset_fields_equal_their_defaults() -> None:
    assert RepositoryInfo(description="d").equals(
        RepositoryInfo(description="d", default_branch="main", visibility=RepositoryVisibility.PRIVATE)
    )
    assert TeamAccessInfo(name="org/devs").equals(TeamAccessInfo(name="org/devs", permission="pull"))


def test_equals_detects_differences() -> None:
    key = generate_ssh_public_key()

    assert not RepositoryInfo(visibility="public").equals(RepositoryInfo())
    assert not TeamAccessInfo(name="org/devs", permission="push").equals(TeamAccessInfo(name="org/devs"))
    assert not DeployKeyInfo(name="ci", key=key, read_only=False).equals(DeployKeyInfo(name="ci", key=key))
    assert not DeployTokenInfo(name="ci").equals(DeployTokenInfo(name="deploy"))


def test_equals_rejects_other_types() -> None:
    assert not DeployTokenInfo(name="ci").equals(DeployKeyInfo(name="ci"))
    assert not RepositoryInfo().equals(None)


def test_equals_leaves_operands_untouched() -> None:
    info = RepositoryInfo()

    assert info.equals(RepositoryInfo())
    assert info.visibility is None


def test_equals_with_unknown_enum_value() -> None:
    assert RepositoryInfo(visibility="secret").equals(RepositoryInfo(visibility="secret"))
    assert not RepositoryInfo(visibility="secret").equals(RepositoryInfo())
