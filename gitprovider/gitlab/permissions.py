"""Mapping between GitLab access levels and repository permissions."""

from gitprovider.exceptions import InvalidPermissionLevelError
from gitprovider.types.enums import RepositoryPermission

# GitLab access levels: guest, reporter, developer, maintainer, owner
_PERMISSION_TO_ACCESS_LEVEL: dict[RepositoryPermission, int] = {
    RepositoryPermission.PULL: 10,
    RepositoryPermission.TRIAGE: 20,
    RepositoryPermission.PUSH: 30,
    RepositoryPermission.MAINTAIN: 40,
    RepositoryPermission.ADMIN: 50,
}

_ACCESS_LEVEL_TO_PERMISSION: dict[int, RepositoryPermission] = {
    level: permission for permission, level in _PERMISSION_TO_ACCESS_LEVEL.items()
}


def to_gitlab_permission(permission: RepositoryPermission | str) -> int:
    """
    Return the GitLab access level for a repository permission.

    Raises:
        InvalidPermissionLevelError: If permission is not a known permission
    """
    try:
        return _PERMISSION_TO_ACCESS_LEVEL[RepositoryPermission(permission)]
    except ValueError as e:
        raise InvalidPermissionLevelError(permission) from e


def from_gitlab_permission(access_level: int) -> RepositoryPermission:
    """
    Return the repository permission for a GitLab access level.

    Unknown levels are rejected, never rounded to the nearest known level.

    Raises:
        InvalidPermissionLevelError: If access_level has no mapping
    """
    # bool is an int subclass but never an access level
    if isinstance(access_level, bool) or access_level not in _ACCESS_LEVEL_TO_PERMISSION:
        raise InvalidPermissionLevelError(access_level)
    return _ACCESS_LEVEL_TO_PERMISSION[access_level]
