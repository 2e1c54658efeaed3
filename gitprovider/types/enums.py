"""Enumerations shared by all providers."""

from enum import Enum
from typing import Any


class IdentityType(str, Enum):
    """What kind of identity a reference points at."""

    USER = "user"
    ORGANIZATION = "organization"
    SUBORGANIZATION = "suborganization"


class TransportType(str, Enum):
    """Transport used when cloning a repository."""

    # https://<domain>/<org>/[<sub-orgs...>/]<repo>.git
    HTTPS = "https"
    # git@<domain>:<org>/[<sub-orgs...>/]<repo>.git
    GIT = "git"
    # ssh://git@<domain>/<org>/[<sub-orgs...>/]<repo>
    SSH = "ssh"


class RepositoryVisibility(str, Enum):
    """Visibility of a repository."""

    PUBLIC = "public"
    INTERNAL = "internal"
    PRIVATE = "private"


class RepositoryPermission(str, Enum):
    """
    Access level of a team for a repository.

    GitLab names these guest, reporter, developer, maintainer and owner.
    """

    PULL = "pull"
    TRIAGE = "triage"
    PUSH = "push"
    MAINTAIN = "maintain"
    ADMIN = "admin"


class MergeMethod(str, Enum):
    """How a pull request gets merged."""

    MERGE = "merge"
    SQUASH = "squash"


def is_known(enum_cls: type[Enum], value: Any) -> bool:
    """Return True if value is a member (or a member's value) of enum_cls."""
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True
