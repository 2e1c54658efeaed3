"""Repository-related data models."""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol, TypeVar

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from gitprovider.types.enums import RepositoryPermission, RepositoryVisibility, is_known
from gitprovider.validation import FIELD_ENUM_INVALID, FIELD_INVALID, Validator

DEFAULT_REPOSITORY_VISIBILITY = RepositoryVisibility.PRIVATE
DEFAULT_REPOSITORY_PERMISSION = RepositoryPermission.PULL
DEFAULT_BRANCH_NAME = "main"
DEFAULT_DEPLOY_KEY_READ_ONLY = True


class InfoRequest(Protocol):
    """A desired-state object that can be validated and defaulted."""

    def validate(self) -> None: ...

    def default(self) -> None: ...


InfoT = TypeVar("InfoT", bound=InfoRequest)


def validate_and_default(info: InfoT) -> InfoT:
    """
    Validate info and return a defaulted copy of it.

    Defaulting fills unset optional fields with provider defaults, which keeps
    the diff between desired and actual state minimal.

    Raises:
        ValidationError: If info is invalid
    """
    info.validate()
    defaulted = dataclasses.replace(info)  # type: ignore[type-var]
    defaulted.default()
    return defaulted


def _equal_after_defaults(desired: InfoRequest, actual: object) -> bool:
    """Compare two infos of the same type with their unset fields defaulted."""
    if type(actual) is not type(desired):
        return False
    left = dataclasses.replace(desired)  # type: ignore[type-var]
    right = dataclasses.replace(actual)  # type: ignore[type-var]
    try:
        left.default()
        right.default()
    except ValueError:
        # Unknown enum values cannot be defaulted
        return desired == actual
    return left == right


@dataclass
class RepositoryInfo:
    """Desired state of a repository."""

    description: str | None = None
    # Default value at POST-time: "main".
    default_branch: str | None = None
    # Default value at POST-time: private.
    visibility: RepositoryVisibility | str | None = None

    def default(self) -> None:
        if self.visibility is None:
            self.visibility = DEFAULT_REPOSITORY_VISIBILITY
        else:
            self.visibility = RepositoryVisibility(self.visibility)
        if self.default_branch is None:
            self.default_branch = DEFAULT_BRANCH_NAME

    def validate(self) -> None:
        validator = Validator("Repository")
        if self.visibility is not None and not is_known(RepositoryVisibility, self.visibility):
            validator.append(FIELD_ENUM_INVALID, self.visibility, "Visibility")
        validator.raise_if_errors()

    def equals(self, actual: object) -> bool:
        return _equal_after_defaults(self, actual)


@dataclass
class RepositoryCreateOptions:
    """Options applied only when a repository is created."""

    # Create an initial commit with a README.
    auto_init: bool | None = None


@dataclass
class TeamAccessInfo:
    """A team's access to a repository."""

    # May contain slashes, e.g. "my-org/my-team".
    name: str = ""
    # Default: pull.
    permission: RepositoryPermission | str | None = None

    def default(self) -> None:
        if self.permission is None:
            self.permission = DEFAULT_REPOSITORY_PERMISSION
        else:
            self.permission = RepositoryPermission(self.permission)

    def validate(self) -> None:
        validator = Validator("TeamAccess")
        if not self.name:
            validator.required("Name")
        if self.permission is not None and not is_known(RepositoryPermission, self.permission):
            validator.append(FIELD_ENUM_INVALID, self.permission, "Permission")
        validator.raise_if_errors()

    def equals(self, actual: object) -> bool:
        return _equal_after_defaults(self, actual)


@dataclass
class DeployKeyInfo:
    """A deploy (SSH) key registered on a repository."""

    name: str = ""
    # Public part of the key, in OpenSSH format.
    key: bytes = b""
    # Default value at POST-time: True.
    read_only: bool | None = None

    def default(self) -> None:
        if self.read_only is None:
            self.read_only = DEFAULT_DEPLOY_KEY_READ_ONLY

    def validate(self) -> None:
        validator = Validator("DeployKey")
        if not self.name:
            validator.required("Name")
        if not self.key:
            validator.required("Key")
        elif not _is_ssh_public_key(self.key):
            validator.append(FIELD_INVALID, None, "Key")
        validator.raise_if_errors()

    def equals(self, actual: object) -> bool:
        return _equal_after_defaults(self, actual)


def _is_ssh_public_key(key: bytes) -> bool:
    try:
        serialization.load_ssh_public_key(key.strip())
    except (ValueError, UnsupportedAlgorithm):
        return False
    return True


@dataclass
class DeployTokenInfo:
    """A deploy token of a repository.

    The token secret is only known right after creation.
    """

    name: str = ""
    username: str = ""
    token: str = ""

    def default(self) -> None:
        pass

    def validate(self) -> None:
        validator = Validator("DeployToken")
        if not self.name:
            validator.required("Name")
        validator.raise_if_errors()

    def equals(self, actual: object) -> bool:
        return _equal_after_defaults(self, actual)


@dataclass
class CommitInfo:
    """A commit in a repository."""

    sha: str
    author: str
    message: str
    created_at: datetime | None
    web_url: str


@dataclass
class CommitFile:
    """A file to add to a commit. ``content=None`` deletes the file."""

    path: str
    content: str | None


@dataclass
class PullRequestInfo:
    """A pull (merge) request."""

    number: int
    title: str
    description: str | None
    source_branch: str
    target_branch: str
    merged: bool
    web_url: str


@dataclass
class TreeEntry:
    """A blob or subtree inside a git tree."""

    path: str
    # 100644 file, 100755 executable, 040000 subdirectory, 160000 submodule, 120000 symlink
    mode: str
    # "blob", "tree" or "commit"
    type: str
    size: int
    sha: str
    url: str = ""


@dataclass
class TreeInfo:
    """A git tree."""

    sha: str
    tree: list[TreeEntry] = field(default_factory=list)
    truncated: bool = False
