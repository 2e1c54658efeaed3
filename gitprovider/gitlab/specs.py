"""
Desired-state projections of GitLab API objects.

Each spec keeps only the fields a user declares and leaves out what GitLab
computes (ids, timestamps, URLs). Two objects describe the same desired state
exactly when their specs compare equal.
"""

from dataclasses import dataclass
from typing import Any

from gitprovider.types.repos import DEFAULT_BRANCH_NAME


@dataclass(frozen=True)
class ProjectSpec:
    """The declarable part of a GitLab project."""

    name: str
    path: str
    namespace: str
    description: str
    visibility: str
    default_branch: str
    archived: bool

    @classmethod
    def from_api(cls, project: dict[str, Any]) -> "ProjectSpec":
        namespace = project.get("namespace") or {}
        return cls(
            name=project.get("name") or "",
            path=project.get("path") or "",
            namespace=namespace.get("full_path", "") if isinstance(namespace, dict) else str(namespace),
            description=project.get("description") or "",
            visibility=project.get("visibility") or "",
            # Projects without commits report no default branch
            default_branch=project.get("default_branch") or DEFAULT_BRANCH_NAME,
            archived=bool(project.get("archived", False)),
        )


@dataclass(frozen=True)
class DeployKeySpec:
    """The declarable part of a GitLab deploy key."""

    title: str
    key: str
    can_push: bool

    @classmethod
    def from_api(cls, key: dict[str, Any]) -> "DeployKeySpec":
        return cls(
            title=key.get("title") or "",
            key=(key.get("key") or "").strip(),
            can_push=bool(key.get("can_push", False)),
        )


@dataclass(frozen=True)
class DeployTokenSpec:
    """The declarable part of a GitLab deploy token.

    The secret is not part of it: GitLab only returns it on creation.
    """

    name: str
    username: str

    @classmethod
    def from_api(cls, token: dict[str, Any]) -> "DeployTokenSpec":
        return cls(name=token.get("name") or "", username=token.get("username") or "")
