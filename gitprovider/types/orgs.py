"""Organization-related data models."""

from dataclasses import dataclass, field


@dataclass
class OrganizationInfo:
    """A top-level organization (a GitLab group)."""

    # Human-friendly name, e.g. "Flux".
    name: str | None = None
    description: str | None = None


@dataclass
class TeamInfo:
    """A team of users inside an organization."""

    # May contain slashes to point at nested subgroups.
    name: str
    # User logins of the team members.
    members: list[str] = field(default_factory=list)
