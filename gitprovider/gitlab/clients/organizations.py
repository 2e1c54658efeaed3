"""Organization (GitLab group) and team resources and clients."""

from typing import TYPE_CHECKING, Any

from gitprovider.exceptions import NoProviderSupportError
from gitprovider.gitlab.validation import validate_organization_ref
from gitprovider.refs import OrganizationRef
from gitprovider.types.orgs import OrganizationInfo, TeamInfo

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI


def organization_from_api(group: dict[str, Any]) -> OrganizationInfo:
    return OrganizationInfo(name=group.get("name"), description=group.get("description"))


class Organization:
    """
    An organization.

    Attributes:
        teams: TeamsClient for the organization's teams (subgroups)
    """

    def __init__(self, api: "GitLabAPI", group: dict[str, Any], ref: OrganizationRef) -> None:
        self._group = group
        self._ref = ref
        self.teams = TeamsClient(api, ref)

    def get(self) -> OrganizationInfo:
        return organization_from_api(self._group)

    def api_object(self) -> dict[str, Any]:
        """The raw GitLab group."""
        return self._group

    def organization(self) -> OrganizationRef:
        return self._ref


class Team:
    """A team: a subgroup of an organization and its members."""

    def __init__(self, members: list[dict[str, Any]], info: TeamInfo, ref: OrganizationRef) -> None:
        self._members = members
        self._info = info
        self._ref = ref

    def get(self) -> TeamInfo:
        return TeamInfo(name=self._info.name, members=list(self._info.members))

    def api_object(self) -> list[dict[str, Any]]:
        """The raw GitLab group members."""
        return self._members

    def organization(self) -> OrganizationRef:
        return self._ref


class TeamsClient:
    """Client for the teams of one organization."""

    def __init__(self, api: "GitLabAPI", ref: OrganizationRef) -> None:
        self._api = api
        self._ref = ref

    def get(self, team_name: str) -> Team:
        """
        Get a team and its members.

        Args:
            team_name: Path of the subgroup relative to the organization

        Raises:
            NotFoundError: If the team does not exist
        """
        members = self._api.list_group_members(f"{self._ref.get_identity()}/{team_name}")
        info = TeamInfo(name=team_name, members=[m["username"] for m in members])
        return Team(members, info, self._ref)

    def list(self) -> list[Team]:
        """List all teams, fetching the members of each one."""
        subgroups = self._api.list_subgroups(self._ref.get_identity())
        return [self.get(group["path"]) for group in subgroups]


class OrganizationsClient:
    """Client for organizations."""

    def __init__(self, api: "GitLabAPI") -> None:
        self._api = api

    def get(self, ref: OrganizationRef) -> Organization:
        """
        Get an organization.

        Raises:
            DomainUnsupportedError: If ref points at another domain
            NoProviderSupportError: If ref points at a sub-organization
            NotFoundError: If the organization does not exist
        """
        validate_organization_ref(ref, self._api.domain)
        group = self._api.get_group(ref.get_identity())
        return Organization(self._api, group, ref)

    def children(self, ref: OrganizationRef) -> list[Organization]:
        raise NoProviderSupportError("sub-organizations are not supported by this client")

    def list(self) -> list[Organization]:
        """List all organizations the authenticated user can see."""
        return [
            Organization(self._api, group, OrganizationRef(self._api.domain, group["full_path"]))
            for group in self._api.list_groups()
        ]
