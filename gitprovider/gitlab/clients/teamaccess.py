"""Team access resource and client.

A team is a GitLab group; giving it access to a project shares the project
with the group. GitLab cannot change the access level of a share, so an
update unshares and shares again.
"""

from typing import TYPE_CHECKING, Any

from gitprovider.exceptions import NotFoundError
from gitprovider.gitlab.permissions import from_gitlab_permission, to_gitlab_permission
from gitprovider.gitlab.validation import repository_path
from gitprovider.reconcile import reconcile
from gitprovider.types.repos import TeamAccessInfo, validate_and_default

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import OrgRepositoryRef


def team_access_from_api(link: dict[str, Any]) -> TeamAccessInfo:
    """
    Build a TeamAccessInfo from a project's ``shared_with_groups`` entry.

    Raises:
        InvalidPermissionLevelError: If the access level is unknown
    """
    return TeamAccessInfo(
        name=link["group_full_path"],
        permission=from_gitlab_permission(link["group_access_level"]),
    )


def _share_link(group: dict[str, Any], access_level: int) -> dict[str, Any]:
    return {
        "group_id": group["id"],
        "group_name": group.get("name", ""),
        "group_full_path": group.get("full_path", ""),
        "group_access_level": access_level,
    }


def _find_link(api: "GitLabAPI", ref: "OrgRepositoryRef", team_name: str) -> dict[str, Any]:
    group = api.get_group(team_name)
    project = api.get_project(repository_path(ref))
    for link in project.get("shared_with_groups") or []:
        if link["group_id"] == group["id"]:
            return {**link, "group_full_path": group.get("full_path", team_name)}
    raise NotFoundError(f"team {team_name!r} has no access to {ref}")


def _share(api: "GitLabAPI", ref: "OrgRepositoryRef", desired: dict[str, Any]) -> dict[str, Any]:
    group = api.get_group(desired["group_full_path"])
    api.share_project(repository_path(ref), group["id"], desired["group_access_level"])
    return _share_link(group, desired["group_access_level"])


def _reshare(
    api: "GitLabAPI",
    ref: "OrgRepositoryRef",
    actual: dict[str, Any],
    desired: dict[str, Any],
) -> dict[str, Any]:
    api.unshare_project(repository_path(ref), actual["group_id"])
    return _share(api, ref, desired)


def _desired_link(info: TeamAccessInfo) -> dict[str, Any]:
    return {"group_full_path": info.name, "group_access_level": to_gitlab_permission(info.permission)}


class TeamAccess:
    """A team's access to an organization repository."""

    def __init__(self, api: "GitLabAPI", ref: "OrgRepositoryRef", link: dict[str, Any]) -> None:
        self._api = api
        self._ref = ref
        self._link = link

    def get(self) -> TeamAccessInfo:
        return team_access_from_api(self._link)

    def set(self, info: TeamAccessInfo) -> None:
        """
        Apply info to the local state. Nothing is sent to GitLab.

        Raises:
            ValidationError: If info is invalid
        """
        info = validate_and_default(info)
        self._link = {**self._link, **_desired_link(info)}

    def api_object(self) -> dict[str, Any]:
        """The project's ``shared_with_groups`` entry for this team."""
        return self._link

    def repository(self) -> "OrgRepositoryRef":
        return self._ref

    def update(self) -> None:
        self._link = _reshare(self._api, self._ref, self._link, self._link)

    def delete(self) -> None:
        self._api.unshare_project(repository_path(self._ref), self._link["group_id"])

    def reconcile(self) -> bool:
        desired = self._link
        result, changed = reconcile(
            fetch=lambda: _find_link(self._api, self._ref, desired["group_full_path"]),
            create=lambda: _share(self._api, self._ref, desired),
            update=lambda actual: _reshare(self._api, self._ref, actual, desired),
            needs_update=lambda actual: actual["group_access_level"] != desired["group_access_level"],
            kind="team_access",
            key=f"{self._ref}/{desired['group_full_path']}",
        )
        self._link = result
        return changed


class TeamAccessClient:
    """Client for the teams that have access to an organization repository."""

    def __init__(self, api: "GitLabAPI", ref: "OrgRepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def get(self, team_name: str) -> TeamAccess:
        """
        Get the access of a team, by the full path of its group.

        Raises:
            NotFoundError: If the team does not exist or has no access
        """
        return TeamAccess(self._api, self._ref, _find_link(self._api, self._ref, team_name))

    def list(self) -> list[TeamAccess]:
        """List the teams with access to the repository."""
        project = self._api.get_project(repository_path(self._ref))
        return [TeamAccess(self._api, self._ref, link) for link in project.get("shared_with_groups") or []]

    def create(self, req: TeamAccessInfo) -> TeamAccess:
        """
        Give a team access to the repository.

        Raises:
            ValidationError: If req is invalid
            NotFoundError: If the team does not exist
            AlreadyExistsError: If the team already has access
        """
        req = validate_and_default(req)
        return TeamAccess(self._api, self._ref, _share(self._api, self._ref, _desired_link(req)))

    def reconcile(self, req: TeamAccessInfo) -> tuple[TeamAccess, bool]:
        """
        Make req the actual access of the team req.name.

        Returns:
            Tuple of (team access, action_taken)
        """
        req = validate_and_default(req)
        desired = _desired_link(req)
        result, changed = reconcile(
            fetch=lambda: _find_link(self._api, self._ref, req.name),
            create=lambda: _share(self._api, self._ref, desired),
            update=lambda actual: _reshare(self._api, self._ref, actual, desired),
            needs_update=lambda actual: actual["group_access_level"] != desired["group_access_level"],
            kind="team_access",
            key=f"{self._ref}/{req.name}",
        )
        return TeamAccess(self._api, self._ref, result), changed
