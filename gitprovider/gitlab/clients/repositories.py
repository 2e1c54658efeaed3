"""
Repository (project) resources and clients.

A repository is reconciled in place: the desired RepositoryInfo is merged into
a copy of the actual project, and the project is updated only if the
projection of that copy differs from the projection of the actual project.
"""

import copy
from typing import TYPE_CHECKING, Any

from gitprovider.gitlab.clients.commits import BranchClient, CommitClient
from gitprovider.gitlab.clients.deploykeys import DeployKeyClient
from gitprovider.gitlab.clients.deploytokens import DeployTokenClient
from gitprovider.gitlab.clients.files import FileClient, TreeClient
from gitprovider.gitlab.clients.pullrequests import PullRequestClient
from gitprovider.gitlab.clients.teamaccess import TeamAccessClient
from gitprovider.gitlab.specs import ProjectSpec
from gitprovider.gitlab.validation import (
    repository_path,
    validate_org_repository_ref,
    validate_organization_ref,
    validate_user_ref,
    validate_user_repository_ref,
)
from gitprovider.reconcile import reconcile
from gitprovider.refs import OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
from gitprovider.types.enums import RepositoryVisibility
from gitprovider.types.repos import RepositoryCreateOptions, RepositoryInfo, validate_and_default

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import RepositoryRef


def repository_from_api(project: dict[str, Any]) -> RepositoryInfo:
    visibility = project.get("visibility")
    return RepositoryInfo(
        description=project.get("description") or "",
        default_branch=project.get("default_branch"),
        visibility=RepositoryVisibility(visibility) if visibility else None,
    )


def repository_info_to_api(info: RepositoryInfo, project: dict[str, Any]) -> None:
    """Merge the set fields of info into the GitLab project."""
    if info.description is not None:
        project["description"] = info.description
    if info.default_branch is not None:
        project["default_branch"] = info.default_branch
    if info.visibility is not None:
        project["visibility"] = RepositoryVisibility(info.visibility).value


def _create_body(
    ref: "RepositoryRef",
    info: RepositoryInfo,
    options: RepositoryCreateOptions | None = None,
) -> dict[str, Any]:
    project: dict[str, Any] = {"name": ref.get_repository(), "path": ref.get_repository()}
    repository_info_to_api(info, project)
    if options is not None and options.auto_init is not None:
        project["initialize_with_readme"] = options.auto_init
    return project


def _update_body(project: dict[str, Any]) -> dict[str, Any]:
    return {
        key: project[key]
        for key in ("name", "description", "visibility", "default_branch")
        if project.get(key) is not None
    }


def _parent_group(ref: "RepositoryRef") -> str | None:
    """Full path of the group owning ref, or None for a user repository."""
    if isinstance(ref, OrgRepositoryRef):
        return ref.get_identity()
    return None


def _differs(actual: dict[str, Any], desired: dict[str, Any]) -> bool:
    return ProjectSpec.from_api(actual) != ProjectSpec.from_api(desired)


class UserRepository:
    """
    A repository, with clients for everything that lives inside it.

    Attributes:
        deploy_keys: DeployKeyClient for the repository's deploy keys
        deploy_tokens: DeployTokenClient for the repository's deploy tokens
        commits: CommitClient for the repository's commits
        branches: BranchClient for the repository's branches
        pull_requests: PullRequestClient for the repository's merge requests
        files: FileClient for reading files
        trees: TreeClient for listing git trees
    """

    def __init__(self, api: "GitLabAPI", project: dict[str, Any], ref: "RepositoryRef") -> None:
        self._api = api
        self._project = project
        self._ref = ref

        self.deploy_keys = DeployKeyClient(api, ref)
        self.deploy_tokens = DeployTokenClient(api, ref)
        self.commits = CommitClient(api, ref)
        self.branches = BranchClient(api, ref)
        self.pull_requests = PullRequestClient(api, ref)
        self.files = FileClient(api, ref)
        self.trees = TreeClient(api, ref)

    def get(self) -> RepositoryInfo:
        return repository_from_api(self._project)

    def set(self, info: RepositoryInfo) -> None:
        """
        Apply info to the local copy of the project. Nothing is sent to GitLab.

        Raises:
            ValidationError: If info is invalid
        """
        info.validate()
        repository_info_to_api(info, self._project)

    def api_object(self) -> dict[str, Any]:
        """The raw GitLab project."""
        return self._project

    def repository(self) -> "RepositoryRef":
        return self._ref

    def update(self) -> None:
        """Send the local state to GitLab and replace it with the server's answer."""
        self._project = self._api.update_project(repository_path(self._ref), _update_body(self._project))

    def reconcile(self) -> bool:
        """
        Make the local state the actual state on GitLab.

        Returns:
            True if the project was created or updated
        """
        path = repository_path(self._ref)
        desired = self._project
        result, changed = reconcile(
            fetch=lambda: self._api.get_project(path),
            create=lambda: self._api.create_project(
                _create_body(self._ref, self.get()), group=_parent_group(self._ref)
            ),
            update=lambda actual: self._api.update_project(path, _update_body(desired)),
            needs_update=lambda actual: _differs(actual, desired),
            kind="repository",
            key=str(self._ref),
        )
        self._project = result
        return changed

    def delete(self) -> None:
        """
        Delete the repository.

        Raises:
            DestructiveCallDisallowedError: If destructive calls are disabled
        """
        self._api.delete_project(repository_path(self._ref))


class OrgRepository:
    """
    A repository owned by an organization.

    Behaves like a UserRepository and adds team access.

    Attributes:
        team_access: TeamAccessClient for the teams with access to the repository
    """

    def __init__(self, api: "GitLabAPI", project: dict[str, Any], ref: OrgRepositoryRef) -> None:
        self._repository = UserRepository(api, project, ref)
        self.team_access = TeamAccessClient(api, ref)

    @property
    def deploy_keys(self) -> DeployKeyClient:
        return self._repository.deploy_keys

    @property
    def deploy_tokens(self) -> DeployTokenClient:
        return self._repository.deploy_tokens

    @property
    def commits(self) -> CommitClient:
        return self._repository.commits

    @property
    def branches(self) -> BranchClient:
        return self._repository.branches

    @property
    def pull_requests(self) -> PullRequestClient:
        return self._repository.pull_requests

    @property
    def files(self) -> FileClient:
        return self._repository.files

    @property
    def trees(self) -> TreeClient:
        return self._repository.trees

    def get(self) -> RepositoryInfo:
        return self._repository.get()

    def set(self, info: RepositoryInfo) -> None:
        self._repository.set(info)

    def api_object(self) -> dict[str, Any]:
        return self._repository.api_object()

    def repository(self) -> "RepositoryRef":
        return self._repository.repository()

    def update(self) -> None:
        self._repository.update()

    def reconcile(self) -> bool:
        return self._repository.reconcile()

    def delete(self) -> None:
        self._repository.delete()


class _RepositoriesClient:
    """Operations shared by the user and organization repository clients."""

    def __init__(self, api: "GitLabAPI") -> None:
        """
        Initialize the repositories client.

        Args:
            api: GitLab API client
        """
        self._api = api

    def _wrap(self, project: dict[str, Any], ref: Any) -> Any:
        raise NotImplementedError

    def _validate(self, ref: Any) -> None:
        raise NotImplementedError

    def _get(self, ref: Any) -> Any:
        self._validate(ref)
        return self._wrap(self._api.get_project(repository_path(ref)), ref)

    def _create(self, ref: Any, req: RepositoryInfo, options: RepositoryCreateOptions | None) -> Any:
        self._validate(ref)
        req = validate_and_default(req)
        project = self._api.create_project(_create_body(ref, req, options), group=_parent_group(ref))
        return self._wrap(project, ref)

    def _reconcile(self, ref: Any, req: RepositoryInfo, options: RepositoryCreateOptions | None) -> tuple[Any, bool]:
        self._validate(ref)
        req = validate_and_default(req)
        path = repository_path(ref)

        def update(actual: dict[str, Any]) -> dict[str, Any]:
            desired = copy.deepcopy(actual)
            repository_info_to_api(req, desired)
            return self._api.update_project(path, _update_body(desired))

        def needs_update(actual: dict[str, Any]) -> bool:
            desired = copy.deepcopy(actual)
            repository_info_to_api(req, desired)
            return _differs(actual, desired)

        project, changed = reconcile(
            fetch=lambda: self._api.get_project(path),
            create=lambda: self._api.create_project(_create_body(ref, req, options), group=_parent_group(ref)),
            update=update,
            needs_update=needs_update,
            kind="repository",
            key=str(ref),
        )
        return self._wrap(project, ref), changed


class OrgRepositoriesClient(_RepositoriesClient):
    """Client for repositories owned by organizations (GitLab groups)."""

    def _wrap(self, project: dict[str, Any], ref: OrgRepositoryRef) -> OrgRepository:
        return OrgRepository(self._api, project, ref)

    def _validate(self, ref: OrgRepositoryRef) -> None:
        validate_org_repository_ref(ref, self._api.domain)

    def get(self, ref: OrgRepositoryRef) -> OrgRepository:
        """
        Get an organization repository.

        Raises:
            DomainUnsupportedError: If ref points at another domain
            NotFoundError: If the repository does not exist
        """
        return self._get(ref)

    def list(self, ref: OrganizationRef) -> list[OrgRepository]:
        """List the repositories of an organization, following pagination."""
        validate_organization_ref(ref, self._api.domain)
        return [
            self._wrap(project, OrgRepositoryRef.of(ref, project["path"]))
            for project in self._api.list_group_projects(ref.get_identity())
        ]

    def create(
        self,
        ref: OrgRepositoryRef,
        req: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
    ) -> OrgRepository:
        """
        Create a repository in an organization.

        Raises:
            ValidationError: If ref or req is invalid
            NotFoundError: If the organization does not exist
            AlreadyExistsError: If the repository already exists
        """
        return self._create(ref, req, options)

    def reconcile(
        self,
        ref: OrgRepositoryRef,
        req: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
    ) -> tuple[OrgRepository, bool]:
        """
        Make req the actual state of the repository at ref.

        A missing repository is created (options apply then). An existing one
        is updated in place if its description, default branch or visibility
        differ from req. Otherwise nothing is sent.

        Returns:
            Tuple of (repository, action_taken)
        """
        return self._reconcile(ref, req, options)


class UserRepositoriesClient(_RepositoriesClient):
    """Client for repositories owned by user accounts."""

    def _wrap(self, project: dict[str, Any], ref: UserRepositoryRef) -> UserRepository:
        return UserRepository(self._api, project, ref)

    def _validate(self, ref: UserRepositoryRef) -> None:
        validate_user_repository_ref(ref, self._api.domain)

    def get(self, ref: UserRepositoryRef) -> UserRepository:
        """
        Get a user repository.

        Raises:
            DomainUnsupportedError: If ref points at another domain
            NotFoundError: If the repository does not exist
        """
        return self._get(ref)

    def list(self, ref: UserRef) -> list[UserRepository]:
        """List the repositories of a user, following pagination."""
        validate_user_ref(ref, self._api.domain)
        return [
            self._wrap(project, UserRepositoryRef.of(ref, project["path"]))
            for project in self._api.list_user_projects(ref.get_identity())
        ]

    def create(
        self,
        ref: UserRepositoryRef,
        req: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
    ) -> UserRepository:
        """
        Create a repository for the authenticated user.

        Raises:
            ValidationError: If ref or req is invalid
            AlreadyExistsError: If the repository already exists
        """
        return self._create(ref, req, options)

    def reconcile(
        self,
        ref: UserRepositoryRef,
        req: RepositoryInfo,
        options: RepositoryCreateOptions | None = None,
    ) -> tuple[UserRepository, bool]:
        """
        Make req the actual state of the repository at ref.

        Returns:
            Tuple of (repository, action_taken)
        """
        return self._reconcile(ref, req, options)
