"""
GitLab capability client.

GitLabAPI is the only place that talks to the GitLab REST API. Every method
issues its request(s) through the HTTP transport, follows pagination for list
endpoints, validates the objects GitLab returns and relies on the transport
for error normalization. Returned objects are the raw GitLab JSON dicts.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gitprovider.exceptions import DestructiveCallDisallowedError, InvalidServerDataError
from gitprovider.logging import get_logger
from gitprovider.types.enums import RepositoryVisibility, is_known
from gitprovider.types.repos import DEFAULT_BRANCH_NAME
from gitprovider.validation import FIELD_ENUM_INVALID, Validator

if TYPE_CHECKING:
    from gitprovider.transport import HTTPTransport

logger = get_logger()

DEFAULT_DEPLOY_TOKEN_SCOPES = ["read_repository"]


def _encode(value: str | int) -> str:
    """Encode a project or group path for use as a single URL path segment."""
    return quote(str(value), safe="")


def _validate_api_object(name: str, obj: Any, fn: Callable[[dict[str, Any], Validator], None]) -> None:
    """
    Run fn against obj and raise InvalidServerDataError if it registered errors.

    Raises:
        InvalidServerDataError: If obj is not a dict or fails validation
    """
    validator = Validator(name)
    if not isinstance(obj, dict):
        raise InvalidServerDataError(f"{name}: expected a JSON object, got {type(obj).__name__}")
    fn(obj, validator)
    err = validator.error()
    if err is not None:
        raise InvalidServerDataError(err.message, err.errors) from err


def _check_group(obj: dict[str, Any], validator: Validator) -> None:
    if not obj.get("id"):
        validator.required("ID")
    if not obj.get("path"):
        validator.required("Path")
    if not obj.get("full_path"):
        validator.required("FullPath")


def _check_project(obj: dict[str, Any], validator: Validator) -> None:
    if not obj.get("name"):
        validator.required("Name")
    if not obj.get("path"):
        validator.required("Path")
    visibility = obj.get("visibility")
    if visibility and not is_known(RepositoryVisibility, visibility):
        validator.append(FIELD_ENUM_INVALID, visibility, "Visibility")
    # Empty projects have no default branch yet
    if not obj.get("default_branch"):
        obj["default_branch"] = DEFAULT_BRANCH_NAME


def _check_deploy_key(obj: dict[str, Any], validator: Validator) -> None:
    if not obj.get("title"):
        validator.required("Title")
    if not obj.get("key"):
        validator.required("Key")


def _check_deploy_token(obj: dict[str, Any], validator: Validator) -> None:
    if not obj.get("name"):
        validator.required("Name")
    if not obj.get("username"):
        validator.required("Username")


def _check_merge_request(obj: dict[str, Any], validator: Validator) -> None:
    if not obj.get("iid"):
        validator.required("IID")


def _check_commit(obj: dict[str, Any], validator: Validator) -> None:
    if not obj.get("id"):
        validator.required("ID")


def _check_file(obj: dict[str, Any], validator: Validator) -> None:
    if "content" not in obj:
        validator.required("Content")


def _validated(name: str, fn: Callable[[dict[str, Any], Validator], None], obj: Any) -> Any:
    _validate_api_object(name, obj, fn)
    return obj


def _validated_all(name: str, fn: Callable[[dict[str, Any], Validator], None], objs: list[Any]) -> list[Any]:
    for obj in objs:
        _validate_api_object(name, obj, fn)
    return objs


class GitLabAPI:
    """
    Narrow GitLab REST v4 client used by all collection clients and resources.

    Example:
        ```python
        api = GitLabAPI(transport, domain="gitlab.com")
        project = api.get_project("fluxcd/flux2")
        print(project["web_url"])
        ```
    """

    def __init__(
        self,
        transport: "HTTPTransport",
        domain: str,
        destructive_calls: bool = False,
    ) -> None:
        """
        Initialize the GitLab API client.

        Args:
            transport: HTTP transport for making requests
            domain: Domain the transport talks to, e.g. "gitlab.com"
            destructive_calls: Allow calls that delete repositories
        """
        self.transport = transport
        self.domain = domain
        self.destructive_calls = destructive_calls

    # ========================================================================
    # Groups
    # ========================================================================

    def get_group(self, group: str | int) -> dict[str, Any]:
        """
        Get a group by full path or numeric id.

        Raises:
            NotFoundError: If the group does not exist
            InvalidServerDataError: If GitLab returned a malformed group
        """
        # GET /groups/{group}
        data = self.transport.request("GET", f"/groups/{_encode(group)}")
        return _validated("GitLab.Group", _check_group, data)

    def list_groups(self) -> list[dict[str, Any]]:
        """List all groups visible to the authenticated user."""
        # GET /groups
        return _validated_all("GitLab.Group", _check_group, self.transport.paginate("/groups"))

    def list_subgroups(self, group: str | int) -> list[dict[str, Any]]:
        """List the direct subgroups of a group."""
        # GET /groups/{group}/subgroups
        data = self.transport.paginate(f"/groups/{_encode(group)}/subgroups")
        return _validated_all("GitLab.Group", _check_group, data)

    def list_group_members(self, group: str | int) -> list[dict[str, Any]]:
        """List the direct members of a group."""
        # GET /groups/{group}/members
        return self.transport.paginate(f"/groups/{_encode(group)}/members")

    # ========================================================================
    # Projects
    # ========================================================================

    def get_project(self, project: str | int) -> dict[str, Any]:
        """
        Get a project by "namespace/path" or numeric id.

        Raises:
            NotFoundError: If the project does not exist
            InvalidServerDataError: If GitLab returned a malformed project
        """
        # GET /projects/{project}
        data = self.transport.request("GET", f"/projects/{_encode(project)}")
        return _validated("GitLab.Project", _check_project, data)

    def list_group_projects(self, group: str | int) -> list[dict[str, Any]]:
        """List the projects of a group."""
        # GET /groups/{group}/projects
        data = self.transport.paginate(f"/groups/{_encode(group)}/projects")
        return _validated_all("GitLab.Project", _check_project, data)

    def list_user_projects(self, user: str | int) -> list[dict[str, Any]]:
        """List the projects owned by a user."""
        # GET /users/{user}/projects
        data = self.transport.paginate(f"/users/{_encode(user)}/projects")
        return _validated_all("GitLab.Project", _check_project, data)

    def create_project(self, body: dict[str, Any], group: str | None = None) -> dict[str, Any]:
        """
        Create a project.

        Args:
            body: Create parameters (name, path, description, visibility, ...)
            group: Full path of the parent group. None creates the project
                in the namespace of the authenticated user.

        Returns:
            The created project

        Raises:
            NotFoundError: If the parent group does not exist
            AlreadyExistsError: If the project already exists
        """
        body = dict(body)
        if group is not None:
            body["namespace_id"] = self.get_group(group)["id"]
        # POST /projects
        data = self.transport.request("POST", "/projects", body=body)
        return _validated("GitLab.Project", _check_project, data)

    def update_project(self, project: str | int, body: dict[str, Any]) -> dict[str, Any]:
        """Update a project in place and return the new state."""
        # PUT /projects/{project}
        data = self.transport.request("PUT", f"/projects/{_encode(project)}", body=body)
        return _validated("GitLab.Project", _check_project, data)

    def delete_project(self, project: str | int) -> None:
        """
        Delete a project.

        Raises:
            DestructiveCallDisallowedError: If the client was not built with
                destructive calls enabled. No request is made in that case.
        """
        if not self.destructive_calls:
            raise DestructiveCallDisallowedError(f"cannot delete repository {project}: destructive calls are disabled")
        logger.warning("Deleting GitLab project %s", project)
        # DELETE /projects/{project}
        self.transport.request("DELETE", f"/projects/{_encode(project)}")

    # ========================================================================
    # Deploy keys
    # ========================================================================

    def list_keys(self, project: str | int) -> list[dict[str, Any]]:
        # GET /projects/{project}/deploy_keys
        data = self.transport.paginate(f"/projects/{_encode(project)}/deploy_keys")
        return _validated_all("GitLab.Key", _check_deploy_key, data)

    def create_key(self, project: str | int, body: dict[str, Any]) -> dict[str, Any]:
        # POST /projects/{project}/deploy_keys
        data = self.transport.request("POST", f"/projects/{_encode(project)}/deploy_keys", body=body)
        return _validated("GitLab.Key", _check_deploy_key, data)

    def delete_key(self, project: str | int, key_id: int) -> None:
        # DELETE /projects/{project}/deploy_keys/{key_id}
        self.transport.request("DELETE", f"/projects/{_encode(project)}/deploy_keys/{key_id}")

    # ========================================================================
    # Deploy tokens
    # ========================================================================

    def list_tokens(self, project: str | int) -> list[dict[str, Any]]:
        # GET /projects/{project}/deploy_tokens
        data = self.transport.paginate(f"/projects/{_encode(project)}/deploy_tokens")
        return _validated_all("GitLab.Token", _check_deploy_token, data)

    def create_token(self, project: str | int, body: dict[str, Any]) -> dict[str, Any]:
        """Create a deploy token. The response is the only one carrying the secret."""
        body = dict(body)
        body.setdefault("scopes", list(DEFAULT_DEPLOY_TOKEN_SCOPES))
        # POST /projects/{project}/deploy_tokens
        data = self.transport.request("POST", f"/projects/{_encode(project)}/deploy_tokens", body=body)
        return _validated("GitLab.Token", _check_deploy_token, data)

    def delete_token(self, project: str | int, token_id: int) -> None:
        # DELETE /projects/{project}/deploy_tokens/{token_id}
        self.transport.request("DELETE", f"/projects/{_encode(project)}/deploy_tokens/{token_id}")

    # ========================================================================
    # Group sharing
    # ========================================================================

    def share_project(self, project: str | int, group_id: int, group_access: int) -> None:
        """Give a group access to a project at the given access level."""
        # POST /projects/{project}/share
        self.transport.request(
            "POST",
            f"/projects/{_encode(project)}/share",
            body={"group_id": group_id, "group_access": group_access},
        )

    def unshare_project(self, project: str | int, group_id: int) -> None:
        # DELETE /projects/{project}/share/{group_id}
        self.transport.request("DELETE", f"/projects/{_encode(project)}/share/{group_id}")

    # ========================================================================
    # Commits and branches
    # ========================================================================

    def list_commits_page(self, project: str | int, branch: str, per_page: int, page: int) -> list[dict[str, Any]]:
        """Fetch a single page of the commits of a branch, newest first."""
        # GET /projects/{project}/repository/commits
        data, _ = self.transport.request_page(
            f"/projects/{_encode(project)}/repository/commits",
            params={"ref_name": branch, "per_page": per_page, "page": page},
        )
        return _validated_all("GitLab.Commit", _check_commit, data)

    def create_commit(
        self,
        project: str | int,
        branch: str,
        message: str,
        actions: list[dict[str, Any]],
    ) -> dict[str, Any]:
        # POST /projects/{project}/repository/commits
        data = self.transport.request(
            "POST",
            f"/projects/{_encode(project)}/repository/commits",
            body={"branch": branch, "commit_message": message, "actions": actions},
        )
        return _validated("GitLab.Commit", _check_commit, data)

    def create_branch(self, project: str | int, branch: str, ref: str) -> dict[str, Any]:
        # POST /projects/{project}/repository/branches
        return self.transport.request(
            "POST",
            f"/projects/{_encode(project)}/repository/branches",
            body={"branch": branch, "ref": ref},
        )

    # ========================================================================
    # Merge requests
    # ========================================================================

    def list_merge_requests(self, project: str | int) -> list[dict[str, Any]]:
        # GET /projects/{project}/merge_requests
        data = self.transport.paginate(f"/projects/{_encode(project)}/merge_requests")
        return _validated_all("GitLab.MergeRequest", _check_merge_request, data)

    def get_merge_request(self, project: str | int, iid: int) -> dict[str, Any]:
        # GET /projects/{project}/merge_requests/{iid}
        data = self.transport.request("GET", f"/projects/{_encode(project)}/merge_requests/{iid}")
        return _validated("GitLab.MergeRequest", _check_merge_request, data)

    def create_merge_request(
        self,
        project: str | int,
        title: str,
        source_branch: str,
        target_branch: str,
        description: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "title": title,
            "source_branch": source_branch,
            "target_branch": target_branch,
        }
        if description is not None:
            body["description"] = description
        # POST /projects/{project}/merge_requests
        data = self.transport.request("POST", f"/projects/{_encode(project)}/merge_requests", body=body)
        return _validated("GitLab.MergeRequest", _check_merge_request, data)

    def accept_merge_request(
        self,
        project: str | int,
        iid: int,
        squash: bool,
        message: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"squash": squash}
        if message:
            body["squash_commit_message" if squash else "merge_commit_message"] = message
        # PUT /projects/{project}/merge_requests/{iid}/merge
        data = self.transport.request("PUT", f"/projects/{_encode(project)}/merge_requests/{iid}/merge", body=body)
        return _validated("GitLab.MergeRequest", _check_merge_request, data)

    # ========================================================================
    # Repository tree and files
    # ========================================================================

    def list_tree(
        self,
        project: str | int,
        ref: str,
        path: str = "",
        recursive: bool = False,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"ref": ref, "recursive": recursive}
        if path:
            params["path"] = path
        # GET /projects/{project}/repository/tree
        return self.transport.paginate(f"/projects/{_encode(project)}/repository/tree", params=params)

    def get_file(self, project: str | int, file_path: str, ref: str) -> dict[str, Any]:
        """Get a file; its content is base64-encoded in the "content" field."""
        # GET /projects/{project}/repository/files/{file_path}
        data = self.transport.request(
            "GET",
            f"/projects/{_encode(project)}/repository/files/{_encode(file_path)}",
            params={"ref": ref},
        )
        return _validated("GitLab.File", _check_file, data)
