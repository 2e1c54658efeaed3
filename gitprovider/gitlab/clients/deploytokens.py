"""Deploy token resource and client.

GitLab returns a deploy token's secret only once, in the create response.
Actual state can therefore never be shown to match desired state, so every
reconcile deletes and recreates the token and reports a change. If the
recreate fails after the delete succeeded, the token stays absent.
"""

from typing import TYPE_CHECKING, Any

from gitprovider.exceptions import NotFoundError
from gitprovider.gitlab.validation import repository_path
from gitprovider.reconcile import always, reconcile
from gitprovider.types.repos import DeployTokenInfo, validate_and_default

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import RepositoryRef


def deploy_token_from_api(token: dict[str, Any]) -> DeployTokenInfo:
    return DeployTokenInfo(
        name=token["name"],
        username=token["username"],
        token=token.get("token") or "",
    )


def deploy_token_info_to_api(info: DeployTokenInfo, token: dict[str, Any]) -> None:
    token["name"] = info.name
    if info.username:
        token["username"] = info.username


def _create_body(token: dict[str, Any]) -> dict[str, Any]:
    body = {"name": token["name"]}
    if token.get("username"):
        body["username"] = token["username"]
    return body


def _find_token(api: "GitLabAPI", ref: "RepositoryRef", name: str) -> dict[str, Any]:
    for token in api.list_tokens(repository_path(ref)):
        if token["name"] == name:
            return token
    raise NotFoundError(f"deploy token {name!r} not found in {ref}")


def _recreate(
    api: "GitLabAPI",
    ref: "RepositoryRef",
    actual: dict[str, Any],
    desired: dict[str, Any],
) -> dict[str, Any]:
    path = repository_path(ref)
    api.delete_token(path, actual["id"])
    return api.create_token(path, _create_body(desired))


class DeployToken:
    """A deploy token of a repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef", token: dict[str, Any]) -> None:
        self._api = api
        self._ref = ref
        self._token = token

    def get(self) -> DeployTokenInfo:
        """The token info. ``token`` is empty unless this object was just created."""
        return deploy_token_from_api(self._token)

    def set(self, info: DeployTokenInfo) -> None:
        info.validate()
        deploy_token_info_to_api(info, self._token)

    def api_object(self) -> dict[str, Any]:
        return self._token

    def repository(self) -> "RepositoryRef":
        return self._ref

    def update(self) -> None:
        """Delete the token and create it again with the local state."""
        self._token = _recreate(self._api, self._ref, self._token, self._token)

    def delete(self) -> None:
        self._api.delete_token(repository_path(self._ref), self._token["id"])

    def reconcile(self) -> bool:
        """
        Recreate the token from the local state.

        Returns:
            Always True
        """
        desired = self._token
        result, changed = reconcile(
            fetch=lambda: _find_token(self._api, self._ref, desired["name"]),
            create=lambda: self._api.create_token(repository_path(self._ref), _create_body(desired)),
            update=lambda actual: _recreate(self._api, self._ref, actual, desired),
            needs_update=always,
            kind="deploy_token",
            key=f"{self._ref}/{desired['name']}",
        )
        self._token = result
        return changed


class DeployTokenClient:
    """Client for the deploy tokens of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def get(self, name: str) -> DeployToken:
        """
        Get a deploy token by name.

        Raises:
            NotFoundError: If no token has that name
        """
        return DeployToken(self._api, self._ref, _find_token(self._api, self._ref, name))

    def list(self) -> list[DeployToken]:
        return [DeployToken(self._api, self._ref, t) for t in self._api.list_tokens(repository_path(self._ref))]

    def create(self, req: DeployTokenInfo) -> DeployToken:
        """
        Create a deploy token. The returned object carries the secret.

        Raises:
            ValidationError: If req is invalid
        """
        req = validate_and_default(req)
        desired: dict[str, Any] = {}
        deploy_token_info_to_api(req, desired)
        token = self._api.create_token(repository_path(self._ref), _create_body(desired))
        return DeployToken(self._api, self._ref, token)

    def reconcile(self, req: DeployTokenInfo) -> tuple[DeployToken, bool]:
        """
        Create the token named req.name, or delete and recreate it if it exists.

        Returns:
            Tuple of (deploy token with its new secret, True)
        """
        req = validate_and_default(req)
        desired: dict[str, Any] = {}
        deploy_token_info_to_api(req, desired)
        result, changed = reconcile(
            fetch=lambda: _find_token(self._api, self._ref, req.name),
            create=lambda: self._api.create_token(repository_path(self._ref), _create_body(desired)),
            update=lambda actual: _recreate(self._api, self._ref, actual, desired),
            needs_update=always,
            kind="deploy_token",
            key=f"{self._ref}/{req.name}",
        )
        return DeployToken(self._api, self._ref, result), changed
