"""Deploy key resource and client.

GitLab cannot edit a deploy key in place: a key whose spec differs from the
desired one is deleted and created again.
"""

from typing import TYPE_CHECKING, Any

from gitprovider.exceptions import NotFoundError
from gitprovider.gitlab.specs import DeployKeySpec
from gitprovider.gitlab.validation import repository_path
from gitprovider.reconcile import reconcile
from gitprovider.types.repos import DeployKeyInfo, validate_and_default

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import RepositoryRef


def deploy_key_from_api(key: dict[str, Any]) -> DeployKeyInfo:
    return DeployKeyInfo(
        name=key["title"],
        key=key["key"].encode(),
        read_only=not key.get("can_push", False),
    )


def deploy_key_info_to_api(info: DeployKeyInfo, key: dict[str, Any]) -> None:
    """Merge the set fields of info into the GitLab object key."""
    key["title"] = info.name
    key["key"] = info.key.decode().strip()
    if info.read_only is not None:
        key["can_push"] = not info.read_only


def _create_body(key: dict[str, Any]) -> dict[str, Any]:
    return {"title": key["title"], "key": key["key"], "can_push": key.get("can_push", False)}


def _find_key(api: "GitLabAPI", ref: "RepositoryRef", name: str) -> dict[str, Any]:
    for key in api.list_keys(repository_path(ref)):
        if key["title"] == name:
            return key
    raise NotFoundError(f"deploy key {name!r} not found in {ref}")


def _recreate(
    api: "GitLabAPI",
    ref: "RepositoryRef",
    actual: dict[str, Any],
    desired: dict[str, Any],
) -> dict[str, Any]:
    path = repository_path(ref)
    api.delete_key(path, actual["id"])
    return api.create_key(path, _create_body(desired))


class DeployKey:
    """A deploy key of a repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef", key: dict[str, Any]) -> None:
        self._api = api
        self._ref = ref
        self._key = key

    def get(self) -> DeployKeyInfo:
        return deploy_key_from_api(self._key)

    def set(self, info: DeployKeyInfo) -> None:
        """
        Apply info to the local copy of the key. Nothing is sent to GitLab.

        Raises:
            ValidationError: If info is invalid
        """
        info.validate()
        deploy_key_info_to_api(info, self._key)

    def api_object(self) -> dict[str, Any]:
        """The raw GitLab deploy key."""
        return self._key

    def repository(self) -> "RepositoryRef":
        return self._ref

    def update(self) -> None:
        """Push the local state to GitLab by deleting and recreating the key."""
        self._key = _recreate(self._api, self._ref, self._key, self._key)

    def delete(self) -> None:
        self._api.delete_key(repository_path(self._ref), self._key["id"])

    def reconcile(self) -> bool:
        """
        Make the local state the actual state on GitLab.

        Returns:
            True if the key was created or recreated
        """
        desired = self._key
        result, changed = reconcile(
            fetch=lambda: _find_key(self._api, self._ref, desired["title"]),
            create=lambda: self._api.create_key(repository_path(self._ref), _create_body(desired)),
            update=lambda actual: _recreate(self._api, self._ref, actual, desired),
            needs_update=lambda actual: DeployKeySpec.from_api(actual) != DeployKeySpec.from_api(desired),
            kind="deploy_key",
            key=f"{self._ref}/{desired['title']}",
        )
        self._key = result
        return changed


class DeployKeyClient:
    """Client for the deploy keys of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def get(self, name: str) -> DeployKey:
        """
        Get a deploy key by name (title).

        Raises:
            NotFoundError: If no key has that name
        """
        return DeployKey(self._api, self._ref, _find_key(self._api, self._ref, name))

    def list(self) -> list[DeployKey]:
        """List all deploy keys, following pagination."""
        return [DeployKey(self._api, self._ref, key) for key in self._api.list_keys(repository_path(self._ref))]

    def create(self, req: DeployKeyInfo) -> DeployKey:
        """
        Create a deploy key.

        Raises:
            ValidationError: If req is invalid
            AlreadyExistsError: If the key is already registered
        """
        req = validate_and_default(req)
        desired: dict[str, Any] = {}
        deploy_key_info_to_api(req, desired)
        key = self._api.create_key(repository_path(self._ref), _create_body(desired))
        return DeployKey(self._api, self._ref, key)

    def reconcile(self, req: DeployKeyInfo) -> tuple[DeployKey, bool]:
        """
        Make req the actual state of the key named req.name.

        A missing key is created. A key whose title, key or write access
        differs is deleted and recreated. Otherwise nothing is changed.

        Returns:
            Tuple of (deploy key, action_taken)
        """
        req = validate_and_default(req)
        desired: dict[str, Any] = {}
        deploy_key_info_to_api(req, desired)
        result, changed = reconcile(
            fetch=lambda: _find_key(self._api, self._ref, req.name),
            create=lambda: self._api.create_key(repository_path(self._ref), _create_body(desired)),
            update=lambda actual: _recreate(self._api, self._ref, actual, desired),
            needs_update=lambda actual: DeployKeySpec.from_api(actual) != DeployKeySpec.from_api(desired),
            kind="deploy_key",
            key=f"{self._ref}/{req.name}",
        )
        return DeployKey(self._api, self._ref, result), changed
