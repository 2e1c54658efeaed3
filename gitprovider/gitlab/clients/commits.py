"""Commit and branch clients."""

from datetime import datetime
from typing import TYPE_CHECKING, Any

from gitprovider.exceptions import InvalidArgumentError
from gitprovider.gitlab.validation import repository_path
from gitprovider.types.repos import CommitFile, CommitInfo

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import RepositoryRef


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    # Accept the "Z" suffix on every supported Python version
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def commit_from_api(commit: dict[str, Any]) -> CommitInfo:
    return CommitInfo(
        sha=commit["id"],
        author=commit.get("author_name", ""),
        message=commit.get("message", ""),
        created_at=_parse_time(commit.get("created_at")),
        web_url=commit.get("web_url", ""),
    )


class Commit:
    """A commit. Commits are immutable, so there is no set, update or delete."""

    def __init__(self, commit: dict[str, Any]) -> None:
        self._commit = commit

    def get(self) -> CommitInfo:
        return commit_from_api(self._commit)

    def api_object(self) -> dict[str, Any]:
        return self._commit


class CommitClient:
    """Client for the commits of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def list_page(self, branch: str, per_page: int, page: int) -> list[Commit]:
        """
        List one page of the commits of a branch, newest first.

        Args:
            branch: Branch to list the commits of
            per_page: Number of commits per page
            page: Page number, starting at 1

        Returns:
            The commits on that page
        """
        commits = self._api.list_commits_page(repository_path(self._ref), branch, per_page, page)
        return [Commit(c) for c in commits]

    def create(self, branch: str, message: str, files: list[CommitFile]) -> Commit:
        """
        Create a commit on branch.

        A file with content is added, a file without content is deleted.

        Raises:
            InvalidArgumentError: If files is empty
        """
        if not files:
            raise InvalidArgumentError("a commit needs at least one file")
        actions = []
        for f in files:
            if f.content is None:
                actions.append({"action": "delete", "file_path": f.path})
            else:
                actions.append({"action": "create", "file_path": f.path, "content": f.content})
        commit = self._api.create_commit(repository_path(self._ref), branch, message, actions)
        return Commit(commit)


class BranchClient:
    """Client for the branches of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def create(self, branch: str, sha: str) -> None:
        """
        Create branch pointing at sha.

        Raises:
            HTTPError: If the branch already exists or sha is unknown
        """
        self._api.create_branch(repository_path(self._ref), branch, sha)
