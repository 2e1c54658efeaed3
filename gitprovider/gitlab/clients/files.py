"""Repository file and tree clients (read only)."""

import base64
from typing import TYPE_CHECKING

from gitprovider.exceptions import NoProviderSupportError, UnexpectedEventError
from gitprovider.gitlab.validation import repository_path
from gitprovider.types.repos import CommitFile, TreeEntry, TreeInfo

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import RepositoryRef


class FileClient:
    """Client for downloading files of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def get(self, path: str, branch: str, recursive: bool = False) -> list[CommitFile]:
        """
        Download the files under path on branch.

        Args:
            path: Directory to read, relative to the repository root
            branch: Branch to read from
            recursive: Also read the files in subdirectories

        Returns:
            The files with their decoded content. Subdirectories are skipped.
        """
        project = repository_path(self._ref)
        files = []
        for entry in self._api.list_tree(project, branch, path, recursive):
            if entry.get("type") == "tree":
                continue
            file = self._api.get_file(project, entry["path"], branch)
            if file.get("encoding", "base64") != "base64":
                raise UnexpectedEventError(f"unexpected encoding {file['encoding']!r} for file {entry['path']}")
            content = base64.b64decode(file["content"]).decode()
            files.append(CommitFile(path=file.get("file_path", entry["path"]), content=content))
        return files


class TreeClient:
    """Client for the git trees of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def create(self, tree: list[TreeEntry], base_tree: str = "") -> TreeInfo:
        raise NoProviderSupportError("creating git trees is not supported by GitLab")

    def get(self, sha: str, recursive: bool = False) -> TreeInfo:
        raise NoProviderSupportError("getting git trees by sha is not supported by GitLab")

    def list(self, sha: str, path: str = "", recursive: bool = False) -> list[TreeEntry]:
        """
        List the files (blobs) of the tree at sha.

        Args:
            sha: Commit sha or branch name
            path: Directory to list, relative to the repository root
            recursive: Also list the files in subdirectories
        """
        entries = self._api.list_tree(repository_path(self._ref), sha, path, recursive)
        return [
            TreeEntry(
                path=entry["path"],
                mode=entry.get("mode", ""),
                type=entry["type"],
                size=0,
                sha=entry.get("id", ""),
            )
            for entry in entries
            if entry.get("type") == "blob"
        ]
