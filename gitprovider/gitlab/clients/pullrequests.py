"""Pull (merge) request resource and client."""

import time
from typing import TYPE_CHECKING, Any

from gitprovider.exceptions import InvalidArgumentError, MergeStatusUnavailableError
from gitprovider.gitlab.validation import repository_path
from gitprovider.logging import get_logger
from gitprovider.types.enums import MergeMethod
from gitprovider.types.repos import PullRequestInfo

if TYPE_CHECKING:
    from gitprovider.gitlab.api import GitLabAPI
    from gitprovider.refs import RepositoryRef

logger = get_logger()

# GitLab computes mergeability asynchronously and asks clients to poll for it
MERGE_STATUS_ATTEMPTS = 10
MERGE_STATUS_INTERVAL = 2.0
TRANSIENT_MERGE_STATUSES = frozenset({"checking", "unchecked"})


def pull_request_from_api(mr: dict[str, Any]) -> PullRequestInfo:
    return PullRequestInfo(
        number=mr["iid"],
        title=mr.get("title", ""),
        description=mr.get("description"),
        source_branch=mr.get("source_branch", ""),
        target_branch=mr.get("target_branch", ""),
        merged=mr.get("state") == "merged",
        web_url=mr.get("web_url", ""),
    )


class PullRequest:
    """A merge request."""

    def __init__(self, mr: dict[str, Any]) -> None:
        self._mr = mr

    def get(self) -> PullRequestInfo:
        return pull_request_from_api(self._mr)

    def api_object(self) -> dict[str, Any]:
        return self._mr


class PullRequestClient:
    """Client for the merge requests of one repository."""

    def __init__(self, api: "GitLabAPI", ref: "RepositoryRef") -> None:
        self._api = api
        self._ref = ref

    def list(self) -> list[PullRequest]:
        return [PullRequest(mr) for mr in self._api.list_merge_requests(repository_path(self._ref))]

    def create(
        self,
        title: str,
        branch: str,
        base_branch: str,
        description: str | None = None,
    ) -> PullRequest:
        """
        Open a merge request from branch into base_branch.

        Args:
            title: Merge request title
            branch: Source branch
            base_branch: Target branch
            description: Optional description

        Returns:
            The created merge request
        """
        mr = self._api.create_merge_request(repository_path(self._ref), title, branch, base_branch, description)
        return PullRequest(mr)

    def get(self, number: int) -> PullRequest:
        """
        Get a merge request by its project-scoped number (iid).

        Raises:
            NotFoundError: If the merge request does not exist
        """
        return PullRequest(self._api.get_merge_request(repository_path(self._ref), number))

    def merge(self, number: int, merge_method: MergeMethod | str, message: str = "") -> None:
        """
        Merge a merge request.

        Waits until GitLab has finished computing whether the merge request
        can be merged, polling up to MERGE_STATUS_ATTEMPTS times with
        MERGE_STATUS_INTERVAL seconds in between, then accepts it.

        Args:
            number: Merge request number (iid)
            merge_method: MergeMethod.MERGE or MergeMethod.SQUASH
            message: Merge or squash commit message

        Raises:
            InvalidArgumentError: If merge_method is unknown
            MergeStatusUnavailableError: If the merge status never settled
        """
        try:
            method = MergeMethod(merge_method)
        except ValueError as e:
            raise InvalidArgumentError(f"unknown merge method: {merge_method}") from e

        self._wait_until_mergeable(number)
        self._api.accept_merge_request(
            repository_path(self._ref),
            number,
            squash=method is MergeMethod.SQUASH,
            message=message or None,
        )

    def _wait_until_mergeable(self, number: int) -> None:
        path = repository_path(self._ref)
        for attempt in range(MERGE_STATUS_ATTEMPTS):
            mr = self._api.get_merge_request(path, number)
            status = mr.get("merge_status")
            if status not in TRANSIENT_MERGE_STATUSES:
                return
            logger.debug("Merge request %s!%d is %s (attempt %d)", path, number, status, attempt + 1)
            if attempt + 1 < MERGE_STATUS_ATTEMPTS:
                time.sleep(MERGE_STATUS_INTERVAL)
        raise MergeStatusUnavailableError(number, MERGE_STATUS_ATTEMPTS)
