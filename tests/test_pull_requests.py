"""
Tests for merge requests and merge-status polling.

Feature: pull-requests
"""

import pytest

from gitprovider import Client
from gitprovider.exceptions import (
    HTTPError,
    InvalidArgumentError,
    MergeStatusUnavailableError,
    NotFoundError,
)
from gitprovider.gitlab.clients import pullrequests
from gitprovider.refs import OrgRepositoryRef
from gitprovider.testing import FakeGitLab, RecordingTransport
from gitprovider.types import MergeMethod

MR_PATH = "/projects/org%2Fdemo/merge_requests/1"


@pytest.fixture
def repo(gitlab_client: Client, fake_gitlab: FakeGitLab, recorder: RecordingTransport, org_repo_ref: OrgRepositoryRef):
    fake_gitlab.add_project("org", "demo")
    repository = gitlab_client.org_repositories.get(org_repo_ref)
    recorder.reset()
    return repository


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record merge-status polling sleeps instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(pullrequests.time, "sleep", recorded.append)
    return recorded


def test_create_and_list(repo) -> None:
    pr = repo.pull_requests.create("Add feature", "feature", "main", description="Details")

    info = pr.get()
    assert info.number == 1
    assert info.title == "Add feature"
    assert info.description == "Details"
    assert info.source_branch == "feature"
    assert info.target_branch == "main"
    assert info.merged is False
    assert [p.get().number for p in repo.pull_requests.list()] == [1]


def test_get_missing(repo) -> None:
    with pytest.raises(NotFoundError):
        repo.pull_requests.get(42)


def test_merge(repo, recorder: RecordingTransport, sleeps: list[float]) -> None:
    repo.pull_requests.create("Add feature", "feature", "main")

    repo.pull_requests.merge(1, MergeMethod.MERGE, "Merge feature")

    (put,) = recorder.calls_to("PUT", f"{MR_PATH}/merge")
    assert put.body == {"squash": False, "merge_commit_message": "Merge feature"}
    assert repo.pull_requests.get(1).get().merged is True
    assert sleeps == []


def test_squash_merge(repo, fake_gitlab: FakeGitLab, recorder: RecordingTransport, sleeps: list[float]) -> None:
    repo.pull_requests.create("Add feature", "feature", "main")

    repo.pull_requests.merge(1, "squash", "Squashed")

    (put,) = recorder.calls_to("PUT", f"{MR_PATH}/merge")
    assert put.body == {"squash": True, "squash_commit_message": "Squashed"}
    assert fake_gitlab.merge_requests[fake_gitlab.get_project("org/demo")["id"]][0]["squash"] is True


def test_merge_without_message(repo, recorder: RecordingTransport, sleeps: list[float]) -> None:
    repo.pull_requests.create("Add feature", "feature", "main")

    repo.pull_requests.merge(1, MergeMethod.MERGE)

    (put,) = recorder.calls_to("PUT", f"{MR_PATH}/merge")
    assert put.body == {"squash": False}


def test_unknown_merge_method(repo, recorder: RecordingTransport) -> None:
    repo.pull_requests.create("Add feature", "feature", "main")
    recorder.reset()

    with pytest.raises(InvalidArgumentError):
        repo.pull_requests.merge(1, "rebase")

    assert recorder.count() == 0


# ============================================================================
# Merge status polling
# ============================================================================


def test_merge_waits_for_status(
    repo, fake_gitlab: FakeGitLab, recorder: RecordingTransport, sleeps: list[float]
) -> None:
    fake_gitlab.add_merge_request("org/demo", "Add feature", "feature")
    fake_gitlab.set_merge_statuses("org/demo", 1, ["unchecked", "checking", "can_be_merged"])

    repo.pull_requests.merge(1, MergeMethod.MERGE)

    assert recorder.count("GET", MR_PATH) == 3
    assert sleeps == [pullrequests.MERGE_STATUS_INTERVAL] * 2
    assert recorder.count("PUT", f"{MR_PATH}/merge") == 1


def test_merge_status_never_settles(
    repo, fake_gitlab: FakeGitLab, recorder: RecordingTransport, sleeps: list[float]
) -> None:
    fake_gitlab.add_merge_request("org/demo", "Add feature", "feature", merge_status="checking")

    with pytest.raises(MergeStatusUnavailableError) as exc_info:
        repo.pull_requests.merge(1, MergeMethod.MERGE)

    assert exc_info.value.attempts == pullrequests.MERGE_STATUS_ATTEMPTS
    assert recorder.count("GET", MR_PATH) == pullrequests.MERGE_STATUS_ATTEMPTS
    assert len(sleeps) == pullrequests.MERGE_STATUS_ATTEMPTS - 1
    assert recorder.count("PUT") == 0


def test_polling_error_propagates(
    repo, fake_gitlab: FakeGitLab, recorder: RecordingTransport, sleeps: list[float]
) -> None:
    fake_gitlab.add_merge_request("org/demo", "Add feature", "feature", merge_status="checking")
    fake_gitlab.fail("GET", MR_PATH, 500, "boom")

    with pytest.raises(HTTPError):
        repo.pull_requests.merge(1, MergeMethod.MERGE)

    assert recorder.count("PUT") == 0


def test_unmergeable_request_is_rejected(repo, fake_gitlab: FakeGitLab, sleeps: list[float]) -> None:
    fake_gitlab.add_merge_request("org/demo", "Conflicting", "feature", merge_status="cannot_be_merged")

    with pytest.raises(HTTPError) as exc_info:
        repo.pull_requests.merge(1, MergeMethod.MERGE)

    assert exc_info.value.status_code == 406
    assert sleeps == []
