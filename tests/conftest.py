"""Shared fixtures for the gitprovider test suite."""

from gitprovider.testing.fixtures import (  # noqa: F401
    destructive_gitlab_client,
    fake_gitlab,
    gitlab_client,
    org_ref,
    org_repo_ref,
    recorder,
    ssh_public_key,
    user_ref,
    user_repo_ref,
)
