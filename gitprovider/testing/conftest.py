"""
Pytest plugin for gitprovider testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
discovered by pytest. To use them in your tests, add this to your conftest.py:

    pytest_plugins = ["gitprovider.testing.conftest"]
"""

from gitprovider.testing.fixtures import (
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

__all__ = [
    "fake_gitlab",
    "recorder",
    "gitlab_client",
    "destructive_gitlab_client",
    "org_ref",
    "user_ref",
    "org_repo_ref",
    "user_repo_ref",
    "ssh_public_key",
]
