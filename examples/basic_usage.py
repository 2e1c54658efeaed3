#!/usr/bin/env python3
"""
Basic gitprovider usage example.

Runs the reconcile workflow against an in-memory GitLab, so no token or
network access is needed. Point Client.from_env() at a real instance to do
the same thing for real.
Run with: python examples/basic_usage.py
"""

import logging

from gitprovider import (
    DeployKeyInfo,
    DeployTokenInfo,
    NotFoundError,
    OrganizationRef,
    OrgRepositoryRef,
    RepositoryInfo,
    RepositoryPermission,
    TeamAccessInfo,
    configure_logging,
)
from gitprovider.testing import FakeGitLab, create_test_client, generate_ssh_public_key

print("=== gitprovider Basic Usage Example ===\n")

configure_logging(level=logging.INFO)

fake = FakeGitLab()
fake.add_group("platform", name="Platform")
fake.add_group("platform/devs", name="Developers")
fake.add_member("platform/devs", "alice", access_level=40)

org_ref = OrganizationRef("gitlab.com", "platform")
repo_ref = OrgRepositoryRef.of(org_ref, "service")

with create_test_client(fake) as client:
    # 1. Organizations and teams
    print("1. Reading the organization...")
    org = client.organizations.get(org_ref)
    print(f"   Organization: {org.organization()} ({org.get().name})")
    for team in org.teams.list():
        print(f"   Team {team.get().name}: {team.get().members}")
    print()

    # 2. Reconcile a repository
    print("2. Reconciling a repository...")
    desired = RepositoryInfo(description="Payment service", visibility="private")
    repo, created = client.org_repositories.reconcile(repo_ref, desired)
    print(f"   First reconcile changed state: {created}")
    repo, changed = client.org_repositories.reconcile(repo_ref, desired)
    print(f"   Second reconcile changed state: {changed}")
    assert not changed, "Reconcile should be idempotent"
    print()

    # 3. Deploy keys and tokens
    print("3. Reconciling deploy credentials...")
    key, _ = repo.deploy_keys.reconcile(DeployKeyInfo(name="ci", key=generate_ssh_public_key("ci@example.com")))
    print(f"   Deploy key {key.get().name} read-only: {key.get().read_only}")
    token, _ = repo.deploy_tokens.reconcile(DeployTokenInfo(name="registry"))
    print(f"   Deploy token {token.get().name} issued for user {token.get().username}")
    print()

    # 4. Team access
    print("4. Granting team access...")
    access, _ = repo.team_access.reconcile(TeamAccessInfo(name="platform/devs", permission=RepositoryPermission.PUSH))
    print(f"   {access.get().name}: {access.get().permission}")
    print()

    # 5. Missing resources
    print("5. Looking up a missing repository...")
    try:
        client.org_repositories.get(OrgRepositoryRef.of(org_ref, "missing"))
    except NotFoundError as e:
        print(f"   Caught NotFoundError: {e.message}")

print("\n=== Done ===")
