"""
Property-based tests for gitprovider logging.

Feature: logging
"""

import io
import logging

from hypothesis import given, settings
from hypothesis import strategies as st

from gitprovider.logging import (
    configure_logging,
    get_logger,
    log_http_request,
    log_reconcile_action,
    mask_sensitive_data,
    safe_log_dict,
)
from gitprovider.refs import OrganizationRef, OrgRepositoryRef
from gitprovider.testing import FakeGitLab, create_test_client
from gitprovider.types import DeployTokenInfo, RepositoryInfo

token_body_strategy = st.text(
    alphabet=st.sampled_from("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"),
    min_size=20,
    max_size=40,
)
token_prefix_strategy = st.sampled_from(["glpat", "gloas", "gldt"])


@given(prefix=token_prefix_strategy, body=token_body_strategy)
@settings(max_examples=100)
def test_gitlab_tokens_masked(prefix: str, body: str) -> None:
    """
    Property 1: No tokens in log output

    For any GitLab token embedded in text, the masked text SHALL NOT contain it.
    """
    token = f"{prefix}-{body}"

    masked = mask_sensitive_data(f"calling with {token} now")

    assert token not in masked
    assert f"{prefix}-[REDACTED]" in masked


@given(body=token_body_strategy)
@settings(max_examples=50)
def test_bearer_tokens_masked(body: str) -> None:
    masked = mask_sensitive_data(f"Authorization: Bearer {body}")

    assert body not in masked
    assert "Bearer [REDACTED]" in masked


def test_private_token_header_masked() -> None:
    masked = mask_sensitive_data("PRIVATE-TOKEN: abcdef123456")

    assert "abcdef123456" not in masked


def test_safe_log_dict_masks_nested_keys() -> None:
    data = {
        "name": "ci",
        "token": "gldt-secret",
        "nested": {"Private-Token": "x", "list": [{"password": "p", "ok": 1}]},
    }

    safe = safe_log_dict(data)

    assert safe["name"] == "ci"
    assert safe["token"] == "[REDACTED]"
    assert safe["nested"]["Private-Token"] == "[REDACTED]"
    assert safe["nested"]["list"] == [{"password": "[REDACTED]", "ok": 1}]
    assert data["token"] == "gldt-secret"


def test_get_logger_names() -> None:
    assert get_logger().name == "gitprovider"
    assert get_logger("http").name == "gitprovider.http"


def test_log_http_request_masks_body(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="gitprovider.http")

    log_http_request("POST", "https://gitlab.com/api/v4/projects", body={"name": "demo", "token": "gldt-abcdefghijkl"})

    assert "POST https://gitlab.com/api/v4/projects" in caplog.text
    assert "gldt-abcdefghijkl" not in caplog.text


def test_reconcile_actions_logged(caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="gitprovider.reconcile")

    log_reconcile_action("repository", "org/demo", "create")
    log_reconcile_action("repository", "org/demo", "noop")

    create, noop = caplog.records
    assert create.levelno == logging.INFO
    assert "create" in create.getMessage()
    assert noop.levelno == logging.DEBUG
    assert "up to date" in noop.getMessage()


def test_client_output_never_contains_secrets() -> None:
    """
    Property 2: Secrets stay out of the logs end to end

    Neither the access token nor a freshly created deploy token secret
    SHALL appear in debug output.
    """
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    sdk_logger = get_logger()
    configure_logging(level=logging.DEBUG, handler=handler)
    try:
        fake = FakeGitLab()
        fake.add_group("org")
        ref = OrgRepositoryRef.of(OrganizationRef("gitlab.com", "org"), "demo")
        with create_test_client(fake, token="glpat-supersecret-token") as client:
            repo, _ = client.org_repositories.reconcile(ref, RepositoryInfo(description="x"))
            token, _ = repo.deploy_tokens.reconcile(DeployTokenInfo(name="ci"))
    finally:
        sdk_logger.removeHandler(handler)
        for logger in (sdk_logger, get_logger("http"), get_logger("reconcile")):
            logger.setLevel(logging.NOTSET)

    output = stream.getvalue()
    assert "repository https://gitlab.com/org/demo: create" in output
    assert "glpat-supersecret-token" not in output
    assert token.get().token not in output
