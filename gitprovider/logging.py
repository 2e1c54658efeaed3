"""
gitprovider logging utilities.

Three loggers are used:

    gitprovider            - parent of the others, carries the handler
    gitprovider.http       - one DEBUG line per GitLab request and response
    gitprovider.reconcile  - INFO for create/update, DEBUG for no-ops

Access tokens, deploy-token secrets and passwords are redacted before anything
reaches a handler.
"""

import logging
import re
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
REDACTED = "[REDACTED]"

_sdk_logger = logging.getLogger("gitprovider")
_http_logger = logging.getLogger("gitprovider.http")
_reconcile_logger = logging.getLogger("gitprovider.reconcile")

_SENSITIVE_PATTERNS = [
    # glpat- (personal), gloas- (OAuth app), gldt- (deploy token)
    (re.compile(r"\b(glpat|gloas|gldt)-[A-Za-z0-9_\-]{8,}"), rf"\1-{REDACTED}"),
    (re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9\-._~+/=]+", re.IGNORECASE), rf"\1 {REDACTED}"),
    (re.compile(r"(private[-_]token['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(secret|token|password)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), rf"\1: {REDACTED}"),
]

# Matched against lowercased dict keys; "private_token" and "Private-Token" both hit "token".
_SENSITIVE_KEY = re.compile(r"token|password|secret|authorization")


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    reconcile_level: int | None = None,
    handler: logging.Handler | None = None,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """
    Attach a handler to the gitprovider loggers and set their levels.

    http_level and reconcile_level fall back to level when not given.

    Example:
        ```python
        import logging
        from gitprovider.logging import configure_logging

        # Reconcile decisions only, plus every call made against GitLab
        configure_logging(level=logging.WARNING, reconcile_level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))

    _sdk_logger.addHandler(handler)
    _sdk_logger.setLevel(level)
    for logger, override in ((_http_logger, http_level), (_reconcile_logger, reconcile_level)):
        logger.setLevel(level if override is None else override)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the gitprovider logger, or its child ``gitprovider.<name>``."""
    return _sdk_logger if name is None else _sdk_logger.getChild(name)


def mask_sensitive_data(text: str) -> str:
    """Redact GitLab tokens, auth headers and password-like values in text."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return safe_log_dict(value)
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def safe_log_dict(data: dict[str, Any]) -> dict[str, Any]:
    """
    Copy a JSON-like dict, replacing the values of sensitive keys.

    Nested dicts and lists of dicts are handled at any depth. The input is not
    modified.
    """
    return {
        key: REDACTED if _SENSITIVE_KEY.search(str(key).lower()) else _redact(value)
        for key, value in data.items()
    }


def log_http_request(method: str, url: str, body: Any = None) -> None:
    """Log an outgoing GitLab request at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return
    if isinstance(body, dict) and body:
        _http_logger.debug("%s %s body=%s", method, mask_sensitive_data(url), safe_log_dict(body))
    else:
        _http_logger.debug("%s %s", method, mask_sensitive_data(url))


def log_http_response(method: str, url: str, status_code: int, elapsed_ms: float) -> None:
    """Log the status and latency of a GitLab response at DEBUG level."""
    _http_logger.debug("%s %s -> %d (%.1fms)", method, mask_sensitive_data(url), status_code, elapsed_ms)


def log_reconcile_action(kind: str, key: str, action: str) -> None:
    """
    Log the decision reconcile took for a resource.

    Args:
        kind: Resource kind (e.g., "repository", "deploy_token")
        key: Natural key of the resource
        action: "create", "update" or "noop"
    """
    if action == "noop":
        _reconcile_logger.debug("%s %s is up to date", kind, key)
    else:
        _reconcile_logger.info("%s %s: %s", kind, key, action)


__all__ = [
    "DEFAULT_FORMAT",
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_reconcile_action",
]
