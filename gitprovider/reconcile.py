"""
Generic create-or-update-or-noop reconciliation.

Every resource type reconciles through the same decision procedure:

    fetch() raises NotFoundError  -> create(),          action taken
    needs_update(actual) is False -> return actual,     no action
    needs_update(actual) is True  -> update(actual),    action taken

Any other error raised by fetch() propagates unchanged. Resource types differ
only in the callables they plug in.
"""

from collections.abc import Callable
from typing import TypeVar

from gitprovider.exceptions import NotFoundError
from gitprovider.logging import log_reconcile_action

R = TypeVar("R")


def reconcile(
    fetch: Callable[[], R],
    create: Callable[[], R],
    update: Callable[[R], R],
    needs_update: Callable[[R], bool],
    kind: str = "resource",
    key: str = "",
) -> tuple[R, bool]:
    """
    Bring a remote resource to its desired state.

    Args:
        fetch: Returns the actual resource, raising NotFoundError if it is absent
        create: Creates the resource from the desired state
        update: Applies the desired state to the actual resource
        needs_update: Returns True if the actual resource differs from the desired state
        kind: Resource kind, for logging
        key: Natural key of the resource, for logging

    Returns:
        Tuple of (resulting resource, action_taken)
    """
    try:
        actual = fetch()
    except NotFoundError:
        created = create()
        log_reconcile_action(kind, key, "create")
        return created, True

    if not needs_update(actual):
        log_reconcile_action(kind, key, "noop")
        return actual, False

    updated = update(actual)
    log_reconcile_action(kind, key, "update")
    return updated, True


def always(_: object) -> bool:
    """needs_update for resources whose actual state can never be compared."""
    return True
