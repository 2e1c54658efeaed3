"""gitprovider exception classes."""

from typing import Any


class GitProviderError(Exception):
    """Base exception for all gitprovider errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitProviderError):
    """Raised when client options are invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_CLIENT_OPTIONS", message)


class NotFoundError(GitProviderError):
    """Raised when the requested resource does not exist."""

    def __init__(
        self, message: str = "the requested resource was not found", status_code: int | None = None
    ) -> None:
        super().__init__("NOT_FOUND", message)
        self.status_code = status_code


class AlreadyExistsError(GitProviderError):
    """Raised by create calls when the resource already exists.

    Use reconcile() to create a resource idempotently.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__("ALREADY_EXISTS", message)
        self.status_code = status_code


class InvalidServerDataError(GitProviderError):
    """Raised when the server returned an object with missing or invalid fields."""

    def __init__(self, message: str, errors: list["FieldError"] | None = None) -> None:
        super().__init__("INVALID_SERVER_DATA", message)
        self.errors = errors or []


class DestructiveCallDisallowedError(GitProviderError):
    """Raised when a destructive call is attempted without opting in."""

    def __init__(self, message: str) -> None:
        super().__init__("DESTRUCTIVE_CALL_DISALLOWED", message)


class DomainUnsupportedError(GitProviderError):
    """Raised when a reference points at a domain the client does not serve."""

    def __init__(self, message: str) -> None:
        super().__init__("DOMAIN_UNSUPPORTED", message)


class NoProviderSupportError(GitProviderError):
    """Raised when the provider cannot implement the requested feature."""

    def __init__(self, message: str = "no provider support for this feature") -> None:
        super().__init__("NO_PROVIDER_SUPPORT", message)


class InvalidPermissionLevelError(GitProviderError):
    """Raised when a permission level has no mapping."""

    def __init__(self, value: Any) -> None:
        super().__init__("INVALID_PERMISSION_LEVEL", f"invalid permission level: {value!r}")
        self.value = value


class InvalidArgumentError(GitProviderError):
    """Raised when an invalid argument is passed to a function."""

    def __init__(self, message: str, code: str = "INVALID_ARGUMENT") -> None:
        super().__init__(code, message)


class FieldError:
    """A single field that failed validation."""

    def __init__(self, field_path: str, reason: str, value: Any = None) -> None:
        self.field_path = field_path
        self.reason = reason
        self.value = value

    def __str__(self) -> str:
        value_str = f" (value: {self.value!r})" if self.value is not None else ""
        return f"validation error for {self.field_path}{value_str}: {self.reason}"

    def __repr__(self) -> str:
        return f"FieldError({self.field_path!r}, {self.reason!r})"


class ValidationError(InvalidArgumentError):
    """Raised when one or more fields fail validation.

    All violations found are collected in ``errors``.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        if len(errors) == 1:
            message = str(errors[0])
        else:
            message = "multiple errors occurred:" + "".join(f"\n- {e}" for e in errors)
        super().__init__(message, code="VALIDATION_ERROR")
        self.errors = errors


class UnexpectedEventError(GitProviderError):
    """Raised when the library reaches a state it should never be in."""

    def __init__(self, message: str) -> None:
        super().__init__("UNEXPECTED_EVENT", message)


class MergeStatusUnavailableError(GitProviderError):
    """Raised when a merge request stays in a transient merge status too long."""

    def __init__(self, number: int, attempts: int) -> None:
        super().__init__(
            "MERGE_STATUS_UNAVAILABLE",
            f"merge status unavailable for pull request number {number} after {attempts} attempts",
        )
        self.number = number
        self.attempts = attempts


class HTTPError(GitProviderError):
    """Raised for HTTP errors that have no more specific type."""

    def __init__(self, code: str, message: str, status_code: int | None = None) -> None:
        super().__init__(code, message)
        self.status_code = status_code


class InvalidCredentialsError(HTTPError):
    """Raised on 401 Unauthorized or 403 Forbidden."""

    pass


class RateLimitedError(HTTPError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = 429,
    ) -> None:
        super().__init__(code, message, status_code)
        self.retry_after = retry_after
