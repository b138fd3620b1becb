"""
GCE Cloud - Errors

Everything the library raises on purpose derives from GCECloudError.
Failed Compute API calls are translated by errors_from_http() so callers
can tell a missing resource from a conflict from any other failure.
"""

import json

import httplib2
from googleapiclient.errors import HttpError


class GCECloudError(Exception):
    """Root of the GCE Cloud error hierarchy."""


class AuthenticationError(GCECloudError):
    """
    No usable credentials: none configured, expired and not refreshable,
    or rejected while building a client.
    """

    def __init__(self, message: str, fix: str = None):
        """
        Args:
            message: What went wrong
            fix: Command that usually resolves it, shown on its own line
        """
        self.fix = fix
        if fix:
            message = f"{message}\n\nFix: {fix}"
        super().__init__(message)


class ConfigurationError(GCECloudError):
    """
    Raised when the configuration cannot be used.

    Examples:
    - Unknown keys in a config file
    - No project route for a (version, service) pair
    """
    pass


class InvalidFormatError(GCECloudError, ValueError):
    """
    Raised when a resource URL does not match any accepted shape.
    """

    def __init__(self, url: str):
        """
        Args:
            url: The offending input, exactly as given
        """
        self.url = url
        super().__init__(f"{url!r} is not a valid resource URL")


class CloudAPIError(GCECloudError):
    """
    An error reported by the Compute API (or by the mock on its behalf).

    Carries an HTTP-style status code so callers can treat mock and real
    backends the same way.
    """

    def __init__(self, code: int, message: str):
        """
        Args:
            code: HTTP status code (404, 409, ...)
            message: Human-readable error message
        """
        self.code = code
        self.message = message
        super().__init__(f"googleapi: Error {code}: {message}")


class NotFoundError(CloudAPIError):
    """Raised when the addressed resource does not exist (404)."""

    def __init__(self, message: str):
        super().__init__(404, message)


class AlreadyExistsError(CloudAPIError):
    """Raised when inserting a resource whose key is taken (409)."""

    def __init__(self, message: str):
        super().__init__(409, message)


class TransportError(CloudAPIError):
    """
    Raised when the underlying API call fails for any other reason.

    The original exception is kept as __cause__.
    """
    pass


class ThrottledError(GCECloudError):
    """
    Raised when the rate limiter refuses an operation.
    """

    def __init__(self, key, reason: str):
        """
        Args:
            key: RateLimitKey of the refused operation
            reason: Why it was refused
        """
        self.key = key
        self.reason = reason
        super().__init__(f"Throttled {key}: {reason}")


class OperationFailedError(GCECloudError):
    """
    Raised when a long-running operation finishes with an error payload.
    """

    def __init__(self, operation_name: str, errors: list = None):
        """
        Args:
            operation_name: Name of the Compute operation
            errors: The embedded error entries (error.errors)
        """
        self.operation_name = operation_name
        self.errors = errors or []

        message = f"Operation '{operation_name}' failed"
        for err in self.errors:
            code = err.get('code', 'UNKNOWN')
            message += f"\n  - {code}: {err.get('message', '')}"

        super().__init__(message)


class CancelledError(GCECloudError):
    """
    Raised when the call context is cancelled before or during a call.
    """

    def __init__(self, reason: str = "context cancelled"):
        self.reason = reason
        super().__init__(reason)


class DeadlineExceededError(CancelledError):
    """Raised when the call context deadline passes."""

    def __init__(self, reason: str = "context deadline exceeded"):
        super().__init__(reason)


class HookNotSetError(GCECloudError, NotImplementedError):
    """
    Raised when a mock custom method is called without its hook.
    """

    def __init__(self, hook_name: str):
        """
        Args:
            hook_name: Name of the hook that must be registered
        """
        self.hook_name = hook_name
        super().__init__(f"{hook_name} must be set")


def _http_error_message(error: HttpError) -> str:
    """Pull the message out of a googleapi error body."""
    try:
        data = json.loads(error.content.decode('utf-8'))
        return data['error']['message']
    except (ValueError, KeyError, TypeError, AttributeError):
        return str(error)


def errors_from_http(error: Exception) -> GCECloudError:
    """
    Translate a transport failure into the GCE Cloud error taxonomy.

    404 and 409 map to the same classes the mock raises; everything else
    becomes a TransportError.

    Args:
        error: HttpError or httplib2 error from the API client

    Returns:
        GCECloudError: Exception to raise (caller chains the original)
    """
    if isinstance(error, HttpError):
        code = int(error.resp.status)
        message = _http_error_message(error)
        if code == 404:
            return NotFoundError(message)
        if code == 409:
            return AlreadyExistsError(message)
        return TransportError(code, message)

    if isinstance(error, httplib2.HttpLib2Error):
        return TransportError(0, f"transport failure: {error}")

    return TransportError(0, str(error))
