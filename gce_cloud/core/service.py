"""
GCE Cloud - Service Bundle

A Service holds everything real adapters need: one discovery client per
API version, the project router, the rate limiter, and the waiter for
long-running operations. One Service is shared by all adapters of a cloud.
"""

from typing import Any, Dict, Optional

from gce_cloud.core.exceptions import ConfigurationError
from gce_cloud.core.project_router import ProjectRouter
from gce_cloud.core.ratelimit import NopRateLimiter, RateLimiter
from gce_cloud.meta.version import Version
from gce_cloud.operations.waiter import OperationHandle, OperationWaiter


class Service:
    """
    Versioned transports plus the call policies.

    Example:
        service = Service(
            ga=compute_v1,
            alpha=compute_alpha,
            beta=compute_beta,
            project_router=SingleProjectRouter('my-project'),
            rate_limiter=NopRateLimiter()
        )
        cloud = new_gce(service)
    """

    def __init__(self, ga=None, alpha=None, beta=None,
                 project_router: ProjectRouter = None,
                 rate_limiter: RateLimiter = None,
                 poll_interval: float = 1.0,
                 operation_timeout: Optional[float] = None,
                 logger=None):
        """
        Args:
            ga: Discovery client for compute v1
            alpha: Discovery client for compute alpha
            beta: Discovery client for compute beta
            project_router: Resolves the project of each call (required)
            rate_limiter: Gate for every call (default: no limiting)
            poll_interval: Seconds between operation polls
            operation_timeout: Upper bound for one operation wait
            logger: Optional logger for debug output
        """
        if project_router is None:
            raise ConfigurationError("Service requires a project_router")

        self.transports: Dict[Version, Any] = {
            version: transport
            for version, transport in (
                (Version.GA, ga),
                (Version.ALPHA, alpha),
                (Version.BETA, beta),
            )
            if transport is not None
        }
        self.project_router = project_router
        self.rate_limiter = rate_limiter or NopRateLimiter()
        self.waiter = OperationWaiter(
            self.transports,
            self.rate_limiter,
            min_poll_interval=poll_interval,
            timeout=operation_timeout,
            logger=logger
        )

    def transport(self, version: Version):
        """
        Discovery client for an API version.

        Raises:
            ConfigurationError: If no client was given for that version
        """
        try:
            return self.transports[version]
        except KeyError:
            raise ConfigurationError(
                f"No transport configured for API version {version.value}"
            ) from None

    def wait_for_completion(self, ctx, op: OperationHandle):
        """Block until the operation is DONE (see OperationWaiter)."""
        self.waiter.wait_for_completion(ctx, op)
