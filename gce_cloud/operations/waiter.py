"""
GCE Cloud - Operation Completion

Mutating Compute calls (insert, delete, most custom verbs) return an
Operation resource that finishes asynchronously. OperationWaiter polls it
through the same API version that issued it until it is DONE.

Key concept: a DONE operation can still have failed. Its `error.errors`
payload is raised as OperationFailedError.

Example:
    waiter = OperationWaiter(transports, rate_limiter, min_poll_interval=2)
    op = OperationHandle(Version.GA, 'my-project', raw_operation)
    waiter.wait_for_completion(ctx, op)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httplib2
from googleapiclient.errors import HttpError

from gce_cloud.core.exceptions import (
    InvalidFormatError,
    OperationFailedError,
    errors_from_http,
)
from gce_cloud.core.ratelimit import NopRateLimiter, RateLimitKey, RateLimiter
from gce_cloud.core.resource_id import parse_resource_url
from gce_cloud.meta.key import Key, Locality, global_key, regional_key, zonal_key
from gce_cloud.meta.version import Version
from gce_cloud.utils.logger import (
    get_logger,
    log_api_call,
    log_operation_end,
    log_operation_start,
)

OPERATION_DONE = 'DONE'


@dataclass
class OperationHandle:
    """
    An in-flight Compute operation.

    Attributes:
        version: API version of the call that created it
        project: Project the call was made against
        resource: Operation resource as returned by the API
    """
    version: Version
    project: str
    resource: Dict[str, Any]

    @property
    def name(self) -> str:
        return self.resource.get('name', '')

    @property
    def self_link(self) -> str:
        return self.resource.get('selfLink', '')

    @property
    def status(self) -> str:
        return self.resource.get('status', '')

    @property
    def done(self) -> bool:
        return self.status == OPERATION_DONE

    @property
    def error_payload(self) -> Optional[List[Dict[str, Any]]]:
        """The embedded error entries, or None if the operation did not fail."""
        errors = (self.resource.get('error') or {}).get('errors')
        return errors or None


def _last_segment(url: str) -> str:
    return url.rstrip('/').rsplit('/', 1)[-1]


class OperationWaiter:
    """
    Polls operations until they reach a terminal state.

    Each poll goes through the rate limiter, and the sleep between polls
    goes through the call context so cancellation stops the wait.
    """

    def __init__(self, transports: Dict[Version, Any], rate_limiter: RateLimiter = None,
                 min_poll_interval: float = 1.0, timeout: Optional[float] = None,
                 logger=None):
        """
        Initialize waiter.

        Args:
            transports: Discovery clients keyed by API version
            rate_limiter: Gate for poll calls (default: no limiting)
            min_poll_interval: Seconds to sleep between polls, must be > 0
            timeout: Upper bound in seconds for one wait (None: only the
                caller's context limits it)
            logger: Optional logger for debug output
        """
        if min_poll_interval <= 0:
            raise ValueError("min_poll_interval must be positive")

        self.transports = transports
        self.rate_limiter = rate_limiter or NopRateLimiter()
        self.min_poll_interval = min_poll_interval
        self.timeout = timeout
        self.logger = logger or get_logger()

    def _operation_key(self, op: OperationHandle) -> Tuple[str, Key]:
        """
        Work out the project and scope of an operation.

        The self link is authoritative; the zone/region fields are used
        when it is missing.
        """
        if op.self_link:
            try:
                rid = parse_resource_url(op.self_link)
                if rid.key is not None:
                    return rid.project_id, rid.key
            except InvalidFormatError:
                self.logger.debug(f"Unparseable operation selfLink: {op.self_link}")

        if op.resource.get('zone'):
            return op.project, zonal_key(op.name, _last_segment(op.resource['zone']))
        if op.resource.get('region'):
            return op.project, regional_key(op.name, _last_segment(op.resource['region']))
        return op.project, global_key(op.name)

    def _poll(self, ctx, op: OperationHandle, project: str, key: Key) -> OperationHandle:
        """Fetch the current state of the operation once."""
        self.rate_limiter.accept(ctx, RateLimitKey('Get', op.version, 'Operations'))
        ctx.check()

        transport = self.transports[op.version]
        if key.locality == Locality.ZONAL:
            method = 'zoneOperations'
            params = {'project': project, 'zone': key.zone, 'operation': key.name}
        elif key.locality == Locality.REGIONAL:
            method = 'regionOperations'
            params = {'project': project, 'region': key.region, 'operation': key.name}
        else:
            method = 'globalOperations'
            params = {'project': project, 'operation': key.name}

        log_api_call(self.logger, f'{method}.get', **params)
        try:
            resource = getattr(transport, method)().get(**params).execute()
        except (HttpError, httplib2.HttpLib2Error) as e:
            raise errors_from_http(e) from e

        return OperationHandle(op.version, op.project, resource)

    def wait_for_completion(self, ctx, op: OperationHandle):
        """
        Block until the operation is DONE.

        Args:
            ctx: CallContext; cancellation or deadline aborts the wait
            op: Operation returned by a mutating call

        Raises:
            OperationFailedError: If the operation finished with errors
            CancelledError: If ctx is cancelled or its deadline passes
            CloudAPIError: If a poll call fails (not retried)
        """
        if self.timeout is not None:
            ctx = ctx.with_timeout(self.timeout)

        project, key = self._operation_key(op)
        start_time = log_operation_start(self.logger, op.name)

        while not op.done:
            ctx.wait(self.min_poll_interval)
            op = self._poll(ctx, op, project, key)
            self.logger.debug(f"Operation {op.name} status: {op.status}")

        log_operation_end(self.logger, op.name, start_time)

        if op.error_payload:
            raise OperationFailedError(op.name, op.error_payload)
