"""
GCE Cloud - Operations Module

Long-running Compute operations and the waiter that drives them to
completion.

Usage:
    from gce_cloud.operations import OperationHandle, OperationWaiter

    waiter = OperationWaiter(transports, rate_limiter)
    waiter.wait_for_completion(ctx, OperationHandle(Version.GA, project, op))
"""

from gce_cloud.operations.waiter import OperationHandle, OperationWaiter, OPERATION_DONE

__all__ = [
    'OperationHandle',
    'OperationWaiter',
    'OPERATION_DONE',
]
