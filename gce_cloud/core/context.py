"""
GCE Cloud - Call Context

Every adapter operation takes a CallContext as its first argument. The
context carries an optional deadline and can be cancelled from another
thread; adapters check it before dispatching a request and while waiting
for operations.

Example:
    ctx = background().with_timeout(300)
    cloud.firewalls.insert(ctx, global_key('fw-1'), body)

    # From another thread:
    ctx.cancel()
"""

import threading
import time
import weakref
from typing import Optional

from gce_cloud.core.exceptions import CancelledError, DeadlineExceededError


class CallContext:
    """
    Cancellation and deadline carrier.

    Child contexts (with_timeout, with_cancel) inherit the parent's deadline
    and are cancelled when the parent is cancelled.
    """

    def __init__(self, deadline: Optional[float] = None, parent: 'CallContext' = None):
        """
        Args:
            deadline: Absolute time.monotonic() value, or None for no deadline
            parent: Context this one derives from
        """
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)

        self.deadline = deadline
        self.parent = parent
        self._event = threading.Event()
        self._reason: Optional[str] = None
        self._lock = threading.Lock()
        self._children = weakref.WeakSet()

        if parent is not None:
            parent._add_child(self)

    def _add_child(self, child: 'CallContext'):
        with self._lock:
            cancelled = self._event.is_set()
            if not cancelled:
                self._children.add(child)
        if cancelled:
            child.cancel(self._reason)

    def with_timeout(self, seconds: float) -> 'CallContext':
        """Derive a child context that expires after `seconds`."""
        return CallContext(deadline=time.monotonic() + seconds, parent=self)

    def with_cancel(self) -> 'CallContext':
        """Derive a child context that can be cancelled on its own."""
        return CallContext(parent=self)

    def cancel(self, reason: str = "context cancelled"):
        """Cancel this context and every context derived from it."""
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()
            children = list(self._children)
            self._children = weakref.WeakSet()
        for child in children:
            child.cancel(reason)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None without one."""
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def err(self) -> Optional[CancelledError]:
        """The error this context would raise now, or None if still live."""
        if self._event.is_set():
            return CancelledError(self._reason)
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            return DeadlineExceededError()
        return None

    def check(self):
        """
        Raise if the context is done.

        Raises:
            CancelledError: If cancelled
            DeadlineExceededError: If the deadline passed
        """
        error = self.err()
        if error is not None:
            raise error

    def wait(self, seconds: float):
        """
        Sleep for `seconds`, waking early on cancellation or deadline.

        Raises:
            CancelledError: If the context ends before the time is up
        """
        self.check()
        timeout = seconds
        remaining = self.remaining()
        if remaining is not None:
            timeout = min(timeout, max(remaining, 0))
        self._event.wait(timeout)
        self.check()


def background() -> CallContext:
    """A fresh context with no deadline, never cancelled unless asked to."""
    return CallContext()
