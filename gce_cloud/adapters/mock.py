"""
GCE Cloud - Mock Adapter

In-memory stand-in for a real adapter, for deterministic tests.

Objects live in `objects` keyed by Key. Errors can be injected per key
(get_error, insert_error, delete_error) or for all lists (list_error).

Hooks let a test intercept a call before the default mock logic runs. A
hook is called as hook(mock, ctx, ...) and returns (handled, value):

    def get_hook(mock, ctx, key):
        if key.name == 'special':
            return True, {'name': 'special'}   # handled: returned as-is
        return False, None                     # fall through to the store

    cloud.addresses.get_hook = get_hook

A hook raises to return an error. Custom verbs have one hook each
(e.g. `attach_disk_hook`), called as hook(mock, ctx, key, *args) and
returning the verb's result directly.
"""

import threading
from typing import Any, Callable, Dict, List, Optional

from gce_cloud.adapters.base import BaseAdapter
from gce_cloud.core.exceptions import AlreadyExistsError, HookNotSetError, NotFoundError
from gce_cloud.meta.key import Key, Locality
from gce_cloud.meta.service import ServiceInfo

Hook = Callable[..., Any]


class MockAdapter(BaseAdapter):
    """
    Mock for a read-only resource type (get, list, custom verbs).

    Attributes:
        objects: Objects maintained by the mock
        get_error: Errors raised by get() for specific keys
        list_error: Error raised by every list(), if set
        get_hook, list_hook: Interception hooks (None: no interception)
        x: Free-form extra state for tests; the mock never touches it
    """

    def __init__(self, info: ServiceInfo, logger=None):
        super().__init__(info, logger)
        self.lock = threading.Lock()

        self.objects: Dict[Key, Dict[str, Any]] = {}

        self.get_error: Dict[Key, Exception] = {}
        self.list_error: Optional[Exception] = None

        self.get_hook: Optional[Hook] = None
        self.list_hook: Optional[Hook] = None
        for method in info.methods:
            setattr(self, method.hook_name, None)

        self.x: Any = None

    def _not_found(self, key: Key) -> NotFoundError:
        return NotFoundError(f"{self.info.mock_wrap_type} {key} not found")

    def get(self, ctx, key: Key) -> Dict[str, Any]:
        """Return the stored object, an injected error, or NotFoundError."""
        self._check_key(key)

        if self.get_hook is not None:
            handled, obj = self.get_hook(self, ctx, key)
            if handled:
                return obj

        with self.lock:
            if key in self.get_error:
                raise self.get_error[key]
            if key in self.objects:
                return self.objects[key]
            raise self._not_found(key)

    def list(self, ctx, location: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return all stored objects in the region/zone (all, if global)."""
        self._check_location(location)

        if self.list_hook is not None:
            handled, objs = self.list_hook(self, ctx, location)
            if handled:
                return objs

        with self.lock:
            if self.list_error is not None:
                raise self.list_error

            if self.info.locality == Locality.GLOBAL:
                return list(self.objects.values())
            return [obj for key, obj in self.objects.items() if key.location == location]

    def call_method(self, ctx, name: str, key: Key, *args, **kwargs):
        """
        Dispatch a custom verb to its hook.

        Raises:
            HookNotSetError: If no hook is registered for the verb
        """
        method = self._method(name)
        self._check_key(key)
        hook = getattr(self, method.hook_name)
        if hook is None:
            raise HookNotSetError(f"{self.info.mock_wrap_type}.{method.hook_name}")
        return hook(self, ctx, key, *args, **kwargs)


class MutableMockAdapter(MockAdapter):
    """
    Mock for a mutable resource type (adds insert and delete).

    Attributes:
        insert_error: Errors raised by insert() for specific keys
        delete_error: Errors raised by delete() for specific keys
        insert_hook, delete_hook: Interception hooks
    """

    def __init__(self, info: ServiceInfo, logger=None):
        super().__init__(info, logger)
        self.insert_error: Dict[Key, Exception] = {}
        self.delete_error: Dict[Key, Exception] = {}
        self.insert_hook: Optional[Hook] = None
        self.delete_hook: Optional[Hook] = None

    def insert(self, ctx, key: Key, obj: Dict[str, Any]):
        """
        Store obj under key.

        Raises:
            AlreadyExistsError: If the key is already stored
        """
        self._check_key(key)

        if self.insert_hook is not None:
            handled, _ = self.insert_hook(self, ctx, key, obj)
            if handled:
                return

        with self.lock:
            if key in self.insert_error:
                raise self.insert_error[key]
            if key in self.objects:
                raise AlreadyExistsError(f"{self.info.mock_wrap_type} {key} exists")
            self.objects[key] = obj

    def delete(self, ctx, key: Key):
        """
        Remove the object stored under key.

        Raises:
            NotFoundError: If nothing is stored under key
        """
        self._check_key(key)

        if self.delete_hook is not None:
            handled, _ = self.delete_hook(self, ctx, key)
            if handled:
                return

        with self.lock:
            if key in self.delete_error:
                raise self.delete_error[key]
            if key not in self.objects:
                raise self._not_found(key)
            del self.objects[key]


def new_mock_adapter(info: ServiceInfo, logger=None) -> MockAdapter:
    """Build the mock matching the resource type's mutability."""
    if info.read_only:
        return MockAdapter(info, logger)
    return MutableMockAdapter(info, logger)
