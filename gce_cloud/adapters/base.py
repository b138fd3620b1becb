"""
GCE Cloud - Base Adapter

This module provides the base class for per-resource adapters.
An adapter wraps one resource type (one ServiceInfo row) behind a uniform
interface:

    get(ctx, key)
    list(ctx[, location])
    insert(ctx, key, obj)     # mutable types only
    delete(ctx, key)          # mutable types only
    <custom verbs>(ctx, key, *args)

Real adapters (GCEAdapter) and mocks (MockAdapter) share this interface,
so code written against one works against the other.

Key concept: the interface is picked at construction time. Read-only
resource types get an adapter class without insert() and delete().
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from gce_cloud.meta.key import Key, Locality
from gce_cloud.meta.service import MethodInfo, ServiceInfo
from gce_cloud.utils.logger import get_logger


class BaseAdapter(ABC):
    """
    Base class for all adapters.

    Every adapter must implement get(), list() and call_method(). Mutable
    adapters add insert() and delete().

    Custom verbs declared in the ServiceInfo are reachable as snake_case
    attributes:

        cloud.instances.attach_disk(ctx, key, body)
        # same as
        cloud.instances.call_method(ctx, 'attachDisk', key, body)
    """

    def __init__(self, info: ServiceInfo, logger=None):
        """
        Initialize adapter.

        Args:
            info: Description of the wrapped resource type
            logger: Optional logger for debug output
        """
        self.info = info
        self.logger = logger or get_logger()
        self._methods: Dict[str, MethodInfo] = {}
        for method in info.methods:
            self._methods[method.name] = method
            self._methods[method.attribute] = method

    @abstractmethod
    def get(self, ctx, key: Key) -> Dict[str, Any]:
        """
        Get the object named by key.

        Raises:
            NotFoundError: If it does not exist
        """
        pass

    @abstractmethod
    def list(self, ctx, location: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List all objects. Regional and zonal types need the region or zone.
        """
        pass

    @abstractmethod
    def call_method(self, ctx, name: str, key: Key, *args, **kwargs):
        """
        Invoke a custom verb.

        Args:
            ctx: CallContext
            name: API method name ('attachDisk') or attribute ('attach_disk')
            key: Resource the verb applies to
            *args: Values for the verb's params, in order
        """
        pass

    @property
    def read_only(self) -> bool:
        return self.info.read_only

    def _method(self, name: str) -> MethodInfo:
        try:
            return self._methods[name]
        except KeyError:
            raise AttributeError(
                f"{self.info.wrap_type} has no method {name!r}"
            ) from None

    def _method_params(self, method: MethodInfo, args, kwargs) -> Dict[str, Any]:
        """Map positional and keyword arguments onto the verb's params."""
        if len(args) > len(method.params):
            raise TypeError(
                f"{method.name} takes {len(method.params)} argument(s) "
                f"after the key, got {len(args)}"
            )
        params = dict(zip(method.params, args))
        for name, value in kwargs.items():
            if name not in method.params:
                raise TypeError(f"{method.name} got unexpected argument {name!r}")
            if name in params:
                raise TypeError(f"{method.name} got multiple values for {name!r}")
            params[name] = value
        missing = [p for p in method.params if p not in params]
        if missing:
            raise TypeError(f"{method.name} missing argument(s): {', '.join(missing)}")
        return params

    def _check_key(self, key: Key):
        if key.locality != self.info.locality:
            raise ValueError(
                f"{self.info.wrap_type} needs a {self.info.locality.value} key, got {key}"
            )

    def _check_location(self, location: Optional[str]):
        if self.info.locality == Locality.GLOBAL:
            if location is not None:
                raise ValueError(f"{self.info.wrap_type} is global; list() takes no location")
        elif not location:
            raise ValueError(
                f"{self.info.wrap_type} list() requires a {self.info.location_param}"
            )

    def __getattr__(self, name):
        # Only called when normal lookup fails: resolve custom verbs
        methods = self.__dict__.get('_methods', {})
        if name in methods and name == methods[name].attribute:
            verb = methods[name].name

            def bound_verb(ctx, key: Key, *args, **kwargs):
                return self.call_method(ctx, verb, key, *args, **kwargs)

            bound_verb.__name__ = name
            return bound_verb
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    def __repr__(self):
        return f"<{type(self).__name__} {self.info.wrap_type}>"
