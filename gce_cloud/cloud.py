"""
GCE Cloud - Cloud Facade

One object with an adapter per registered resource type. Adapters are
reachable by accessor attribute or by wrap type:

    cloud = new_gce(service)
    cloud.addresses.list(ctx, 'us-central1')
    cloud.alpha_network_endpoint_groups.get(ctx, key)
    cloud.service('AlphaAddresses')

The mock facade has the same shape, backed by in-memory mocks:

    cloud = new_mock_gce()
    cloud.zones.objects[global_key('us-central1-b')] = {'name': 'us-central1-b'}
"""

from typing import Dict, Iterator, Optional

from gce_cloud.adapters.base import BaseAdapter
from gce_cloud.adapters.gce import new_gce_adapter
from gce_cloud.adapters.mock import new_mock_adapter
from gce_cloud.core.auth import new_service
from gce_cloud.core.config import CloudConfig
from gce_cloud.core.exceptions import ConfigurationError
from gce_cloud.core.project_router import ProjectRouter, SingleProjectRouter
from gce_cloud.core.service import Service
from gce_cloud.meta.service import ServiceRegistry, default_registry
from gce_cloud.utils.logger import get_logger


class Cloud:
    """
    Facade over every adapter of one backend (real or mock).

    Attributes:
        registry: Resource types this cloud was built from
        mock: True if every adapter is a MockAdapter
        project_router: Router the adapters resolve projects with (None
            for mocks built without a project)
    """

    def __init__(self, registry: ServiceRegistry, adapters: Dict[str, BaseAdapter],
                 mock: bool = False, project_router: Optional[ProjectRouter] = None):
        self.registry = registry
        self.mock = mock
        self.project_router = project_router
        self._adapters = adapters
        self._accessors = {
            adapter.info.accessor: adapter for adapter in adapters.values()
        }

    def service(self, wrap_type: str) -> BaseAdapter:
        """
        Adapter for a wrap type ('Addresses', 'AlphaAddresses', ...).

        Raises:
            ConfigurationError: If the type is not part of this cloud
        """
        try:
            return self._adapters[wrap_type]
        except KeyError:
            raise ConfigurationError(f"Unknown service: {wrap_type}") from None

    def __getattr__(self, name):
        accessors = self.__dict__.get('_accessors', {})
        if name in accessors:
            return accessors[name]
        raise AttributeError(f"Cloud has no service {name!r}")

    def __iter__(self) -> Iterator[BaseAdapter]:
        return iter(self._adapters.values())

    def __len__(self):
        return len(self._adapters)

    def __contains__(self, wrap_type):
        return wrap_type in self._adapters

    def __repr__(self):
        kind = 'mock' if self.mock else 'gce'
        return f"<Cloud {kind}, {len(self._adapters)} services>"


def new_gce(service: Service, registry: Optional[ServiceRegistry] = None, logger=None) -> Cloud:
    """
    Build a cloud of real adapters sharing one Service.

    Args:
        service: Transports and call policies
        registry: Resource types to expose (default: all known types)
        logger: Optional logger for debug output

    Returns:
        Cloud: Real facade
    """
    registry = registry if registry is not None else default_registry()
    adapters = {
        info.wrap_type: new_gce_adapter(info, service, logger)
        for info in registry
    }
    return Cloud(registry, adapters, project_router=service.project_router)


def new_mock_gce(registry: Optional[ServiceRegistry] = None, logger=None,
                 project: Optional[str] = None) -> Cloud:
    """
    Build a cloud of empty in-memory mocks.

    Each mock has its own store; nothing is shared between resource types.
    Mocks ignore projects; `project` only tells callers which one the
    cloud stands for.
    """
    registry = registry if registry is not None else default_registry()
    adapters = {
        info.wrap_type: new_mock_adapter(info, logger)
        for info in registry
    }
    router = SingleProjectRouter(project) if project else None
    return Cloud(registry, adapters, mock=True, project_router=router)


def new_cloud(config: CloudConfig, registry: Optional[ServiceRegistry] = None) -> Cloud:
    """
    Build the cloud a configuration asks for.

    Raises:
        AuthenticationError: If credentials are needed and missing
        ConfigurationError: If no project can be determined
    """
    logger = get_logger()
    if config.use_mock:
        logger.debug("Building mock cloud")
        return new_mock_gce(registry, project=config.project)

    registry = registry if registry is not None else default_registry()
    versions = registry.versions()
    logger.debug(f"Building cloud for API versions: {', '.join(sorted(v.value for v in versions))}")
    return new_gce(new_service(config, versions), registry)
