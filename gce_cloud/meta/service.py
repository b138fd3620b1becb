"""
GCE Cloud - Resource Description Table

Every Compute resource type the cloud wraps is described by one
ServiceInfo row: object name, API collection, version, locality,
whether it can be mutated, and any custom verbs.

Adapters (real and mock) are built from these rows at runtime, so adding
a resource type means adding a row here.

Example:
    registry = default_registry()
    info = registry.get('AlphaAddresses')
    info.accessor        # 'alpha_addresses'
    info.location_param  # 'region'
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Tuple

from gce_cloud.core.exceptions import ConfigurationError
from gce_cloud.meta.key import Locality
from gce_cloud.meta.version import Version


def snake_case(name: str) -> str:
    """'AlphaAddresses' -> 'alpha_addresses', 'attachDisk' -> 'attach_disk'."""
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def _singular(collection: str) -> str:
    # Poor man's singularize: "targetHttpProxies" -> "targetHttpProxy"
    if collection.endswith('ies'):
        return collection[:-3] + 'y'
    if collection.endswith('sses'):
        return collection[:-2]
    if collection.endswith('s'):
        return collection[:-1]
    return collection


@dataclass(frozen=True)
class MethodInfo:
    """
    A custom (non-CRUD) verb on a resource type.

    Attributes:
        name: API method name on the collection (e.g. 'attachDisk')
        returns_operation: True if the call mutates and returns an Operation
        params: Names of the request parameters after the resource name,
            filled from positional arguments in order
    """
    name: str
    returns_operation: bool = True
    params: Tuple[str, ...] = ('body',)

    @property
    def operation(self) -> str:
        """Operation name used in rate limit keys ('AttachDisk')."""
        return self.name[0].upper() + self.name[1:]

    @property
    def attribute(self) -> str:
        """Python attribute name on adapters ('attach_disk')."""
        return snake_case(self.name)

    @property
    def hook_name(self) -> str:
        """Mock hook attribute for this verb ('attach_disk_hook')."""
        return f'{self.attribute}_hook'


@dataclass(frozen=True)
class ServiceInfo:
    """
    One row of the resource table.

    Attributes:
        object: Resource object type name (e.g. 'Address')
        service: API collection name (e.g. 'addresses')
        version: API version family
        locality: Locality of the resource's keys
        read_only: If True, no insert() or delete() is exposed
        methods: Custom verbs
        name_param: API parameter carrying the resource name; derived from
            the collection name when not given
    """
    object: str
    service: str
    version: Version = Version.GA
    locality: Locality = Locality.GLOBAL
    read_only: bool = False
    methods: Tuple[MethodInfo, ...] = field(default_factory=tuple)
    name_param: Optional[str] = None

    @property
    def wrap_type(self) -> str:
        """Facade-level type name ('Addresses', 'AlphaAddresses')."""
        base = self.service[0].upper() + self.service[1:]
        if self.version == Version.GA:
            return base
        return self.version.value.capitalize() + base

    @property
    def mock_wrap_type(self) -> str:
        """Type name used in mock error messages ('MockAddresses')."""
        return f'Mock{self.wrap_type}'

    @property
    def accessor(self) -> str:
        """Attribute name on the cloud facade ('alpha_addresses')."""
        return snake_case(self.wrap_type)

    @property
    def resource_param(self) -> str:
        """API parameter naming the resource ('address')."""
        return self.name_param or _singular(self.service)

    @property
    def location_param(self) -> Optional[str]:
        """'zone', 'region', or None for global resources."""
        if self.locality == Locality.ZONAL:
            return 'zone'
        if self.locality == Locality.REGIONAL:
            return 'region'
        return None


class ServiceRegistry:
    """
    The set of resource types a cloud facade is built from.

    Constructed explicitly and handed to the facade builders; there is no
    process-wide registry.

    Example:
        registry = ServiceRegistry([
            ServiceInfo(object='Firewall', service='firewalls'),
        ])
        cloud = new_mock_gce(registry)
    """

    def __init__(self, services: Iterable[ServiceInfo] = ()):
        self._services: Dict[str, ServiceInfo] = {}
        for info in services:
            self.register(info)

    def register(self, info: ServiceInfo):
        """
        Add a resource type.

        Raises:
            ConfigurationError: If the wrap type or accessor is taken
        """
        if info.wrap_type in self._services:
            raise ConfigurationError(f"Service {info.wrap_type} registered twice")
        self._services[info.wrap_type] = info

    def get(self, wrap_type: str) -> ServiceInfo:
        """
        Look up a resource type by wrap type.

        Raises:
            ConfigurationError: If unknown
        """
        try:
            return self._services[wrap_type]
        except KeyError:
            raise ConfigurationError(f"Unknown service: {wrap_type}") from None

    def versions(self):
        """API versions used by any registered service."""
        return {info.version for info in self._services.values()}

    def __iter__(self) -> Iterator[ServiceInfo]:
        return iter(self._services.values())

    def __len__(self):
        return len(self._services)

    def __contains__(self, wrap_type):
        return wrap_type in self._services


_UPDATE = MethodInfo('update')

ALL_SERVICES = (
    ServiceInfo(object='Address', service='addresses',
                locality=Locality.REGIONAL),
    ServiceInfo(object='Address', service='addresses',
                version=Version.ALPHA, locality=Locality.REGIONAL),
    ServiceInfo(object='Address', service='addresses',
                version=Version.BETA, locality=Locality.REGIONAL),
    ServiceInfo(object='Address', service='globalAddresses',
                name_param='address'),
    ServiceInfo(object='BackendService', service='backendServices',
                methods=(MethodInfo('getHealth', returns_operation=False), _UPDATE)),
    ServiceInfo(object='BackendService', service='backendServices',
                version=Version.ALPHA,
                methods=(MethodInfo('getHealth', returns_operation=False), _UPDATE)),
    ServiceInfo(object='BackendService', service='regionBackendServices',
                version=Version.ALPHA, locality=Locality.REGIONAL,
                name_param='backendService',
                methods=(MethodInfo('getHealth', returns_operation=False), _UPDATE)),
    ServiceInfo(object='Disk', service='disks', locality=Locality.ZONAL),
    ServiceInfo(object='Disk', service='disks',
                version=Version.ALPHA, locality=Locality.ZONAL),
    ServiceInfo(object='Disk', service='regionDisks',
                version=Version.ALPHA, locality=Locality.REGIONAL,
                name_param='disk'),
    ServiceInfo(object='Firewall', service='firewalls'),
    ServiceInfo(object='ForwardingRule', service='forwardingRules',
                locality=Locality.REGIONAL),
    ServiceInfo(object='ForwardingRule', service='forwardingRules',
                version=Version.ALPHA, locality=Locality.REGIONAL),
    ServiceInfo(object='ForwardingRule', service='globalForwardingRules',
                name_param='forwardingRule',
                methods=(MethodInfo('setTarget'),)),
    ServiceInfo(object='HealthCheck', service='healthChecks',
                methods=(_UPDATE,)),
    ServiceInfo(object='HealthCheck', service='healthChecks',
                version=Version.ALPHA, methods=(_UPDATE,)),
    ServiceInfo(object='HttpHealthCheck', service='httpHealthChecks',
                methods=(_UPDATE,)),
    ServiceInfo(object='HttpsHealthCheck', service='httpsHealthChecks',
                methods=(_UPDATE,)),
    ServiceInfo(object='InstanceGroup', service='instanceGroups',
                locality=Locality.ZONAL,
                methods=(
                    MethodInfo('addInstances'),
                    MethodInfo('listInstances', returns_operation=False),
                    MethodInfo('removeInstances'),
                    MethodInfo('setNamedPorts'),
                )),
    ServiceInfo(object='Instance', service='instances',
                locality=Locality.ZONAL,
                methods=(
                    MethodInfo('attachDisk'),
                    MethodInfo('detachDisk', params=('deviceName',)),
                )),
    ServiceInfo(object='Instance', service='instances',
                version=Version.BETA, locality=Locality.ZONAL,
                methods=(
                    MethodInfo('attachDisk'),
                    MethodInfo('detachDisk', params=('deviceName',)),
                )),
    ServiceInfo(object='Instance', service='instances',
                version=Version.ALPHA, locality=Locality.ZONAL,
                methods=(
                    MethodInfo('attachDisk'),
                    MethodInfo('detachDisk', params=('deviceName',)),
                )),
    ServiceInfo(object='NetworkEndpointGroup', service='networkEndpointGroups',
                version=Version.ALPHA, locality=Locality.ZONAL,
                methods=(
                    MethodInfo('attachNetworkEndpoints'),
                    MethodInfo('detachNetworkEndpoints'),
                )),
    ServiceInfo(object='Region', service='regions', read_only=True),
    ServiceInfo(object='Route', service='routes'),
    ServiceInfo(object='SslCertificate', service='sslCertificates'),
    ServiceInfo(object='TargetHttpProxy', service='targetHttpProxies',
                methods=(MethodInfo('setUrlMap'),)),
    ServiceInfo(object='TargetHttpsProxy', service='targetHttpsProxies',
                methods=(MethodInfo('setSslCertificates'), MethodInfo('setUrlMap'))),
    ServiceInfo(object='TargetPool', service='targetPools',
                locality=Locality.REGIONAL,
                methods=(MethodInfo('addInstance'), MethodInfo('removeInstance'))),
    ServiceInfo(object='UrlMap', service='urlMaps', methods=(_UPDATE,)),
    ServiceInfo(object='Zone', service='zones', read_only=True),
)


def default_registry() -> ServiceRegistry:
    """Build a fresh registry of every known Compute resource type."""
    return ServiceRegistry(ALL_SERVICES)
