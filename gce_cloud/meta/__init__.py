"""Resource metadata: keys, API versions and the resource description table."""

from gce_cloud.meta.key import Key, Locality, global_key, regional_key, zonal_key
from gce_cloud.meta.version import Version, ALL_VERSIONS
from gce_cloud.meta.service import (
    MethodInfo,
    ServiceInfo,
    ServiceRegistry,
    ALL_SERVICES,
    default_registry,
)

__all__ = [
    'Key',
    'Locality',
    'global_key',
    'regional_key',
    'zonal_key',
    'Version',
    'ALL_VERSIONS',
    'MethodInfo',
    'ServiceInfo',
    'ServiceRegistry',
    'ALL_SERVICES',
    'default_registry',
]
