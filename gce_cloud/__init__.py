"""GCE Cloud - Uniform, mockable access to Compute Engine resources.

Every Compute resource type (addresses, firewalls, instances, ...) in every
API version (ga, alpha, beta) is wrapped by an adapter with the same
get/list/insert/delete calls. A mock facade with the same shape keeps
objects in memory for tests.

Example usage:
    >>> from gce_cloud import background, global_key, new_mock_gce
    >>> cloud = new_mock_gce()
    >>> ctx = background()
    >>> cloud.firewalls.insert(ctx, global_key('fw-1'), {'name': 'fw-1'})
    >>> cloud.firewalls.get(ctx, global_key('fw-1'))['name']
    'fw-1'
"""

from gce_cloud.core.config import VERSION

__version__ = VERSION
__author__ = "GCE Cloud Team"

from gce_cloud.cloud import Cloud, new_cloud, new_gce, new_mock_gce
from gce_cloud.core.config import CloudConfig, create_cloud_config, load_config
from gce_cloud.core.context import CallContext, background
from gce_cloud.core.project_router import MapProjectRouter, SingleProjectRouter
from gce_cloud.core.ratelimit import NopRateLimiter, RateLimitKey, TokenBucketRateLimiter
from gce_cloud.core.resource_id import ResourceID, parse_resource_url
from gce_cloud.core.service import Service
from gce_cloud.meta import (
    Key,
    Locality,
    ServiceInfo,
    ServiceRegistry,
    Version,
    default_registry,
    global_key,
    regional_key,
    zonal_key,
)

__all__ = [
    'Cloud',
    'new_cloud',
    'new_gce',
    'new_mock_gce',
    'CloudConfig',
    'create_cloud_config',
    'load_config',
    'CallContext',
    'background',
    'SingleProjectRouter',
    'MapProjectRouter',
    'NopRateLimiter',
    'TokenBucketRateLimiter',
    'RateLimitKey',
    'ResourceID',
    'parse_resource_url',
    'Service',
    'Key',
    'Locality',
    'ServiceInfo',
    'ServiceRegistry',
    'Version',
    'default_registry',
    'global_key',
    'regional_key',
    'zonal_key',
]
