"""
GCE Cloud - Resource URL Parsing

Parses Compute resource URLs (self links) into ResourceID values.

Accepted shapes, with or without a known API prefix such as
https://www.googleapis.com/compute/v1/ :

    projects/<proj>
    projects/<proj>/regions/<region>
    projects/<proj>/zones/<zone>
    projects/<proj>/global/<res>/<name>
    projects/<proj>/regions/<region>/<res>/<name>
    projects/<proj>/zones/<zone>/<res>/<name>

Example:
    rid = parse_resource_url('projects/p1/zones/us-central1-b/instances/vm-1')
    rid.project_id   # 'p1'
    rid.resource     # 'instances'
    rid.key          # zonal_key('vm-1', 'us-central1-b')
"""

from dataclasses import dataclass
from typing import Optional

from gce_cloud.core.exceptions import InvalidFormatError
from gce_cloud.meta.key import Key, Locality, global_key, regional_key, zonal_key
from gce_cloud.meta.version import ALL_PREFIXES, Version


@dataclass(frozen=True)
class ResourceID:
    """
    A resource as named by its URL.

    Attributes:
        project_id: Project owning the resource
        resource: Resource collection ('instances', 'regions', 'projects')
        key: Key of the resource; None only for 'projects'
    """
    project_id: str
    resource: str
    key: Optional[Key] = None

    def equal(self, other: 'ResourceID') -> bool:
        """Same project, same resource, and keys both absent or equal."""
        return self == other

    def relative_resource_name(self) -> str:
        """The bare 'projects/...' path of this resource."""
        path = f'projects/{self.project_id}'
        if self.key is None:
            return path
        if self.resource in ('regions', 'zones') and self.key.locality == Locality.GLOBAL:
            return f'{path}/{self.resource}/{self.key.name}'
        if self.key.locality == Locality.ZONAL:
            return f'{path}/zones/{self.key.zone}/{self.resource}/{self.key.name}'
        if self.key.locality == Locality.REGIONAL:
            return f'{path}/regions/{self.key.region}/{self.resource}/{self.key.name}'
        return f'{path}/global/{self.resource}/{self.key.name}'

    def self_link(self, version: Version = Version.GA) -> str:
        """Fully qualified URL of this resource for the given API version."""
        return version.url_prefix + self.relative_resource_name()


def _strip_prefix(url: str) -> str:
    # Only complete known prefixes are removed. Anything else (e.g. an
    # unsupported version like /compute/gamma/) stays and fails below.
    for prefix in ALL_PREFIXES:
        if url.startswith(prefix) and len(url) >= len(prefix):
            return url[len(prefix):]
    return url


def parse_resource_url(url: str) -> ResourceID:
    """
    Parse a resource URL.

    Args:
        url: Self link or 'projects/...' path

    Returns:
        ResourceID: Parsed project, resource type and key

    Raises:
        InvalidFormatError: If the URL does not match an accepted shape.
            The error names the original input.
    """
    parts = _strip_prefix(url).split('/')

    if len(parts) < 2 or parts[0] != 'projects':
        raise InvalidFormatError(url)

    project = parts[1]

    if len(parts) == 2:
        return ResourceID(project, 'projects', None)

    if len(parts) == 4:
        if parts[2] in ('regions', 'zones'):
            return ResourceID(project, parts[2], global_key(parts[3]))
        raise InvalidFormatError(url)

    if len(parts) == 5 and parts[2] == 'global':
        return ResourceID(project, parts[3], global_key(parts[4]))

    if len(parts) == 6:
        if parts[2] == 'regions':
            return ResourceID(project, parts[4], regional_key(parts[5], parts[3]))
        if parts[2] == 'zones':
            return ResourceID(project, parts[4], zonal_key(parts[5], parts[3]))

    raise InvalidFormatError(url)
