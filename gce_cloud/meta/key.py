"""
GCE Cloud - Resource Keys

A Key names one resource instance. The locality (global, regional or
zonal) is fixed by the constructor used:

    global_key('my-firewall')
    regional_key('my-address', 'us-central1')
    zonal_key('vm-1', 'us-central1-b')
"""

import re
from dataclasses import dataclass
from enum import Enum


class Locality(str, Enum):
    """Where a resource lives."""
    GLOBAL = 'global'
    REGIONAL = 'regional'
    ZONAL = 'zonal'


# Compute Engine resource names (RFC1035 labels, up to 63 chars)
_NAME_RE = re.compile(r'^[a-z]([-a-z0-9]{0,61}[a-z0-9])?$')
_LOCATION_RE = re.compile(r'^[a-z][-a-z0-9]*[a-z0-9]$')


@dataclass(frozen=True)
class Key:
    """
    Identifier for a resource.

    Do not construct directly; use global_key(), regional_key() or
    zonal_key(). Equality and hashing compare the locality tag and all
    fields, so keys work as dict keys.
    """
    name: str
    locality: Locality = Locality.GLOBAL
    zone: str = ''
    region: str = ''

    def __post_init__(self):
        # Only the field of the key's own locality may be set
        if self.zone and self.locality != Locality.ZONAL:
            raise ValueError(f"{self.locality.value} key {self.name!r} cannot have a zone")
        if self.region and self.locality != Locality.REGIONAL:
            raise ValueError(f"{self.locality.value} key {self.name!r} cannot have a region")

    @property
    def location(self) -> str:
        """Zone, region, or empty string for global keys."""
        if self.locality == Locality.ZONAL:
            return self.zone
        if self.locality == Locality.REGIONAL:
            return self.region
        return ''

    def valid(self) -> bool:
        """Check the name and location against Compute naming rules."""
        if not _NAME_RE.match(self.name):
            return False
        if self.locality == Locality.GLOBAL:
            return True
        return bool(_LOCATION_RE.match(self.location))

    def __str__(self):
        if self.locality == Locality.ZONAL:
            return f'Key{{"{self.name}", zone: "{self.zone}"}}'
        if self.locality == Locality.REGIONAL:
            return f'Key{{"{self.name}", region: "{self.region}"}}'
        return f'Key{{"{self.name}"}}'


def global_key(name: str) -> Key:
    """Key for a global resource."""
    return Key(name=name, locality=Locality.GLOBAL)


def regional_key(name: str, region: str) -> Key:
    """Key for a resource in a region."""
    return Key(name=name, locality=Locality.REGIONAL, region=region)


def zonal_key(name: str, zone: str) -> Key:
    """Key for a resource in a zone."""
    return Key(name=name, locality=Locality.ZONAL, zone=zone)
