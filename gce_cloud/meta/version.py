"""
GCE Cloud - API Versions

The three Compute Engine API version families and their URL prefixes.
"""

from enum import Enum


class Version(str, Enum):
    """API version family."""
    GA = 'ga'
    ALPHA = 'alpha'
    BETA = 'beta'

    @property
    def api_version(self) -> str:
        """Version string used by the discovery client ('v1', 'alpha', ...)."""
        return API_VERSIONS[self]

    @property
    def url_prefix(self) -> str:
        """Host/path prefix of resource URLs for this version."""
        return f'{COMPUTE_URL}/{self.api_version}/'


COMPUTE_URL = 'https://www.googleapis.com/compute'

API_VERSIONS = {
    Version.GA: 'v1',
    Version.ALPHA: 'alpha',
    Version.BETA: 'beta',
}

ALL_VERSIONS = [Version.GA, Version.ALPHA, Version.BETA]

# Order matters only for readability; prefixes never overlap
ALL_PREFIXES = [v.url_prefix for v in ALL_VERSIONS]
