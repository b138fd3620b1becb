"""
GCE Cloud - Project Routing

Decides which project an API call targets. The simplest router always
returns the same project.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from gce_cloud.core.exceptions import ConfigurationError
from gce_cloud.meta.version import Version


class ProjectRouter(ABC):
    """Maps (version, service) to a project ID."""

    @abstractmethod
    def project_id(self, ctx, version: Version, service: str) -> str:
        """
        Args:
            ctx: CallContext of the caller
            version: API version of the call
            service: API collection (e.g. 'addresses')

        Returns:
            str: Project ID to use
        """
        pass


class SingleProjectRouter(ProjectRouter):
    """Routes every call to one project."""

    def __init__(self, project_id: str):
        self.id = project_id

    def project_id(self, ctx, version: Version, service: str) -> str:
        return self.id


class MapProjectRouter(ProjectRouter):
    """
    Per-(version, service) routes with an optional default.

    Example:
        router = MapProjectRouter(
            {(Version.ALPHA, 'networkEndpointGroups'): 'alpha-project'},
            default='main-project'
        )
    """

    def __init__(self, routes: Dict[Tuple[Version, str], str], default: Optional[str] = None):
        self.routes = dict(routes)
        self.default = default

    def project_id(self, ctx, version: Version, service: str) -> str:
        project = self.routes.get((version, service), self.default)
        if project is None:
            raise ConfigurationError(
                f"No project configured for {version.value}/{service}"
            )
        return project
