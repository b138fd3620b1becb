"""
GCE Cloud - Credentials and Transports

Builds the Service a real cloud runs on: Application Default Credentials,
one Compute discovery client per configured API version, and the call
policies from CloudConfig.

Example:
    service = new_service(CloudConfig(project='my-project'))
    cloud = new_gce(service)
"""

import google.auth
import google_auth_httplib2
import googleapiclient.http
import httplib2
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request
from googleapiclient import discovery

from gce_cloud.core.config import CloudConfig, VERSION
from gce_cloud.core.exceptions import AuthenticationError
from gce_cloud.core.service import Service
from gce_cloud.meta.version import Version
from gce_cloud.utils.logger import get_logger

SCOPES = ['https://www.googleapis.com/auth/cloud-platform']

USER_AGENT = f'gce-cloud/{VERSION}'

LOGIN_FIX = 'gcloud auth application-default login'


class AuthManager:
    """
    Loads credentials once and hands out Compute clients built from them.

    Credentials are looked up lazily on first use, through the normal ADC
    chain (GOOGLE_APPLICATION_CREDENTIALS, gcloud user credentials, then
    the metadata server).
    """

    def __init__(self, logger=None):
        self.logger = logger or get_logger()
        self._credentials = None
        self._project = None
        self._clients = {}

    def get_credentials(self):
        """
        Resolve Application Default Credentials.

        Returns:
            tuple: (credentials, project the credentials belong to or None)

        Raises:
            AuthenticationError: If no usable credentials exist
        """
        try:
            credentials, project = google.auth.default(scopes=SCOPES)
        except DefaultCredentialsError as e:
            raise AuthenticationError("No Application Default Credentials found", fix=LOGIN_FIX) from e

        if credentials.expired and getattr(credentials, 'refresh_token', None):
            self.logger.debug("Refreshing expired credentials")
            try:
                credentials.refresh(Request())
            except RefreshError as e:
                raise AuthenticationError("Could not refresh expired credentials", fix=LOGIN_FIX) from e

        return credentials, project

    @property
    def credentials(self):
        if self._credentials is None:
            self._credentials, self._project = self.get_credentials()
        return self._credentials

    def get_project(self):
        """Project attached to the credentials, if any."""
        self.credentials
        return self._project

    def _request_builder(self):
        credentials = self.credentials

        def build_request(http, *args, **kwargs):
            # httplib2.Http is not thread-safe: one per request
            kwargs.setdefault('headers', {})['user-agent'] = USER_AGENT
            authorized = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
            return googleapiclient.http.HttpRequest(authorized, *args, **kwargs)

        return build_request

    def get_client(self, version: Version):
        """
        Compute discovery client for one API version (built once).

        Raises:
            AuthenticationError: If credentials are missing or the client
                cannot be built
        """
        if version in self._clients:
            return self._clients[version]

        try:
            client = discovery.build(
                'compute',
                version.api_version,
                credentials=self.credentials,
                cache_discovery=False,
                requestBuilder=self._request_builder()
            )
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(
                f"Cannot build compute {version.api_version} client: {e}"
            ) from e

        self.logger.debug(f"Built compute {version.api_version} client")
        self._clients[version] = client
        return client

    def get_service(self, config: CloudConfig, versions=None) -> Service:
        """
        Service with a client for each of config.api_versions, limited to
        `versions` when given (e.g. ServiceRegistry.versions()).

        Raises:
            AuthenticationError: If credentials are missing
            ConfigurationError: If neither the config nor the credentials
                name a project
        """
        clients = {
            name: self.get_client(Version(name))
            for name in config.api_versions
            if versions is None or Version(name) in versions
        }
        return Service(
            project_router=config.project_router(self.get_project()),
            rate_limiter=config.rate_limiter(),
            poll_interval=config.poll_interval,
            operation_timeout=config.operation_timeout,
            logger=self.logger,
            **clients
        )


def new_service(config: CloudConfig, versions=None) -> Service:
    """Build a Service from Application Default Credentials."""
    return AuthManager().get_service(config, versions)
