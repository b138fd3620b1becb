"""
GCE Cloud - Configuration Management

This module manages configuration options for building a cloud.
"""

import os
from dataclasses import dataclass, field, fields
from typing import List, Optional

import yaml

from gce_cloud.core.exceptions import ConfigurationError
from gce_cloud.core.project_router import ProjectRouter, SingleProjectRouter
from gce_cloud.core.ratelimit import NopRateLimiter, RateLimiter, TokenBucketRateLimiter

# Version for usage tracking (User-Agent)
VERSION = '0.1.0'

# Environment variable used when no project is configured
PROJECT_ENV = 'GCE_CLOUD_PROJECT'

# Polling faster than this only burns quota
MIN_POLL_INTERVAL = 0.5


@dataclass
class CloudConfig:
    """
    Configuration for a cloud facade.

    Example:
        config = CloudConfig(
            project='my-project',
            qps=5,
            burst=10
        )
    """

    # Target project (None: use the credentials' project)
    project: Optional[str] = None

    # Build in-memory mocks instead of real adapters
    use_mock: bool = False

    # API versions to build transports for
    api_versions: List[str] = field(default_factory=lambda: ['ga', 'alpha', 'beta'])

    # Operation polling (in seconds)
    poll_interval: float = 1.0
    operation_timeout: Optional[float] = 600  # 10 minutes, None waits forever

    # Rate limiting (qps=None disables it)
    qps: Optional[float] = None
    burst: int = 1
    rate_limit_max_wait: Optional[float] = None

    # Logging settings
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.poll_interval < MIN_POLL_INTERVAL:
            raise ConfigurationError(
                f"poll_interval must be at least {MIN_POLL_INTERVAL}s, got {self.poll_interval}"
            )
        unknown = set(self.api_versions) - {'ga', 'alpha', 'beta'}
        if unknown:
            raise ConfigurationError(f"Unknown API versions: {sorted(unknown)}")

    def rate_limiter(self) -> RateLimiter:
        """Build the configured rate limiter."""
        if self.qps is None:
            return NopRateLimiter()
        return TokenBucketRateLimiter(
            qps=self.qps,
            burst=self.burst,
            max_wait=self.rate_limit_max_wait
        )

    def project_router(self, default_project: Optional[str] = None) -> ProjectRouter:
        """
        Build the project router.

        Args:
            default_project: Project to use when none is configured
                (usually the one from the credentials)

        Raises:
            ConfigurationError: If no project is known
        """
        project = self.project or default_project
        if not project:
            raise ConfigurationError(
                f"No project configured. Set 'project' or {PROJECT_ENV}."
            )
        return SingleProjectRouter(project)


def create_cloud_config(**kwargs) -> CloudConfig:
    """
    Create a cloud configuration with custom options.

    When no project is given, the GCE_CLOUD_PROJECT environment variable
    is used.

    Args:
        **kwargs: Configuration options (any field from CloudConfig)

    Returns:
        CloudConfig: Configuration object

    Example:
        config = create_cloud_config(project='my-project', log_level='DEBUG')
    """
    env_project = os.environ.get(PROJECT_ENV)
    if env_project and not kwargs.get('project'):
        kwargs['project'] = env_project
    return CloudConfig(**kwargs)


def load_config(path: str, **overrides) -> CloudConfig:
    """
    Load a configuration from a YAML file.

    Args:
        path: YAML file with CloudConfig fields at the top level
        **overrides: Values taking precedence over the file

    Returns:
        CloudConfig: Configuration object

    Raises:
        ConfigurationError: If the file is unreadable or has unknown keys

    Example (config.yaml):
        project: my-project
        qps: 5
        burst: 10
        poll_interval: 2
    """
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path} must be a mapping")

    known = {f.name for f in fields(CloudConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {path}: {sorted(unknown)}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return create_cloud_config(**data)
