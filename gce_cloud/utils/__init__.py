"""Utils package."""

from gce_cloud.utils.logger import setup_logging, get_logger

__all__ = [
    'setup_logging',
    'get_logger',
]
