"""
GCE Cloud - Example Entry Point

Walks a cloud through the basic calls: list addresses and firewalls,
then create, read back and delete a firewall.

Usage:
    from gce_cloud import new_mock_gce
    from gce_cloud.main import run_example

    run_example(new_mock_gce())
"""

from typing import Any, Dict, Optional

from gce_cloud.cloud import Cloud
from gce_cloud.core.context import background
from gce_cloud.meta.key import global_key
from gce_cloud.utils.logger import get_logger, print_header

EXAMPLE_PROJECT = 'example-project'
EXAMPLE_REGION = 'us-central1'
EXAMPLE_FIREWALL = 'gce-cloud-example'


def example_firewall(project: str, network: str = 'default') -> Dict[str, Any]:
    """Firewall body allowing tcp:80 from one address."""
    return {
        'allowed': [{'IPProtocol': 'tcp', 'ports': ['80']}],
        'network': f'projects/{project}/global/networks/{network}',
        'direction': 'INGRESS',
        'sourceRanges': ['104.155.174.199/32'],
    }


def example_project(cloud: Cloud, ctx) -> str:
    router = cloud.project_router
    if router is None:
        return EXAMPLE_PROJECT
    info = cloud.firewalls.info
    return router.project_id(ctx, info.version, info.service)


def run_example(cloud: Cloud, project: Optional[str] = None,
                region: str = EXAMPLE_REGION, firewall_name: str = EXAMPLE_FIREWALL,
                ctx=None, logger=None) -> Optional[Dict[str, Any]]:
    """
    Run the example sequence against a cloud.

    This will:
    1. List addresses in `region`
    2. List firewalls
    3. Insert a firewall named `firewall_name`
    4. Get it back
    5. Delete it

    Errors are not caught; the first failing call stops the example.

    Args:
        cloud: Real or mock cloud
        project: Project used in the firewall's network URL (default:
            the project the cloud routes firewall calls to, or
            EXAMPLE_PROJECT for a mock cloud without one)
        region: Region to list addresses in
        firewall_name: Name of the temporary firewall
        ctx: CallContext (default: background)
        logger: Optional logger

    Returns:
        dict: The firewall as read back before deletion

    Example:
        >>> fw = run_example(new_mock_gce())
        >>> fw['direction']
        'INGRESS'
    """
    logger = logger or get_logger()
    ctx = ctx or background()
    if project is None:
        project = example_project(cloud, ctx)

    print_header(logger, f"GCE Cloud - Example ({'mock' if cloud.mock else 'gce'})")

    logger.info(f"List addresses in {region}")
    for addr in cloud.addresses.list(ctx, region):
        logger.info(f"  addr = {addr.get('name')} {addr.get('address', '')}")

    logger.info("List firewalls")
    for fw in cloud.firewalls.list(ctx):
        logger.info(f"  fw = {fw.get('name')}")

    key = global_key(firewall_name)
    cloud.firewalls.insert(ctx, key, example_firewall(project))
    logger.info(f"[OK] Firewall {key} created")

    fw = cloud.firewalls.get(ctx, key)
    logger.info(f"Firewall is {fw}")

    cloud.firewalls.delete(ctx, key)
    logger.info(f"[OK] Firewall {key} deleted")

    return fw
