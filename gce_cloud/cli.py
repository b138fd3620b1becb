"""
GCE Cloud - Command Line Interface

Small gcloud-style front end over the cloud facade.

Usage:
    gce-cloud parse projects/p/zones/us-central1-b/instances/vm-1
    gce-cloud get https://www.googleapis.com/compute/v1/projects/p/global/firewalls/fw-1
    gce-cloud list Addresses --region=us-central1
    gce-cloud list alpha_network_endpoint_groups --zone=us-central1-b
    gce-cloud example --mock
"""

import argparse
import json
import sys
import traceback
from typing import Any, Dict, List, Optional

import yaml

from gce_cloud.cloud import Cloud, new_cloud
from gce_cloud.core.config import VERSION, create_cloud_config, load_config
from gce_cloud.core.context import background
from gce_cloud.core.exceptions import ConfigurationError, GCECloudError
from gce_cloud.core.resource_id import ResourceID, parse_resource_url
from gce_cloud.main import run_example
from gce_cloud.meta.key import Locality
from gce_cloud.meta.service import ServiceInfo, ServiceRegistry
from gce_cloud.meta.version import ALL_VERSIONS, Version
from gce_cloud.utils.logger import setup_logging


class OutputFormatter:
    """Renders command results as json, yaml or a plain table."""

    @staticmethod
    def format_output(data: Any, format_type: str = 'table') -> str:
        if format_type == 'json':
            return json.dumps(data, indent=2, sort_keys=True)
        if format_type == 'yaml':
            return yaml.safe_dump(data, default_flow_style=False)
        if isinstance(data, list):
            return OutputFormatter._format_rows(data)
        return OutputFormatter._format_table(data)

    @staticmethod
    def _format_table(data: Dict[str, Any]) -> str:
        """One object as KEY / VALUE lines, nested values as compact json."""
        width = max((len(str(k)) for k in data), default=0) + 2
        lines = []
        for key, value in data.items():
            if isinstance(value, (dict, list)):
                value = json.dumps(value, sort_keys=True)
            lines.append(f"{key:{width}}{value}")
        return "\n".join(lines)

    @staticmethod
    def _format_rows(items: List[Dict[str, Any]]) -> str:
        """Format a list as NAME / LOCATION / SELF_LINK rows."""
        lines = [f"{'NAME':30} {'LOCATION':20} SELF_LINK"]
        for item in items:
            location = (item.get('zone') or item.get('region') or '').rsplit('/', 1)[-1]
            lines.append(f"{item.get('name', ''):30} {location:20} {item.get('selfLink', '')}")
        return "\n".join(lines)


def resource_id_to_dict(rid: ResourceID) -> Dict[str, Any]:
    """Plain-dict view of a ResourceID for output."""
    data = {'projectID': rid.project_id, 'resource': rid.resource}
    if rid.key is not None:
        data['name'] = rid.key.name
        data['locality'] = rid.key.locality.value
        if rid.key.location:
            data['location'] = rid.key.location
    return data


def version_of_url(url: str) -> Version:
    """API version named by a URL's prefix (GA for bare paths)."""
    for version in ALL_VERSIONS:
        if url.startswith(version.url_prefix):
            return version
    return Version.GA


def find_service(registry: ServiceRegistry, version: Version, rid: ResourceID) -> ServiceInfo:
    """
    The registered resource type a parsed URL belongs to.

    URL collections drop the 'global'/'region' qualifier the API collection
    carries ('global/addresses/x' is served by 'globalAddresses'), so both
    spellings are matched.

    Raises:
        ConfigurationError: If no registered type matches
    """
    if rid.key is None:
        raise ConfigurationError(f"{rid.resource} has no adapter")

    qualified = {
        Locality.GLOBAL: 'global',
        Locality.REGIONAL: 'region',
        Locality.ZONAL: 'zone',
    }[rid.key.locality] + rid.resource[0].upper() + rid.resource[1:]

    for info in registry:
        if info.version != version or info.locality != rid.key.locality:
            continue
        if info.service in (rid.resource, qualified):
            return info
    raise ConfigurationError(
        f"No {version.value} service for {rid.key.locality.value} {rid.resource}"
    )


def find_adapter(cloud: Cloud, name: str):
    """Look up an adapter by wrap type ('AlphaAddresses') or accessor ('alpha_addresses')."""
    if name in cloud:
        return cloud.service(name)
    for adapter in cloud:
        if adapter.info.accessor == name:
            return adapter
    raise ConfigurationError(f"Unknown service: {name}")


def create_parser() -> argparse.ArgumentParser:
    """Parser for the parse, get, list and example commands."""
    parser = argparse.ArgumentParser(
        prog='gce-cloud',
        description='Uniform access to Compute Engine resources',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
    To split a resource URL into its parts:
        $ gce-cloud parse projects/p/zones/us-central1-b/instances/vm-1

    To list regional addresses:
        $ gce-cloud list Addresses --region=us-central1 --project=my-project

    To run the example against in-memory mocks:
        $ gce-cloud example --mock
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'gce-cloud v{VERSION}'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Available commands'
    )

    # PARSE COMMAND
    parse_parser = subparsers.add_parser(
        'parse',
        help='Parse a resource URL',
        description='Parse a resource URL into project, resource type and key. No API calls are made.'
    )
    parse_parser.add_argument('url', metavar='URL', help='Self link or projects/... path.')
    _add_output_args(parse_parser)

    # GET COMMAND
    get_parser = subparsers.add_parser(
        'get',
        help='Get the resource a URL names',
        description='Get one resource by its URL. The API version comes from the URL prefix.'
    )
    get_parser.add_argument('url', metavar='URL', help='Self link or projects/... path.')
    _add_common_args(get_parser)

    # LIST COMMAND
    list_parser = subparsers.add_parser(
        'list',
        help='List resources of one type',
        description='List all resources of one type, e.g. Addresses or alpha_addresses.'
    )
    list_parser.add_argument('service', metavar='SERVICE', help='Wrap type or accessor name.')
    location = list_parser.add_mutually_exclusive_group()
    location.add_argument('--region', metavar='REGION', help='Region of a regional type.')
    location.add_argument('--zone', metavar='ZONE', help='Zone of a zonal type.')
    _add_common_args(list_parser)

    # EXAMPLE COMMAND
    example_parser = subparsers.add_parser(
        'example',
        help='Run the example sequence',
        description='List addresses and firewalls, then create, get and delete a firewall.'
    )
    example_parser.add_argument(
        '--region',
        metavar='REGION',
        default='us-central1',
        help='Region to list addresses in. Default: us-central1'
    )
    _add_common_args(example_parser)

    return parser


def _add_output_args(parser: argparse.ArgumentParser):
    output = parser.add_argument_group('OUTPUT FLAGS')
    output.add_argument(
        '--format',
        metavar='FORMAT',
        choices=['json', 'yaml', 'table'],
        default='table',
        help='Output format. One of: json, yaml, table. Default: table'
    )
    output.add_argument(
        '--verbosity',
        metavar='VERBOSITY',
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        default='info',
        help='Minimum level of log output (debug shows every API call). Default: info'
    )
    output.add_argument(
        '--log-file',
        metavar='LOG_FILE',
        help='Also write detailed logs to LOG_FILE.'
    )


def _add_common_args(parser: argparse.ArgumentParser):
    """Add arguments for commands that build a cloud."""
    optional = parser.add_argument_group('OPTIONAL FLAGS')
    optional.add_argument(
        '--project',
        metavar='PROJECT',
        help='GCP project ID. Defaults to GCE_CLOUD_PROJECT, then the credentials project.'
    )
    optional.add_argument(
        '--config',
        metavar='FILE',
        help='YAML configuration file.'
    )
    optional.add_argument(
        '--mock',
        action='store_true',
        help='Use in-memory mocks instead of the Compute API.'
    )
    _add_output_args(parser)


def build_cloud(args: argparse.Namespace, project: Optional[str] = None) -> Cloud:
    """Build the cloud from --config, --project and --mock."""
    overrides = {
        'project': args.project or project,
        'use_mock': True if args.mock else None,
    }
    if args.config:
        config = load_config(args.config, **overrides)
        # Command line flags win over the file
        if args.verbosity == 'info' and not args.log_file:
            setup_logging(level=config.log_level, log_file=config.log_file)
    else:
        config = create_cloud_config(**{k: v for k, v in overrides.items() if v is not None})
    return new_cloud(config)


def handle_parse(args: argparse.Namespace) -> int:
    rid = parse_resource_url(args.url)
    print(OutputFormatter.format_output(resource_id_to_dict(rid), args.format))
    return 0


def handle_get(args: argparse.Namespace) -> int:
    rid = parse_resource_url(args.url)
    cloud = build_cloud(args, project=rid.project_id)
    info = find_service(cloud.registry, version_of_url(args.url), rid)

    obj = cloud.service(info.wrap_type).get(background(), rid.key)
    print(OutputFormatter.format_output(obj, args.format))
    return 0


def handle_list(args: argparse.Namespace) -> int:
    cloud = build_cloud(args)
    adapter = find_adapter(cloud, args.service)

    location = args.region or args.zone
    if location:
        items = adapter.list(background(), location)
    else:
        items = adapter.list(background())
    print(OutputFormatter.format_output(items, args.format))
    return 0


def handle_example(args: argparse.Namespace) -> int:
    cloud = build_cloud(args)
    fw = run_example(cloud, region=args.region)
    if args.format != 'table':
        print(OutputFormatter.format_output(fw, args.format))
    return 0


HANDLERS = {
    'parse': handle_parse,
    'get': handle_get,
    'list': handle_list,
    'example': handle_example,
}


def main(argv=None):
    """Run the gce-cloud command line. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=args.verbosity.upper(),
        log_file=args.log_file,
        debug=args.verbosity == 'debug'
    )

    try:
        return HANDLERS[args.command](args)

    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except (GCECloudError, ValueError) as e:
        print(f"ERROR: (gce-cloud) {e}", file=sys.stderr)
        if args.verbosity == 'debug':
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
