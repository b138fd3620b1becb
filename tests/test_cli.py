import json

import pytest

from gce_cloud.cli import OutputFormatter, create_parser, find_service, main, version_of_url
from gce_cloud.core.config import PROJECT_ENV
from gce_cloud.core.exceptions import ConfigurationError
from gce_cloud.core.resource_id import parse_resource_url
from gce_cloud.meta.service import default_registry
from gce_cloud.meta.version import Version


def test_parse_command(capsys) -> None:
    assert main(['parse', 'projects/p/zones/us-central1-b/instances/vm-1', '--format', 'json']) == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {
        'projectID': 'p',
        'resource': 'instances',
        'name': 'vm-1',
        'locality': 'zonal',
        'location': 'us-central1-b',
    }


def test_parse_invalid(capsys) -> None:
    assert main(['parse', 'projects/p/global']) == 1
    assert 'not a valid resource URL' in capsys.readouterr().err


def test_list_mock(capsys) -> None:
    assert main(['list', 'Firewalls', '--mock', '--format', 'json']) == 0
    assert json.loads(capsys.readouterr().out) == []


def test_list_by_accessor_needs_location(capsys) -> None:
    assert main(['list', 'alpha_addresses', '--mock']) == 1
    assert main(['list', 'alpha_addresses', '--mock', '--region', 'us-central1', '--format', 'yaml']) == 0


def test_get_missing_on_mock(capsys) -> None:
    assert main(['get', 'projects/p/global/firewalls/fw', '--mock']) == 1
    assert '404' in capsys.readouterr().err


def test_example_on_mock(capsys) -> None:
    assert main(['example', '--mock', '--format', 'json']) == 0
    out = capsys.readouterr().out
    assert 'Firewall Key{"gce-cloud-example"} created' in out


def test_requires_command() -> None:
    with pytest.raises(SystemExit):
        create_parser().parse_args([])


def test_version_of_url() -> None:
    assert version_of_url('https://www.googleapis.com/compute/beta/projects/p') == Version.BETA
    assert version_of_url('projects/p') == Version.GA


def test_find_service() -> None:
    registry = default_registry()
    rid = parse_resource_url('projects/p/global/addresses/a')
    assert find_service(registry, Version.GA, rid).wrap_type == 'GlobalAddresses'

    rid = parse_resource_url('projects/p/regions/r/backendServices/bs')
    assert find_service(registry, Version.ALPHA, rid).wrap_type == 'AlphaRegionBackendServices'

    rid = parse_resource_url('projects/p/regions/r/addresses/a')
    assert find_service(registry, Version.BETA, rid).wrap_type == 'BetaAddresses'

    with pytest.raises(ConfigurationError):
        find_service(registry, Version.BETA, parse_resource_url('projects/p/global/firewalls/fw'))


def test_table_output() -> None:
    rows = OutputFormatter.format_output(
        [{'name': 'vm', 'zone': 'https://x/zones/us-central1-b', 'selfLink': 'link'}], 'table'
    )
    assert 'us-central1-b' in rows
    assert rows.splitlines()[0].startswith('NAME')


def test_config_file_logging(tmp_path) -> None:
    log_file = tmp_path / 'logs' / 'gce-cloud.log'
    config = tmp_path / 'config.yaml'
    config.write_text(f"use_mock: true\nlog_level: DEBUG\nlog_file: {log_file}\n")

    assert main(['list', 'Firewalls', '--config', str(config)]) == 0
    assert log_file.exists()


def test_example_uses_resolved_project(monkeypatch, capsys) -> None:
    monkeypatch.setenv(PROJECT_ENV, 'env-project')
    assert main(['example', '--mock', '--format', 'json']) == 0
    out = capsys.readouterr().out
    assert '"network": "projects/env-project/global/networks/default"' in out

    assert main(['example', '--mock', '--project', 'flag-project', '--format', 'json']) == 0
    assert 'projects/flag-project/global/networks/default' in capsys.readouterr().out
