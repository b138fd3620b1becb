import pytest

from gce_cloud.core.exceptions import InvalidFormatError
from gce_cloud.core.resource_id import ResourceID, parse_resource_url
from gce_cloud.meta.key import global_key, regional_key, zonal_key
from gce_cloud.meta.version import Version

OPERATION = 'operation-1513289952196-56054460af5a0-b1dae0c3-9bbf9dbf'
V1 = 'https://www.googleapis.com/compute/v1/'
ALPHA = 'https://www.googleapis.com/compute/alpha/'


@pytest.mark.parametrize(
    'url,expected',
    [
        (V1 + 'projects/some-gce-project', ResourceID('some-gce-project', 'projects', None)),
        (
            V1 + 'projects/some-gce-project/regions/us-central1',
            ResourceID('some-gce-project', 'regions', global_key('us-central1')),
        ),
        (
            V1 + 'projects/some-gce-project/zones/us-central1-b',
            ResourceID('some-gce-project', 'zones', global_key('us-central1-b')),
        ),
        (
            V1 + f'projects/some-gce-project/global/operations/{OPERATION}',
            ResourceID('some-gce-project', 'operations', global_key(OPERATION)),
        ),
        (
            ALPHA + 'projects/some-gce-project/regions/us-central1/addresses/my-address',
            ResourceID('some-gce-project', 'addresses', regional_key('my-address', 'us-central1')),
        ),
        (
            V1 + 'projects/some-gce-project/zones/us-central1-c/instances/instance-1',
            ResourceID('some-gce-project', 'instances', zonal_key('instance-1', 'us-central1-c')),
        ),
        ('projects/some-gce-project', ResourceID('some-gce-project', 'projects', None)),
        (
            'projects/some-gce-project/regions/us-central1',
            ResourceID('some-gce-project', 'regions', global_key('us-central1')),
        ),
        (
            'projects/some-gce-project/zones/us-central1-b',
            ResourceID('some-gce-project', 'zones', global_key('us-central1-b')),
        ),
        (
            f'projects/some-gce-project/global/operations/{OPERATION}',
            ResourceID('some-gce-project', 'operations', global_key(OPERATION)),
        ),
        (
            'projects/some-gce-project/regions/us-central1/addresses/my-address',
            ResourceID('some-gce-project', 'addresses', regional_key('my-address', 'us-central1')),
        ),
        (
            'projects/some-gce-project/zones/us-central1-c/instances/instance-1',
            ResourceID('some-gce-project', 'instances', zonal_key('instance-1', 'us-central1-c')),
        ),
    ],
)
def test_parse_resource_url(url: str, expected: ResourceID) -> None:
    rid = parse_resource_url(url)
    assert rid.equal(expected)


@pytest.mark.parametrize(
    'url',
    [
        '',
        '/',
        '/a',
        '/a/b',
        '/a/b/c',
        '/a/b/c/d',
        '/a/b/c/d/e',
        '/a/b/c/d/e/f',
        V1 + 'projects/some-gce-project/global',
        'projects/some-gce-project/global',
        'projects/some-gce-project/global/foo/bar/baz',
        'projects/some-gce-project/zones/us-central1-c/res',
        'projects/some-gce-project/zones/us-central1-c/res/name/extra',
        'https://www.googleapis.com/compute/gamma/projects/some-gce-project/global/addresses/name',
    ],
)
def test_parse_malformed_url(url: str) -> None:
    with pytest.raises(InvalidFormatError) as exc_info:
        parse_resource_url(url)
    assert exc_info.value.url == url
    assert repr(url) in str(exc_info.value)


def test_invalid_format_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_resource_url('nope')


def test_resource_id_equality() -> None:
    a = ResourceID('p', 'addresses', regional_key('a', 'us-central1'))
    assert a.equal(ResourceID('p', 'addresses', regional_key('a', 'us-central1')))
    assert not a.equal(ResourceID('p', 'addresses', regional_key('a', 'us-east1')))
    assert not a.equal(ResourceID('p', 'addresses', global_key('a')))
    assert not a.equal(ResourceID('q', 'addresses', regional_key('a', 'us-central1')))
    assert ResourceID('p', 'projects').equal(ResourceID('p', 'projects', None))
    assert not ResourceID('p', 'projects').equal(a)


def test_self_link_round_trip() -> None:
    url = ALPHA + 'projects/p/zones/us-central1-c/instances/vm-1'
    rid = parse_resource_url(url)
    assert rid.self_link(Version.ALPHA) == url
    assert rid.relative_resource_name() == 'projects/p/zones/us-central1-c/instances/vm-1'
    assert parse_resource_url(rid.self_link()).equal(rid)


def test_relative_name_of_locations() -> None:
    assert parse_resource_url('projects/p/regions/r1').relative_resource_name() == 'projects/p/regions/r1'
    assert parse_resource_url('projects/p/global/firewalls/fw').relative_resource_name() == (
        'projects/p/global/firewalls/fw'
    )
    assert ResourceID('p', 'projects').self_link() == V1 + 'projects/p'
