from typing import Iterator

from pytest import fixture

from gce_cloud.cloud import Cloud, new_gce, new_mock_gce
from gce_cloud.core.context import CallContext, background
from gce_cloud.core.project_router import SingleProjectRouter
from gce_cloud.core.ratelimit import RateLimiter, RateLimitKey
from gce_cloud.core.service import Service
from gce_cloud.meta.version import Version
from .fake_compute import FakeCompute

PROJECT = 'test-project'


class RecordingRateLimiter(RateLimiter):
    """Accepts everything and remembers each key."""

    def __init__(self):
        self.keys = []

    def accept(self, ctx, key: RateLimitKey):
        self.keys.append(key)


@fixture
def ctx() -> CallContext:
    return background()


@fixture
def fake_ga() -> FakeCompute:
    return FakeCompute(Version.GA)


@fixture
def fake_alpha() -> FakeCompute:
    return FakeCompute(Version.ALPHA)


@fixture
def limiter() -> RecordingRateLimiter:
    return RecordingRateLimiter()


@fixture
def service(fake_ga: FakeCompute, fake_alpha: FakeCompute, limiter: RecordingRateLimiter) -> Service:
    return Service(
        ga=fake_ga,
        alpha=fake_alpha,
        beta=FakeCompute(Version.BETA),
        project_router=SingleProjectRouter(PROJECT),
        rate_limiter=limiter,
        poll_interval=0.01,
    )


@fixture
def gce(service: Service) -> Cloud:
    return new_gce(service)


@fixture
def mock_gce() -> Iterator[Cloud]:
    yield new_mock_gce()
