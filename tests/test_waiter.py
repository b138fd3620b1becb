import threading

import pytest

from gce_cloud.core.context import CallContext
from gce_cloud.core.exceptions import (
    CancelledError,
    DeadlineExceededError,
    NotFoundError,
    OperationFailedError,
)
from gce_cloud.meta.version import Version
from gce_cloud.operations.waiter import OperationHandle, OperationWaiter
from .conftest import RecordingRateLimiter
from .fake_compute import FakeCompute, http_error


def waiter_for(fake: FakeCompute, **kwargs) -> OperationWaiter:
    kwargs.setdefault('min_poll_interval', 0.01)
    return OperationWaiter({fake.version: fake}, **kwargs)


def test_done_operation_is_not_polled(fake_ga: FakeCompute, ctx: CallContext) -> None:
    op = OperationHandle(Version.GA, 'p', {'name': 'op-1', 'status': 'DONE'})
    waiter_for(fake_ga).wait_for_completion(ctx, op)
    assert fake_ga.calls == []


def test_polls_until_done(fake_ga: FakeCompute, ctx: CallContext) -> None:
    fake_ga.polls_until_done = 4
    limiter = RecordingRateLimiter()
    raw = fake_ga.new_operation({'project': 'p', 'region': 'us-central1'})

    waiter_for(fake_ga, rate_limiter=limiter).wait_for_completion(ctx, OperationHandle(Version.GA, 'p', raw))

    assert [c[0] for c in fake_ga.calls] == ['regionOperations'] * 4
    assert len(limiter.keys) == 4
    assert all(k.target == 'Operations' and k.operation == 'Get' for k in limiter.keys)


def test_scope_from_fields_without_self_link(fake_ga: FakeCompute, ctx: CallContext) -> None:
    raw = fake_ga.new_operation({'project': 'p', 'zone': 'us-central1-b'})
    del raw['selfLink']

    waiter_for(fake_ga).wait_for_completion(ctx, OperationHandle(Version.GA, 'p', raw))

    assert fake_ga.calls == [
        ('zoneOperations', 'get', {'project': 'p', 'zone': 'us-central1-b', 'operation': raw['name']})
    ]


def test_self_link_project_wins(fake_ga: FakeCompute, ctx: CallContext) -> None:
    raw = fake_ga.new_operation({'project': 'owner'})
    waiter_for(fake_ga).wait_for_completion(ctx, OperationHandle(Version.GA, 'caller', raw))
    assert fake_ga.calls[0][2]['project'] == 'owner'


def test_failed_operation(fake_ga: FakeCompute, ctx: CallContext) -> None:
    fake_ga.operation_errors = [{'code': 'RESOURCE_IN_USE', 'message': 'in use'}]
    raw = fake_ga.new_operation({'project': 'p'})

    with pytest.raises(OperationFailedError) as exc_info:
        waiter_for(fake_ga).wait_for_completion(ctx, OperationHandle(Version.GA, 'p', raw))
    assert exc_info.value.operation_name == raw['name']
    assert exc_info.value.errors[0]['code'] == 'RESOURCE_IN_USE'


def test_done_with_error_payload(fake_ga: FakeCompute, ctx: CallContext) -> None:
    op = OperationHandle(Version.GA, 'p', {
        'name': 'op-1',
        'status': 'DONE',
        'error': {'errors': [{'code': 'X', 'message': 'broken'}]},
    })
    with pytest.raises(OperationFailedError):
        waiter_for(fake_ga).wait_for_completion(ctx, op)


def test_poll_error_is_translated(fake_ga: FakeCompute, ctx: CallContext) -> None:
    raw = fake_ga.new_operation({'project': 'p'})

    class MissingOperations:
        def get(self, **params):
            raise http_error(404, 'operation gone')

    fake_ga.globalOperations = lambda: MissingOperations()

    with pytest.raises(NotFoundError):
        waiter_for(fake_ga).wait_for_completion(ctx, OperationHandle(Version.GA, 'p', raw))


def test_cancel_while_polling(fake_ga: FakeCompute, ctx: CallContext) -> None:
    fake_ga.polls_until_done = 10 ** 6
    raw = fake_ga.new_operation({'project': 'p'})
    timer = threading.Timer(0.05, ctx.cancel)
    timer.start()
    try:
        with pytest.raises(CancelledError) as exc_info:
            waiter_for(fake_ga).wait_for_completion(ctx, OperationHandle(Version.GA, 'p', raw))
        assert not isinstance(exc_info.value, DeadlineExceededError)
    finally:
        timer.cancel()


def test_waiter_timeout(fake_ga: FakeCompute, ctx: CallContext) -> None:
    fake_ga.polls_until_done = 10 ** 6
    raw = fake_ga.new_operation({'project': 'p'})

    with pytest.raises(DeadlineExceededError):
        waiter_for(fake_ga, timeout=0.05).wait_for_completion(ctx, OperationHandle(Version.GA, 'p', raw))
    assert not ctx.cancelled


def test_poll_interval_must_be_positive(fake_ga: FakeCompute) -> None:
    with pytest.raises(ValueError):
        OperationWaiter({Version.GA: fake_ga}, min_poll_interval=0)


def test_operation_handle_fields() -> None:
    op = OperationHandle(Version.BETA, 'p', {'name': 'op', 'status': 'RUNNING', 'selfLink': 'x'})
    assert op.name == 'op'
    assert op.self_link == 'x'
    assert not op.done
    assert op.error_payload is None
