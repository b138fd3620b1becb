"""
In-memory stand-in for a googleapiclient compute Resource.

Serves get/list/insert/delete and custom verbs for any collection, and
zone/region/global operations that turn DONE after a fixed number of polls.
Every request is recorded in `calls` as (collection, method, params).
"""

import json
from itertools import count
from typing import Any, Dict, List, Optional, Tuple

import httplib2
from googleapiclient.errors import HttpError

from gce_cloud.meta.version import Version

LOCATION_PARAMS = ('zone', 'region')
FIXED_PARAMS = ('project', 'zone', 'region', 'body', 'pageToken', 'operation')


def http_error(status: int, message: str) -> HttpError:
    resp = httplib2.Response({'status': status})
    resp.reason = message
    content = json.dumps({'error': {'code': status, 'message': message}}).encode('utf-8')
    return HttpError(resp, content)


class FakeRequest:
    def __init__(self, run, collection: str, method: str, params: Dict[str, Any]):
        self._run = run
        self.collection = collection
        self.method = method
        self.params = params

    def execute(self):
        return self._run()


def _location(params: Dict[str, Any]) -> str:
    for name in LOCATION_PARAMS:
        if name in params:
            return params[name]
    return ''


def _name(params: Dict[str, Any]) -> str:
    names = [v for k, v in params.items() if k not in FIXED_PARAMS]
    assert len(names) == 1, f"expected exactly one resource name in {params}"
    return names[0]


class FakeCollection:
    def __init__(self, compute: 'FakeCompute', name: str):
        self.compute = compute
        self.name = name

    def _request(self, method: str, params: Dict[str, Any], run) -> FakeRequest:
        def recorded():
            self.compute.calls.append((self.name, method, params))
            error = self.compute.errors.get((self.name, method))
            if error is not None:
                raise error
            return run()

        return FakeRequest(recorded, self.name, method, params)

    def _key(self, params: Dict[str, Any]) -> Tuple[str, str, str, str]:
        if self.name in ('regions', 'zones'):
            # regions.get(region=...) names the region itself
            return (self.name, params['project'], '', params[self.name[:-1]])
        return (self.name, params['project'], _location(params), _name(params))

    def get(self, **params):
        def run():
            key = self._key(params)
            if key not in self.compute.store:
                raise http_error(404, f"The resource '{key[3]}' was not found")
            return self.compute.store[key]

        return self._request('get', params, run)

    def list(self, **params):
        def run():
            prefix = (self.name, params['project'], _location(params))
            items = [obj for key, obj in sorted(self.compute.store.items()) if key[:3] == prefix]
            start = int(params.get('pageToken') or 0)
            page = {'items': items[start:start + self.compute.page_size]}
            if start + self.compute.page_size < len(items):
                page['nextPageToken'] = str(start + self.compute.page_size)
            return page

        return self._request('list', params, run)

    def list_next(self, previous_request: FakeRequest, previous_response: Dict[str, Any]):
        token = previous_response.get('nextPageToken')
        if not token:
            return None
        params = dict(previous_request.params, pageToken=token)
        return self.list(**params)

    def insert(self, **params):
        def run():
            body = params['body']
            key = (self.name, params['project'], _location(params), body['name'])
            if key in self.compute.store:
                raise http_error(409, f"The resource '{body['name']}' already exists")
            self.compute.store[key] = dict(body)
            return self.compute.new_operation(params)

        return self._request('insert', params, run)

    def delete(self, **params):
        def run():
            key = self._key(params)
            if key not in self.compute.store:
                raise http_error(404, f"The resource '{key[3]}' was not found")
            del self.compute.store[key]
            return self.compute.new_operation(params)

        return self._request('delete', params, run)

    def __getattr__(self, method):
        if method.startswith('_'):
            raise AttributeError(method)

        def verb(**params):
            def run():
                if method in self.compute.verb_results:
                    return self.compute.verb_results[method]
                return self.compute.new_operation(params)

            return self._request(method, params, run)

        return verb


class FakeOperations:
    def __init__(self, compute: 'FakeCompute', name: str):
        self.compute = compute
        self.name = name

    def get(self, **params):
        def run():
            self.compute.calls.append((self.name, 'get', params))
            op = self.compute.operations[params['operation']]
            op['_polls'] += 1
            if op['_polls'] >= self.compute.polls_until_done:
                op['status'] = 'DONE'
                if self.compute.operation_errors:
                    op['error'] = {'errors': self.compute.operation_errors}
            return {k: v for k, v in op.items() if not k.startswith('_')}

        return FakeRequest(run, self.name, 'get', params)


class FakeCompute:
    """
    Attributes:
        store: Objects keyed by (collection, project, location, name)
        calls: Every executed request
        errors: Errors raised by (collection, method) on execute
        verb_results: Plain return values for verbs that do not mutate
        operation_errors: If set, every operation finishes with these errors
    """

    def __init__(self, version: Version = Version.GA, page_size: int = 2,
                 polls_until_done: int = 1):
        self.version = version
        self.page_size = page_size
        self.polls_until_done = polls_until_done
        self.store: Dict[Tuple[str, str, str, str], Dict[str, Any]] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self.errors: Dict[Tuple[str, str], Exception] = {}
        self.verb_results: Dict[str, Any] = {}
        self.operation_errors: Optional[List[Dict[str, Any]]] = None
        self.operations: Dict[str, Dict[str, Any]] = {}
        self._ids = count(1)

    def add(self, collection: str, project: str, name: str, location: str = '', **fields):
        obj = dict(fields, name=name)
        self.store[(collection, project, location, name)] = obj
        return obj

    def new_operation(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = f'operation-{next(self._ids)}'
        project = params['project']
        prefix = f'{self.version.url_prefix}projects/{project}'
        op = {'name': name, 'status': 'RUNNING', '_polls': 0}
        if 'zone' in params:
            op['zone'] = f"{prefix}/zones/{params['zone']}"
            op['selfLink'] = f"{prefix}/zones/{params['zone']}/operations/{name}"
        elif 'region' in params:
            op['region'] = f"{prefix}/regions/{params['region']}"
            op['selfLink'] = f"{prefix}/regions/{params['region']}/operations/{name}"
        else:
            op['selfLink'] = f'{prefix}/global/operations/{name}'
        self.operations[name] = op
        return {k: v for k, v in op.items() if not k.startswith('_')}

    def calls_of(self, method: str) -> List[Tuple[str, str, Dict[str, Any]]]:
        return [c for c in self.calls if c[1] == method]

    def zoneOperations(self):
        return FakeOperations(self, 'zoneOperations')

    def regionOperations(self):
        return FakeOperations(self, 'regionOperations')

    def globalOperations(self):
        return FakeOperations(self, 'globalOperations')

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return lambda: FakeCollection(self, name)
