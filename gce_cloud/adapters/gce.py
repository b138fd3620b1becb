"""
GCE Cloud - Real Adapter

Maps the uniform adapter interface onto the Compute API discovery client
for one resource type and API version.

Every call:
1. Checks the call context
2. Passes the rate limiter with a RateLimitKey
3. Resolves the project through the project router
4. Dispatches the request
5. For mutations: waits for the returned operation to finish
"""

from typing import Any, Dict, List, Optional

import httplib2
from googleapiclient.errors import HttpError

from gce_cloud.adapters.base import BaseAdapter
from gce_cloud.core.exceptions import errors_from_http
from gce_cloud.core.ratelimit import RateLimitKey
from gce_cloud.core.service import Service
from gce_cloud.meta.key import Key
from gce_cloud.meta.service import ServiceInfo
from gce_cloud.operations.waiter import OperationHandle
from gce_cloud.utils.logger import log_api_call, log_api_response


class GCEAdapter(BaseAdapter):
    """
    Read access and custom verbs for one resource type.

    Example:
        adapter = new_gce_adapter(info, service)
        addr = adapter.get(ctx, regional_key('my-address', 'us-central1'))
    """

    def __init__(self, info: ServiceInfo, service: Service, logger=None):
        """
        Args:
            info: Description of the wrapped resource type
            service: Transports and call policies
            logger: Optional logger for debug output
        """
        super().__init__(info, logger)
        self.service = service

    def _prepare(self, ctx, operation: str) -> str:
        """Gate the call and return the project it targets."""
        ctx.check()
        self.service.rate_limiter.accept(
            ctx, RateLimitKey(operation, self.info.version, self.info.object)
        )
        project = self.service.project_router.project_id(
            ctx, self.info.version, self.info.service
        )
        ctx.check()
        return project

    def _collection(self):
        transport = self.service.transport(self.info.version)
        return getattr(transport, self.info.service)()

    def _location(self, key: Key) -> Dict[str, str]:
        param = self.info.location_param
        return {param: key.location} if param else {}

    def _key_params(self, project: str, key: Key) -> Dict[str, str]:
        params = {'project': project}
        params.update(self._location(key))
        params[self.info.resource_param] = key.name
        return params

    def _execute(self, request):
        try:
            return request.execute()
        except (HttpError, httplib2.HttpLib2Error) as e:
            raise errors_from_http(e) from e

    def _wait(self, ctx, project: str, operation: Dict[str, Any]):
        op = OperationHandle(self.info.version, project, operation)
        self.logger.debug(f"Waiting for operation {op.name}")
        self.service.wait_for_completion(ctx, op)

    def get(self, ctx, key: Key) -> Dict[str, Any]:
        self._check_key(key)
        project = self._prepare(ctx, 'Get')

        params = self._key_params(project, key)
        log_api_call(self.logger, f'{self.info.service}.get', **params)
        obj = self._execute(self._collection().get(**params))
        log_api_response(self.logger, obj)
        return obj

    def list(self, ctx, location: Optional[str] = None) -> List[Dict[str, Any]]:
        self._check_location(location)
        project = self._prepare(ctx, 'List')

        params = {'project': project}
        if self.info.location_param:
            params[self.info.location_param] = location
        log_api_call(self.logger, f'{self.info.service}.list', **params)

        collection = self._collection()
        request = collection.list(**params)
        items = []
        while request is not None:
            ctx.check()
            page = self._execute(request)
            items.extend(page.get('items', []))
            request = collection.list_next(previous_request=request, previous_response=page)

        self.logger.debug(f"Listed {len(items)} {self.info.service}")
        return items

    def call_method(self, ctx, name: str, key: Key, *args, **kwargs):
        method = self._method(name)
        params = self._method_params(method, args, kwargs)
        self._check_key(key)
        project = self._prepare(ctx, method.operation)

        call_params = self._key_params(project, key)
        call_params.update(params)
        log_api_call(self.logger, f'{self.info.service}.{method.name}', **call_params)
        result = self._execute(getattr(self._collection(), method.name)(**call_params))

        if method.returns_operation:
            self._wait(ctx, project, result)
            return None
        return result


class MutableGCEAdapter(GCEAdapter):
    """
    Adds insert() and delete() for resource types that support mutation.
    """

    def insert(self, ctx, key: Key, obj: Dict[str, Any]):
        """
        Create the object under key and wait for the operation.

        The object's name is set from the key.

        Raises:
            AlreadyExistsError: If the key is taken
            OperationFailedError: If the insert operation fails
        """
        self._check_key(key)
        project = self._prepare(ctx, 'Insert')

        obj['name'] = key.name
        params = {'project': project}
        params.update(self._location(key))
        log_api_call(self.logger, f'{self.info.service}.insert', **params)
        op = self._execute(self._collection().insert(body=obj, **params))
        self._wait(ctx, project, op)

    def delete(self, ctx, key: Key):
        """
        Delete the object named by key and wait for the operation.

        Raises:
            NotFoundError: If it does not exist
            OperationFailedError: If the delete operation fails
        """
        self._check_key(key)
        project = self._prepare(ctx, 'Delete')

        params = self._key_params(project, key)
        log_api_call(self.logger, f'{self.info.service}.delete', **params)
        op = self._execute(self._collection().delete(**params))
        self._wait(ctx, project, op)


def new_gce_adapter(info: ServiceInfo, service: Service, logger=None) -> GCEAdapter:
    """Build the real adapter matching the resource type's mutability."""
    if info.read_only:
        return GCEAdapter(info, service, logger)
    return MutableGCEAdapter(info, service, logger)
