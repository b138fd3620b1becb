"""
GCE Cloud - Adapters Module

Per-resource adapters. Real adapters talk to the Compute API; mocks keep
objects in memory. Both expose the same calls:

    adapter.get(ctx, key)
    adapter.list(ctx[, location])
    adapter.insert(ctx, key, obj)      # mutable types only
    adapter.delete(ctx, key)           # mutable types only
    adapter.<verb>(ctx, key, *args)    # custom verbs, e.g. attach_disk
"""

from gce_cloud.adapters.base import BaseAdapter
from gce_cloud.adapters.gce import GCEAdapter, MutableGCEAdapter, new_gce_adapter
from gce_cloud.adapters.mock import MockAdapter, MutableMockAdapter, new_mock_adapter

__all__ = [
    'BaseAdapter',
    'GCEAdapter',
    'MutableGCEAdapter',
    'new_gce_adapter',
    'MockAdapter',
    'MutableMockAdapter',
    'new_mock_adapter',
]
