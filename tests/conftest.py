"""Pytest configuration and shared fixtures."""
import pytest

import paramfilter.config as config_module
from paramfilter import FieldSchema, FilterConfig, MemoryParamStore, set_config


class RecordingListener:
    """Store listener remembering the snapshot seen on every notification."""

    def __init__(self):
        self.calls = []

    def __call__(self, store):
        self.calls.append(store.to_snapshot())

    @property
    def count(self):
        return len(self.calls)


@pytest.fixture(autouse=True)
def default_config():
    """Give every test a fresh default configuration."""
    original = config_module._current_config
    set_config(FilterConfig())
    yield
    config_module._current_config = original


@pytest.fixture
def location_fields():
    return [
        {"name": "country", "type": "string"},
        {"name": "region", "type": "string", "dependsOn": ["country"]},
        {"name": "city", "type": "string", "dependsOn": ["region"]},
        {"name": "page", "type": "number", "defaultValue": 1},
        {"name": "tags", "type": "array"},
        {"name": "open", "type": "boolean", "defaultValue": False},
    ]


@pytest.fixture
def location_schema(location_fields):
    return FieldSchema.from_dicts(location_fields)


@pytest.fixture
def store():
    return MemoryParamStore()


@pytest.fixture
def recorder():
    return RecordingListener()
