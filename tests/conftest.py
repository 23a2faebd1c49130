"""Shared fixtures for the manifest service tests."""

import pytest

from app import create_app
from config import Config
from manifest_store import MemoryRecordStore
from plist_manifest import ManifestRecord

DEMO_ID = 'demo123'
DEMO_RECORD = ManifestRecord(
    ipa_url='https://example.com/a.ipa',
    bundle_id='com.sample.testapp',
    version='1.0',
    app_name='Test App',
)


@pytest.fixture
def config() -> Config:
    return Config(store_backend='memory')


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore({DEMO_ID: DEMO_RECORD})


@pytest.fixture
def app(config, store):
    app = create_app(config, store=store)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
