import logging
from dataclasses import dataclass

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as google_exceptions

from errors import UpstreamError
from plist_manifest import ManifestRecord

logger = logging.getLogger(__name__)

DEMO_RECORDS = {
    'demo123': ManifestRecord(
        ipa_url='https://example.com/downloads/my_app.ipa',
        bundle_id='com.sample.testapp',
        version='1.0',
        app_name='テストアプリ',
    ),
}


class FirestoreRecordStore:
    """Manifest documents under artifacts/{app_id}/public/data/manifests."""

    def __init__(self, client, app_id):
        self.client = client
        self.app_id = app_id

    def _manifests(self):
        return (self.client.collection('artifacts').document(self.app_id)
                .collection('public').document('data')
                .collection('manifests'))

    def fetch(self, record_id):
        # a slash would address a nested path, which never holds a manifest
        if '/' in record_id:
            return None
        try:
            snapshot = self._manifests().document(record_id).get()
        except google_exceptions.GoogleAPIError as e:
            raise UpstreamError('Firestore lookup failed for %r' % record_id) from e
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        try:
            return ManifestRecord.from_document(data)
        except KeyError as e:
            raise UpstreamError('Manifest %r is missing field %s' % (record_id, e)) from e


class MemoryRecordStore:
    def __init__(self, records=None):
        self.records = dict(records or {})

    def put(self, record_id, record):
        self.records[record_id] = record

    def fetch(self, record_id):
        return self.records.get(record_id)


class UnavailableRecordStore:
    """Stand-in wired when the real store could not be set up."""

    def __init__(self, reason):
        self.reason = reason

    def fetch(self, record_id):
        raise UpstreamError('Record store unavailable: %s' % self.reason)


@dataclass(frozen=True)
class StoreInit:
    store: object = None
    error: str = None

    @property
    def ok(self):
        return self.store is not None


def _firebase_app(config, creds):
    name = 'ota-manifest-%s' % config.app_id
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        return firebase_admin.initialize_app(creds, {'projectId': config.firebase_project_id}, name=name)


def connect_firestore(config):
    info = config.firebase_credentials()
    if info is None:
        return StoreInit(error='Firebase credentials are not configured '
                               '(FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL, FIREBASE_PRIVATE_KEY)')
    try:
        creds = credentials.Certificate(info)
        app = _firebase_app(config, creds)
        client = firestore.client(app)
    except ValueError as e:
        return StoreInit(error='Firebase initialization failed: %s' % e)
    return StoreInit(store=FirestoreRecordStore(client, config.app_id))


def connect_memory(config):
    return StoreInit(store=MemoryRecordStore(DEMO_RECORDS if config.store_demo else None))


BACKENDS = {
    'firestore': connect_firestore,
    'memory': connect_memory,
}


def connect_store(config):
    connect = BACKENDS.get(config.store_backend)
    if connect is None:
        return StoreInit(error='Unknown MANIFEST_STORE backend %r' % config.store_backend)
    result = connect(config)
    if result.ok:
        logger.info('Record store ready (%s)', config.store_backend)
    return result
