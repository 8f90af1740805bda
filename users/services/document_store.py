import logging
import threading
from django.conf import settings
from django.utils.module_loading import import_string
from pymongo.errors import PyMongoError
from users.helpers.errors import UpstreamFailure, ValidationFailed

logger = logging.getLogger(__name__)


class DocumentStore:
    """Owns the document database connection used for form submissions and drafts.

    Created on first use, closed by ``close()`` at process exit.
    """

    def __init__(self, url, db_name, client_factory):
        self.url = url
        self.db_name = db_name
        self.client_factory = client_factory
        self._client = None
        self._lock = threading.Lock()

    def connect(self):
        with self._lock:
            if self._client is None:
                try:
                    self._client = self.client_factory(self.url)
                except PyMongoError as e:
                    logger.exception('Could not connect to the document store')
                    raise UpstreamFailure('Document store unavailable') from e
            return self._client

    @property
    def db(self):
        return self.connect()[self.db_name]

    def collection(self, name):
        self.validate_collection_name(name)
        return self.db[name]

    def close(self):
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    @staticmethod
    def validate_collection_name(name):
        if not name or not isinstance(name, str):
            raise ValidationFailed('Collection name is required', errors={'collectionName': 'collectionName is required'})
        if '$' in name or '\x00' in name or name.startswith('system.') or len(name) > 120:
            raise ValidationFailed('Invalid collection name', errors={'collectionName': 'Invalid collection name'})


_store = None
_store_lock = threading.Lock()


def get_document_store():
    global _store
    with _store_lock:
        if _store is None:
            _store = DocumentStore(
                url=settings.MONGO_URL,
                db_name=settings.MONGO_DB_NAME,
                client_factory=import_string(settings.DOCUMENT_STORE_CLIENT)
            )
        return _store


def close_document_store():
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None
