import json
import logging
import re
from bson import ObjectId
from bson.errors import InvalidId
from django.db import DatabaseError
from django.utils import timezone
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from users.filings.definitions import get_definition, list_definitions
from users.helpers.errors import NotFound, ServiceError, UpstreamFailure, ValidationFailed
from users.services.document_store import get_document_store
from users.services.profile_service import ProfileService
from users.services.storage_service import get_storage
from users.services.ticket_service import TicketService

logger = logging.getLogger(__name__)

DRAFTS_COLLECTION = 'form_drafts'
SUBMISSION_STATUSES = ('open', 'in_progress', 'completed', 'rejected')

_ARRAY_KEY = re.compile(r'^(?P<name>[^\[\]]+)\[(?P<index>\d*)\]$')


def decode_value(value):
    if isinstance(value, str) and value[:1] in ('{', '['):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def decode_payload(fields):
    """Turn flat multipart fields back into values.

    ``name[0]``/``name[]`` keys are collected into lists and JSON-looking strings
    are parsed; anything else stays a string.
    """
    values = {}
    arrays = {}
    for key, value in fields.items():
        match = _ARRAY_KEY.match(key)
        if match:
            index = int(match.group('index')) if match.group('index') else len(arrays.get(match.group('name'), {}))
            arrays.setdefault(match.group('name'), {})[index] = decode_value(value)
        else:
            values[key] = decode_value(value)

    for name, items in arrays.items():
        values[name] = [items[i] for i in sorted(items)]
    return values


def serialize_document(document):
    data = {}
    for key, value in document.items():
        if key == '_id':
            data['id'] = str(value)
        elif hasattr(value, 'isoformat'):
            data[key] = value.isoformat()
        else:
            data[key] = value
    return data


class FormDraftService:

    @staticmethod
    def _collection():
        return get_document_store().collection(DRAFTS_COLLECTION)

    @classmethod
    def load(cls, user, slug):
        try:
            draft = cls._collection().find_one({'userId': user.id, 'slug': slug})
        except PyMongoError as e:
            logger.exception('Loading draft %s for user %s failed', slug, user.id)
            raise UpstreamFailure('Could not load your saved progress') from e

        if not draft:
            return 0, {}
        return draft.get('currentStep', 0), draft.get('values', {})

    @classmethod
    def save(cls, user, wizard):
        try:
            cls._collection().update_one(
                {'userId': user.id, 'slug': wizard.definition.slug},
                {'$set': {
                    'currentStep': wizard.current_step,
                    'values': wizard.values,
                    'updatedAt': timezone.now()
                }},
                upsert=True
            )
        except PyMongoError as e:
            logger.exception('Saving draft %s for user %s failed', wizard.definition.slug, user.id)
            raise UpstreamFailure('Could not save your progress') from e

    @classmethod
    def discard(cls, user, slug):
        try:
            cls._collection().delete_one({'userId': user.id, 'slug': slug})
        except PyMongoError as e:
            logger.exception('Discarding draft %s for user %s failed', slug, user.id)
            raise UpstreamFailure('Could not discard your saved progress') from e


class FormSubmissionService:

    @staticmethod
    def submit(user, definition, fields, files=None, uploaded_keys=None):
        """Store one filing: upload files, insert the document, then tidy up.

        The pfData credit and the follow-up ticket run after the insert; their
        failures come back as ``warnings`` and do not undo the submission.
        """
        files = files or {}
        uploaded_keys = uploaded_keys or {}
        collection_name = definition.collection_name
        owner_prefix = f'{collection_name}/{user.id}'
        store = get_document_store()
        storage = get_storage()

        values = {
            key: value for key, value in decode_payload(fields).items()
            if not key.startswith('$') and '.' not in key
        }

        file_keys = {}
        for field, key in uploaded_keys.items():
            # keys signed for this user and form only
            if not key.startswith(f'{owner_prefix}/') or '..' in key:
                raise ValidationFailed('Invalid upload key', errors={field: 'upload does not belong to this form'})
            file_keys[field] = key

        for field, upload in files.items():
            key = storage.build_key(owner_prefix, upload.name)
            storage.upload(upload, key, getattr(upload, 'content_type', None))
            file_keys[field] = key

        document = {
            **values,
            'userId': user.id,
            'userEmail': user.email,
            'formId': definition.form_id,
            'collectionName': collection_name,
            'submittedAt': timezone.now(),
            'fileKeys': file_keys,
            'fileUrls': {field: storage.public_url(key) for field, key in file_keys.items()},
            'status': 'open',
        }

        try:
            result = store.collection(collection_name).insert_one(document)
        except PyMongoError as e:
            logger.exception('Storing %s submission for user %s failed; uploaded keys: %s',
                             collection_name, user.id, list(file_keys.values()))
            raise UpstreamFailure('Could not save your submission') from e

        logger.info('Stored %s submission %s for user %s', collection_name, result.inserted_id, user.id)

        warnings = []
        try:
            ProfileService.remove_item(user.id, definition.product_id, remove_only_one=True)
        except ServiceError as e:
            logger.warning('Could not consume purchased item %s for user %s: %s', definition.product_id, user.id, e.message)
            warnings.append(f'Purchased service could not be updated: {e.message}')

        try:
            TicketService.create_ticket(
                user,
                subject=definition.chatbot_subject or collection_name,
                message=f'New form submission for {collection_name}'
            )
        except (ServiceError, DatabaseError):
            logger.warning('Could not open follow-up ticket for %s submission of user %s', collection_name, user.id, exc_info=True)
            warnings.append('A support ticket could not be created for this submission')

        return {'id': str(result.inserted_id), 'collectionName': collection_name, 'warnings': warnings}

    @staticmethod
    def list_user_submissions(user):
        store = get_document_store()
        submissions = []
        try:
            for definition in list_definitions():
                cursor = store.collection(definition.collection_name).find({'userId': user.id})
                submissions.extend(serialize_document(doc) for doc in cursor)
        except PyMongoError as e:
            logger.exception('Listing submissions for user %s failed', user.id)
            raise UpstreamFailure('Could not load your submissions') from e

        submissions.sort(key=lambda doc: doc.get('submittedAt') or '', reverse=True)
        return submissions

    @staticmethod
    def _definition_for(form_type):
        definition = get_definition(form_type) if form_type else None
        if definition is None:
            raise ValidationFailed('Unknown form type', errors={'formType': 'formType must name a registered form'})
        return definition

    @classmethod
    def list_submissions(cls, form_type, status=None):
        definition = cls._definition_for(form_type)
        query = {'status': status} if status else {}
        try:
            cursor = get_document_store().collection(definition.collection_name).find(query).sort('submittedAt', DESCENDING)
            return [serialize_document(doc) for doc in cursor]
        except PyMongoError as e:
            logger.exception('Listing %s submissions failed', form_type)
            raise UpstreamFailure('Could not load submissions') from e

    @classmethod
    def count_submissions(cls):
        store = get_document_store()
        counts = {}
        try:
            for definition in list_definitions():
                counts[definition.slug] = store.collection(definition.collection_name).count_documents({})
        except PyMongoError as e:
            logger.exception('Counting submissions failed')
            raise UpstreamFailure('Could not load submissions') from e
        return counts

    @classmethod
    def set_status(cls, form_type, submission_id, status):
        definition = cls._definition_for(form_type)
        if status not in SUBMISSION_STATUSES:
            raise ValidationFailed('Invalid status', errors={'status': f'status must be one of {", ".join(SUBMISSION_STATUSES)}'})

        try:
            object_id = ObjectId(submission_id)
        except (InvalidId, TypeError):
            raise NotFound('Submission not found')

        try:
            result = get_document_store().collection(definition.collection_name).update_one(
                {'_id': object_id},
                {'$set': {'status': status, 'updatedAt': timezone.now()}}
            )
        except PyMongoError as e:
            logger.exception('Updating %s submission %s failed', form_type, submission_id)
            raise UpstreamFailure('Could not update submission') from e

        if result.matched_count == 0:
            raise NotFound('Submission not found')
        return status
