import logging
import os
import re
import time
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from users.helpers.errors import NotFound, UpstreamFailure, ValidationFailed

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


class ObjectStorage:
    """S3 bucket access: pre-signed upload/download URLs, server-side puts, listing."""

    def __init__(self, bucket=None, client=None):
        self.bucket = bucket or settings.AWS_S3_BUCKET_NAME
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                's3',
                region_name=settings.AWS_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
                config=Config(signature_version='s3v4')
            )
        return self._client

    @staticmethod
    def safe_filename(filename):
        name = _UNSAFE_CHARS.sub('-', os.path.basename(filename or '')).strip('-.')
        return name[:150]

    @classmethod
    def build_key(cls, prefix, filename):
        return f"{prefix.strip('/')}/{int(time.time() * 1000)}-{cls.safe_filename(filename)}"

    @staticmethod
    def check_size(size):
        limit = settings.UPLOAD_MAX_BYTES
        try:
            size = int(size)
        except (TypeError, ValueError):
            raise ValidationFailed('File size is required', errors={'size': 'size must be a number of bytes'})
        if size < 0:
            raise ValidationFailed('Invalid file size', errors={'size': 'size must not be negative'})
        if size > limit:
            raise ValidationFailed(
                f'File too large. Max size: {limit // (1024 * 1024)}MB',
                errors={'size': f'size must be at most {limit} bytes'}
            )
        return size

    def presign_upload(self, key, content_type, size):
        self.check_size(size)
        if not key or key.endswith('/') or key.endswith('-'):
            raise ValidationFailed('Filename is required', errors={'filename': 'filename is required'})

        expires_in = settings.UPLOAD_URL_EXPIRES
        try:
            post = self.client.generate_presigned_post(
                Bucket=self.bucket,
                Key=key,
                Fields={'Content-Type': content_type},
                Conditions=[
                    ['content-length-range', 0, settings.UPLOAD_MAX_BYTES],
                    {'Content-Type': content_type},
                ],
                ExpiresIn=expires_in
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception('Could not sign upload for %s', key)
            raise UpstreamFailure('Could not prepare the upload') from e

        return {'url': post['url'], 'fields': post['fields'], 'key': key, 'expires_in': expires_in}

    def presign_download(self, key, expires_in=None):
        try:
            return self.client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=expires_in or settings.DOWNLOAD_URL_EXPIRES
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception('Could not sign download for %s', key)
            raise UpstreamFailure('Could not prepare the download') from e

    def upload(self, fileobj, key, content_type=None):
        extra = {'ContentType': content_type} if content_type else {}
        try:
            self.client.upload_fileobj(fileobj, self.bucket, key, ExtraArgs=extra)
        except (BotoCoreError, ClientError) as e:
            logger.exception('Upload of %s failed', key)
            raise UpstreamFailure('File upload failed') from e
        return key

    def public_url(self, key):
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def list_files(self, prefix=''):
        files = []
        paginator = self.client.get_paginator('list_objects_v2')
        try:
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get('Contents', []):
                    files.append({
                        'key': obj['Key'],
                        'size': obj.get('Size', 0),
                        'last_modified': obj['LastModified'].isoformat() if obj.get('LastModified') else None,
                        'url': self.presign_download(obj['Key'])
                    })
        except (BotoCoreError, ClientError) as e:
            logger.exception('Listing bucket %s failed', self.bucket)
            raise UpstreamFailure('Could not list files') from e
        return files

    def fetch(self, key):
        try:
            obj = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('NoSuchKey', '404'):
                raise NotFound('File not found') from e
            logger.exception('Fetching %s failed', key)
            raise UpstreamFailure('Could not fetch file') from e
        except BotoCoreError as e:
            logger.exception('Fetching %s failed', key)
            raise UpstreamFailure('Could not fetch file') from e

        return obj['Body'].read(), obj.get('ContentType') or 'application/octet-stream'


def get_storage():
    return ObjectStorage()
