import pytest
from django.contrib.auth.hashers import make_password
from django.core.cache import cache
from django.test import Client
from users.models import Session, User
from users.services.auth_service import AuthService
from users.services.document_store import close_document_store

PASSWORD = 'correct-horse-battery'


@pytest.fixture(autouse=True)
def test_settings(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    settings.DOCUMENT_STORE_CLIENT = 'mongomock.MongoClient'
    settings.MONGO_URL = 'mongodb://localhost:27017'
    settings.MONGO_DB_NAME = 'financedesk_test'
    settings.AWS_ACCESS_KEY_ID = 'testing'
    settings.AWS_SECRET_ACCESS_KEY = 'testing'
    settings.AWS_S3_BUCKET_NAME = 'financedesk-test'
    settings.APP_URL = 'https://example.test'
    settings.PAYMENT_MERCHANT_ID = '10000100'
    settings.PAYMENT_MERCHANT_KEY = '46f0cd694581a'
    settings.PAYMENT_PASSPHRASE = ''
    settings.PAYMENT_VALIDATE_URL = ''
    settings.CHANNEL_LAYERS = {'default': {'BACKEND': 'channels.layers.InMemoryChannelLayer'}}
    close_document_store()
    cache.clear()
    yield settings
    close_document_store()


def make_user(email='jane@example.com', name='Jane Doe', role=User.RoleChoices.USER, **extra):
    return User.objects.create(
        name=name,
        email=email,
        password=make_password(PASSWORD),
        role=role,
        **extra
    )


def issue_token(user):
    token = AuthService._generate_token(user)
    Session.objects.create(user_id=user, ip_address='127.0.0.1', user_agent='pytest', payload=AuthService.session_key(token))
    return token


@pytest.fixture
def user(db):
    return make_user()


@pytest.fixture
def other_user(db):
    return make_user(email='bob@example.com', name='Bob Smith')


@pytest.fixture
def admin_user(db):
    return make_user(email='admin@example.com', name='Ada Admin', role=User.RoleChoices.ADMIN)


@pytest.fixture
def user_token(user):
    return issue_token(user)


@pytest.fixture
def admin_token(admin_user):
    return issue_token(admin_user)


@pytest.fixture
def api():
    return Client()


def bearer(token):
    return {'HTTP_AUTHORIZATION': f'Bearer {token}'}
