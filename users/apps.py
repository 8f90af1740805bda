import atexit
from django.apps import AppConfig


class UsersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'users'

    def ready(self):
        from users.services.document_store import close_document_store

        atexit.register(close_document_store)
