from users.helpers.errors import NotFound, ValidationFailed
from users.models import BotResponse


class BotResponseService:

    @staticmethod
    def serialize(bot_response):
        return {
            'id': bot_response.id,
            'trigger': bot_response.trigger,
            'response': bot_response.response,
            'created_at': bot_response.created_at.isoformat(),
            'updated_at': bot_response.updated_at.isoformat()
        }

    @staticmethod
    def _clean(data, partial=False):
        cleaned = {}
        errors = {}
        for field in ('trigger', 'response'):
            if field in data:
                value = str(data[field] or '').strip()
                if not value:
                    errors[field] = f'{field} cannot be empty'
                cleaned[field] = value
            elif not partial:
                errors[field] = f'{field} is required'
        if errors:
            raise ValidationFailed('Invalid bot response', errors=errors)
        return cleaned

    @staticmethod
    def list_all():
        return list(BotResponse.objects.all())

    @classmethod
    def create(cls, data):
        return BotResponse.objects.create(**cls._clean(data))

    @classmethod
    def update(cls, bot_response_id, data):
        try:
            bot_response = BotResponse.objects.get(id=bot_response_id)
        except BotResponse.DoesNotExist:
            raise NotFound('Bot response not found')

        for field, value in cls._clean(data, partial=True).items():
            setattr(bot_response, field, value)
        bot_response.save()
        return bot_response

    @staticmethod
    def delete(bot_response_id):
        deleted, _ = BotResponse.objects.filter(id=bot_response_id).delete()
        if not deleted:
            raise NotFound('Bot response not found')
