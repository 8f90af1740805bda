import logging
from django.db import IntegrityError, transaction
from users.forms import ContactForm, NewsletterForm, form_errors
from users.helpers.errors import UpstreamFailure, ValidationFailed
from users.models import NewsletterSubscriber
from users.services.mail_service import MailService

logger = logging.getLogger(__name__)

# camelCase keys sent by the site's contact form
_CONTACT_ALIASES = {
    'firstName': 'first_name',
    'lastName': 'last_name',
}


class ContactService:

    @staticmethod
    def submit_contact(data):
        data = {_CONTACT_ALIASES.get(key, key): value for key, value in data.items()}
        form = ContactForm(data)
        if not form.is_valid():
            raise ValidationFailed('Invalid contact form', errors=form_errors(form))

        submission = form.save()
        logger.info('Contact submission %s from %s', submission.id, submission.email)
        return submission

    @staticmethod
    def subscribe(data):
        form = NewsletterForm(data)
        if not form.is_valid():
            raise ValidationFailed('Invalid email address', errors=form_errors(form))

        email = form.cleaned_data['email'].lower()
        try:
            with transaction.atomic():
                _, created = NewsletterSubscriber.objects.get_or_create(email=email)
        except IntegrityError:
            created = False

        if not MailService.send_newsletter_welcome(email):
            raise UpstreamFailure('Could not send the welcome email')

        return created
