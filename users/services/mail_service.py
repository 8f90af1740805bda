import logging
from smtplib import SMTPException
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


class MailService:

    @staticmethod
    def send(to, subject, template, context):
        """Render emails/<template>.txt and .html and send them; False when delivery fails."""
        text_body = render_to_string(f'emails/{template}.txt', context)
        html_body = render_to_string(f'emails/{template}.html', context)

        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[to]
        )
        message.attach_alternative(html_body, 'text/html')

        try:
            message.send()
        except (SMTPException, OSError):
            logger.exception('Failed to send "%s" email to %s', subject, to)
            return False
        return True

    @staticmethod
    def send_confirmation(user, confirm_url):
        return MailService.send(
            to=user.email,
            subject='Confirm your email address',
            template='confirm_email',
            context={'name': user.name, 'confirm_url': confirm_url}
        )

    @staticmethod
    def send_password_reset(user, reset_url):
        return MailService.send(
            to=user.email,
            subject='Reset your password',
            template='password_reset',
            context={'name': user.name, 'reset_url': reset_url}
        )

    @staticmethod
    def send_newsletter_welcome(email):
        return MailService.send(
            to=email,
            subject='Welcome to The Finance Desk newsletter',
            template='newsletter_welcome',
            context={'email': email, 'app_url': settings.APP_URL}
        )
