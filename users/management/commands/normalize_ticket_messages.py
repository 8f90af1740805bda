from django.core.management.base import BaseCommand
from django.db import transaction
from users.helpers.messages import sorted_messages
from users.models import Ticket


class Command(BaseCommand):
    help = 'Rewrite stored ticket messages into the {id, text, sender, created_at} shape, oldest first'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Report changes without saving them')

    def handle(self, *args, **options):
        changed = 0
        for ticket_id in Ticket.objects.values_list('id', flat=True).iterator():
            with transaction.atomic():
                ticket = Ticket.objects.select_for_update().get(id=ticket_id)
                normalized = sorted_messages(ticket.messages)
                if normalized == ticket.messages:
                    continue
                changed += 1
                if not options['dry_run']:
                    ticket.messages = normalized
                    ticket.save(update_fields=['messages'])

        verb = 'Would rewrite' if options['dry_run'] else 'Rewrote'
        self.stdout.write(self.style.SUCCESS(f'{verb} {changed} ticket(s)'))
