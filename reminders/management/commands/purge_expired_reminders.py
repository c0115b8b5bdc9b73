from django.core.management.base import BaseCommand

from reminders.services import purge_expired_reminders


class Command(BaseCommand):
    help = "Delete reminders and broadcast reminders whose expiry date has passed (run from cron)"

    def handle(self, *args, **options):
        reminders_deleted, broadcasts_deleted = purge_expired_reminders()
        self.stdout.write(
            self.style.SUCCESS(
                f"Purged {reminders_deleted} reminders and {broadcasts_deleted} broadcast reminders"
            )
        )
