from django.core.management.base import BaseCommand

from dailygames.models import DictionaryWord
from dailygames.seed_utils import ensure_seed_words


class Command(BaseCommand):
    help = "Seed a minimal Spanish dictionary if the DictionaryWord table is empty."

    def handle(self, *args, **options):
        # PUBLIC_INTERFACE
        # This command is idempotent and safe to run multiple times.
        inserted = ensure_seed_words()
        if not inserted:
            count = DictionaryWord.objects.count()
            self.stdout.write(self.style.WARNING(f"Words already present: {count}. No action taken."))
            return
        self.stdout.write(self.style.SUCCESS(f"Seeded {inserted} words."))
