from django.core.management.base import BaseCommand

from pledges.assignment import repair_assignments


class Command(BaseCommand):
    help = "Repair follow-up assignment links that disagree between pledges and staff accounts."

    def handle(self, *args, **options):
        removed, added = repair_assignments()
        self.stdout.write(
            self.style.SUCCESS(f"Removed {removed} stale link(s), added {added} missing link(s).")
        )
