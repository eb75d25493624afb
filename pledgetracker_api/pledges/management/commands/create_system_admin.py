import logging
from django.conf import settings
from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand, CommandError

from pledges.models import StaffAccount, normalize_email, ROLE_SUPER_ADMIN

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create the initial superAdmin account from the SYSTEM_ADMIN settings."

    def handle(self, *args, **options):
        config = settings.SYSTEM_ADMIN
        if not config.get('email') or not config.get('password'):
            raise CommandError("ADMIN_EMAIL and ADMIN_PASSWORD must be set.")

        email = normalize_email(config['email'])
        if StaffAccount.objects.filter(email=email).exists():
            self.stdout.write("Initial admin account already exists.")
            return

        StaffAccount.objects.create(
            first_name=config['first_name'],
            middle_name=config['middle_name'],
            email=email,
            password=make_password(config['password']),
            role=ROLE_SUPER_ADMIN,
        )
        logger.info("Initial superAdmin %s created", email)
        self.stdout.write(self.style.SUCCESS("Initial admin account created."))
