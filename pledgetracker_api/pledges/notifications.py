from django.conf import settings
from django.core.mail import send_mail
from django.utils.crypto import get_random_string

ROLE_LABELS = {
    'superAdmin': 'Super Admin',
    'admin': 'Admin',
    'followUp': 'Follow-up',
}


def generate_temp_password():
    return get_random_string(length=10)


def send_account_credentials(account, temp_password):
    send_mail(
        subject="Welcome to Pledge Tracker!",
        message=(
            f"Hi {account.full_name},\n\n"
            f"Your {ROLE_LABELS.get(account.role, account.role)} account is ready.\n"
            f"Email: {account.email}\n"
            f"Temporary Password: {temp_password}\n\n"
            f"Please log in and change your password as soon as possible.\n\n"
            f"Thanks,\nThe Pledge Tracker Team"
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[account.email],
        fail_silently=False
    )
