from decimal import Decimal
from django.db import models
from django.utils import timezone

ROLE_SUPER_ADMIN = 'superAdmin'
ROLE_ADMIN = 'admin'
ROLE_FOLLOW_UP = 'followUp'

ROLE_CHOICES = [
    (ROLE_SUPER_ADMIN, 'Super Admin'),
    (ROLE_ADMIN, 'Admin'),
    (ROLE_FOLLOW_UP, 'Follow Up'),
]

STATUS_ACTIVE = 'active'
STATUS_INACTIVE = 'inactive'

ACCOUNT_STATUS_CHOICES = [
    (STATUS_ACTIVE, 'Active'),
    (STATUS_INACTIVE, 'Inactive'),
]

CONTRIBUTION_ONE_TIME = 'oneTime'
CONTRIBUTION_MONTHLY = 'monthly'
CONTRIBUTION_MATERIAL = 'material'
CONTRIBUTION_OTHER = 'other'

CONTRIBUTION_TYPE_CHOICES = [
    (CONTRIBUTION_ONE_TIME, 'One Time'),
    (CONTRIBUTION_MONTHLY, 'Monthly'),
    (CONTRIBUTION_MATERIAL, 'Material'),
    (CONTRIBUTION_OTHER, 'Other'),
]

PLEDGE_NOT_PAID = 'notPaid'
PLEDGE_PARTIAL = 'partial'
PLEDGE_PAID = 'paid'

PLEDGE_STATUS_CHOICES = [
    (PLEDGE_NOT_PAID, 'Not Paid'),
    (PLEDGE_PARTIAL, 'Partial'),
    (PLEDGE_PAID, 'Paid'),
]


class StaffAccount(models.Model):
    first_name = models.CharField(max_length=50)
    middle_name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_FOLLOW_UP)
    status = models.CharField(max_length=10, choices=ACCOUNT_STATUS_CHOICES, default=STATUS_ACTIVE)
    created_date = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)
    assigned_pledges = models.ManyToManyField('Pledge', blank=True, related_name='assigned_staff')

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        return " ".join(filter(None, [self.first_name, self.middle_name]))

    def __str__(self):
        return f"{self.email} ({self.role})"


class Pledge(models.Model):
    full_name = models.CharField(max_length=150)
    phone_number = models.CharField(max_length=20)
    alt_phone_number = models.CharField(max_length=20, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)

    promised_amount = models.DecimalField(max_digits=12, decimal_places=2)
    contribution_type = models.CharField(max_length=10, choices=CONTRIBUTION_TYPE_CHOICES)
    material_type = models.CharField(max_length=100, blank=True, null=True)
    material_quantity = models.PositiveIntegerField(blank=True, null=True)
    other_description = models.TextField(blank=True, null=True)

    promised_start_date = models.DateField()
    promised_end_date = models.DateField()

    paper_form_image = models.CharField(max_length=255)

    status = models.CharField(max_length=10, choices=PLEDGE_STATUS_CHOICES, default=PLEDGE_NOT_PAID)
    # Running totals over many payments; overpayment is kept, never clamped
    amount_paid = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0.00'))
    remaining_amount = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0.00'))
    percentage_paid = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0.00'))

    assigned_followup = models.ForeignKey(
        StaffAccount,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='followup_pledges',
    )

    monthly_installment_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    next_due_date = models.DateField(null=True, blank=True)

    overdue = models.BooleanField(default=False)
    archived = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.full_name} - {self.promised_amount} ({self.status})"


class PledgePayment(models.Model):
    pledge = models.ForeignKey(Pledge, on_delete=models.CASCADE, related_name='payment_history')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    method = models.CharField(max_length=50, default='unknown')
    date = models.DateTimeField(default=timezone.now)
    recorded_by = models.ForeignKey(StaffAccount, on_delete=models.SET_NULL, null=True, blank=True)

    class Meta:
        ordering = ['date', 'id']


class PledgeRemark(models.Model):
    pledge = models.ForeignKey(Pledge, on_delete=models.CASCADE, related_name='remarks')
    author = models.ForeignKey(StaffAccount, on_delete=models.SET_NULL, null=True, related_name='remarks')
    comment = models.TextField()
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['date', 'id']


def normalize_email(email):
    return (email or '').strip().lower()
