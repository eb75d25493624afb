import calendar
from datetime import date, datetime, time
from decimal import Decimal
from django.db.models import Count, Sum, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from .models import Pledge, PledgePayment, StaffAccount, PLEDGE_PAID

ZERO = Decimal('0.00')


def active_pledges():
    return Pledge.objects.filter(archived=False)


def total_collection_stats():
    totals = active_pledges().aggregate(
        total_promised=Sum('promised_amount'),
        total_collected=Sum('amount_paid'),
        total_remaining=Sum('remaining_amount'),
        total_pledges=Count('id'),
    )
    return {
        "total_pledges": totals["total_pledges"],
        "total_promised": totals["total_promised"] or ZERO,
        "total_collected": totals["total_collected"] or ZERO,
        "total_remaining": totals["total_remaining"] or ZERO,
    }


def month_window(year, month):
    if not 1 <= month <= 12:
        raise ValidationError({"month": "Month must be between 1 and 12."})
    if not 1 <= year <= 9999:
        raise ValidationError({"year": "Invalid year."})

    last_day = calendar.monthrange(year, month)[1]
    start = timezone.make_aware(datetime(year, month, 1))
    end = timezone.make_aware(datetime.combine(date(year, month, last_day), time.max))
    return start, end


def monthly_payments(year, month):
    start, end = month_window(year, month)
    return PledgePayment.objects.filter(
        pledge__archived=False,
        date__range=(start, end),
    ).select_related('pledge')


def monthly_collection_report(year, month):
    start, end = month_window(year, month)
    payments = monthly_payments(year, month)
    totals = payments.aggregate(
        total_collected=Sum('amount'),
        payment_count=Count('id'),
        pledge_count=Count('pledge', distinct=True),
    )
    return {
        "year": year,
        "month": month,
        "start_date": start,
        "end_date": end,
        "total_collected": totals["total_collected"] or ZERO,
        "payment_count": totals["payment_count"],
        "pledge_count": totals["pledge_count"],
    }


def followup_performance(followup_id):
    account = StaffAccount.objects.filter(pk=followup_id).first()
    if account is None:
        raise NotFound("Follow-up account not found.")

    counts = active_pledges().filter(assigned_followup=account).aggregate(
        total_assigned=Count('id'),
        collected=Count('id', filter=Q(status=PLEDGE_PAID)),
        total_collected_amount=Sum('amount_paid'),
    )
    return {
        "followup_id": account.pk,
        "full_name": account.full_name,
        "email": account.email,
        "total_assigned": counts["total_assigned"],
        "collected": counts["collected"],
        "pending": counts["total_assigned"] - counts["collected"],
        "total_collected_amount": counts["total_collected_amount"] or ZERO,
    }


def overdue_pledges(today=None):
    # Evaluated at read time, the stored flag can be stale
    if today is None:
        today = timezone.localdate()
    return active_pledges().filter(promised_end_date__lt=today, remaining_amount__gt=0)
