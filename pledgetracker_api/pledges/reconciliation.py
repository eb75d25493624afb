"""
Derived financial state of a pledge.

Everything here is computed from the pledge's payment history and promised
amount. Nothing in this module saves to the database; callers persist.
"""
from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from .models import PLEDGE_NOT_PAID, PLEDGE_PARTIAL, PLEDGE_PAID

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

Financials = namedtuple(
    'Financials',
    ['amount_paid', 'remaining_amount', 'percentage_paid', 'status', 'overdue'],
)

MonthlySchedule = namedtuple(
    'MonthlySchedule',
    ['total_months', 'monthly_installment_amount', 'next_due_date'],
)


def to_money(value):
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def classify_status(remaining_amount, amount_paid):
    # "paid" wins over "notPaid", so a zero promise with no payments is paid
    if remaining_amount <= 0:
        return PLEDGE_PAID
    if amount_paid == 0:
        return PLEDGE_NOT_PAID
    return PLEDGE_PARTIAL


def is_overdue(promised_end_date, remaining_amount, today):
    if promised_end_date is None:
        return False
    return promised_end_date < today and remaining_amount > 0


def compute_financials(promised_amount, payment_amounts, promised_end_date, today):
    """
    Derive amount paid, remaining amount, percentage paid, status and the
    overdue flag.

    The remaining amount is not floored at zero: overpayment gives a negative
    remaining amount. A zero promised amount yields 0 percent instead of
    dividing by zero.
    """
    promised = Decimal(promised_amount)
    total_paid = sum((Decimal(amount) for amount in payment_amounts), ZERO)
    remaining = promised - total_paid

    if promised == 0:
        percentage = ZERO
    else:
        percentage = to_money(Decimal(100) * total_paid / promised)

    return Financials(
        amount_paid=total_paid,
        remaining_amount=remaining,
        percentage_paid=percentage,
        status=classify_status(remaining, total_paid),
        overdue=is_overdue(promised_end_date, remaining, today),
    )


def reconcile(pledge, today=None):
    """Recompute the derived fields of ``pledge`` from its stored payments."""
    if today is None:
        today = timezone.localdate()

    amounts = []
    if pledge.pk is not None:
        amounts = list(pledge.payment_history.values_list('amount', flat=True))

    financials = compute_financials(
        pledge.promised_amount, amounts, pledge.promised_end_date, today
    )
    pledge.amount_paid = financials.amount_paid
    pledge.remaining_amount = financials.remaining_amount
    pledge.percentage_paid = financials.percentage_paid
    pledge.status = financials.status
    pledge.overdue = financials.overdue
    return pledge


def count_months(start, end):
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def monthly_schedule(promised_amount, start, end):
    """
    Equal monthly installments between ``start`` and ``end``.

    Both endpoint months count, day of month is ignored. The first
    installment is due on the start date. Installments are not adjusted for
    rounding residue.
    """
    total_months = count_months(start, end)
    if total_months <= 0:
        raise ValidationError(
            {'promised_end_date': 'End date must not be before the start month for monthly pledges.'}
        )

    return MonthlySchedule(
        total_months=total_months,
        monthly_installment_amount=to_money(Decimal(promised_amount) / total_months),
        next_due_date=start,
    )
