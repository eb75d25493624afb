from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from pledges.models import PledgePayment, PLEDGE_NOT_PAID, PLEDGE_PARTIAL, PLEDGE_PAID
from pledges.reconciliation import (
    compute_financials,
    classify_status,
    count_months,
    monthly_schedule,
    reconcile,
)

TODAY = date(2024, 6, 15)
NEXT_YEAR = date(2025, 6, 15)


class TestComputeFinancials:
    """Derived amounts and status from a payment history"""

    def test_no_payments_is_not_paid(self):
        result = compute_financials(Decimal('1000'), [], NEXT_YEAR, TODAY)
        assert result.amount_paid == Decimal('0')
        assert result.remaining_amount == Decimal('1000')
        assert result.percentage_paid == Decimal('0')
        assert result.status == PLEDGE_NOT_PAID

    def test_partial_payment(self):
        result = compute_financials(Decimal('1000'), [Decimal('600')], NEXT_YEAR, TODAY)
        assert result.amount_paid == Decimal('600')
        assert result.remaining_amount == Decimal('400')
        assert result.percentage_paid == Decimal('60.00')
        assert result.status == PLEDGE_PARTIAL

    def test_exact_payment_is_paid(self):
        result = compute_financials(Decimal('1000'), [Decimal('1000')], NEXT_YEAR, TODAY)
        assert result.remaining_amount == Decimal('0')
        assert result.percentage_paid == Decimal('100.00')
        assert result.status == PLEDGE_PAID

    def test_overpayment_keeps_negative_remaining(self):
        result = compute_financials(Decimal('1000'), [Decimal('1200')], NEXT_YEAR, TODAY)
        assert result.status == PLEDGE_PAID
        assert result.remaining_amount == Decimal('-200')
        assert result.percentage_paid == Decimal('120.00')

    def test_sum_is_exact_for_cent_amounts(self):
        payments = [Decimal('0.10')] * 30
        result = compute_financials(Decimal('3.00'), payments, NEXT_YEAR, TODAY)
        assert result.amount_paid == Decimal('3.00')
        assert result.remaining_amount == Decimal('0')
        assert result.status == PLEDGE_PAID

    def test_sum_matches_history(self):
        payments = [Decimal('125.50'), Decimal('74.50'), Decimal('300')]
        result = compute_financials(Decimal('800'), payments, NEXT_YEAR, TODAY)
        assert result.amount_paid == sum(payments)
        assert result.remaining_amount == Decimal('800') - sum(payments)
        assert result.percentage_paid == Decimal('62.50')

    def test_percentage_is_rounded_to_cents(self):
        result = compute_financials(Decimal('300'), [Decimal('100')], NEXT_YEAR, TODAY)
        assert result.percentage_paid == Decimal('33.33')

    def test_zero_promised_amount_does_not_divide(self):
        result = compute_financials(Decimal('0'), [], NEXT_YEAR, TODAY)
        assert result.percentage_paid == Decimal('0')
        # remaining 0 is checked before "nothing paid"
        assert result.status == PLEDGE_PAID

    def test_negative_promised_amount_propagates(self):
        result = compute_financials(Decimal('-50'), [], NEXT_YEAR, TODAY)
        assert result.remaining_amount == Decimal('-50')
        assert result.status == PLEDGE_PAID

    def test_accepts_plain_numbers(self):
        result = compute_financials(1000, [250, '250'], NEXT_YEAR, TODAY)
        assert result.amount_paid == Decimal('500')
        assert result.status == PLEDGE_PARTIAL


class TestOverdue:
    """Overdue means past the end date with money outstanding"""

    def test_past_end_with_balance_is_overdue(self):
        yesterday = TODAY - timedelta(days=1)
        result = compute_financials(Decimal('100'), [Decimal('50')], yesterday, TODAY)
        assert result.remaining_amount == Decimal('50')
        assert result.overdue is True

    def test_past_end_fully_paid_is_not_overdue(self):
        yesterday = TODAY - timedelta(days=1)
        result = compute_financials(Decimal('100'), [Decimal('100')], yesterday, TODAY)
        assert result.overdue is False

    def test_end_date_today_is_not_overdue(self):
        result = compute_financials(Decimal('100'), [], TODAY, TODAY)
        assert result.overdue is False

    def test_future_end_is_not_overdue(self):
        result = compute_financials(Decimal('100'), [], NEXT_YEAR, TODAY)
        assert result.overdue is False


class TestClassifyStatus:
    """Status tie-break order"""

    @pytest.mark.parametrize('remaining, paid, expected', [
        (Decimal('100'), Decimal('0'), PLEDGE_NOT_PAID),
        (Decimal('40'), Decimal('60'), PLEDGE_PARTIAL),
        (Decimal('0'), Decimal('100'), PLEDGE_PAID),
        (Decimal('-10'), Decimal('110'), PLEDGE_PAID),
        (Decimal('0'), Decimal('0'), PLEDGE_PAID),
    ])
    def test_classification(self, remaining, paid, expected):
        assert classify_status(remaining, paid) == expected


class TestMonthlySchedule:
    """Installments derived at creation for monthly pledges"""

    def test_counts_both_endpoint_months(self):
        schedule = monthly_schedule(Decimal('300'), date(2024, 1, 15), date(2024, 3, 10))
        assert schedule.total_months == 3
        assert schedule.monthly_installment_amount == Decimal('100.00')
        assert schedule.next_due_date == date(2024, 1, 15)

    def test_same_month_is_one_installment(self):
        schedule = monthly_schedule(Decimal('450'), date(2024, 5, 1), date(2024, 5, 31))
        assert schedule.total_months == 1
        assert schedule.monthly_installment_amount == Decimal('450.00')

    def test_spans_year_boundary(self):
        assert count_months(date(2023, 11, 20), date(2024, 2, 1)) == 4

    def test_uneven_split_is_not_corrected(self):
        schedule = monthly_schedule(Decimal('100'), date(2024, 1, 1), date(2024, 3, 1))
        assert schedule.monthly_installment_amount == Decimal('33.33')

    def test_reversed_span_fails_validation(self):
        with pytest.raises(ValidationError) as excinfo:
            monthly_schedule(Decimal('300'), date(2024, 3, 1), date(2024, 1, 1))
        assert 'promised_end_date' in excinfo.value.detail

    def test_earlier_day_in_same_month_is_still_valid(self):
        schedule = monthly_schedule(Decimal('300'), date(2024, 3, 20), date(2024, 3, 1))
        assert schedule.total_months == 1


@pytest.mark.django_db
class TestReconcilePledge:
    """Applying reconciliation to stored pledges"""

    def test_unsaved_pledge_has_no_payments(self, make_pledge):
        pledge = make_pledge()
        assert pledge.amount_paid == Decimal('0')
        assert pledge.remaining_amount == Decimal('1000.00')
        assert pledge.status == PLEDGE_NOT_PAID

    def test_reads_stored_payment_history(self, make_pledge):
        pledge = make_pledge()
        PledgePayment.objects.create(pledge=pledge, amount=Decimal('250.00'))
        PledgePayment.objects.create(pledge=pledge, amount=Decimal('350.00'))

        reconcile(pledge)

        assert pledge.amount_paid == Decimal('600.00')
        assert pledge.remaining_amount == Decimal('400.00')
        assert pledge.percentage_paid == Decimal('60.00')
        assert pledge.status == PLEDGE_PARTIAL

    def test_is_idempotent(self, make_pledge):
        pledge = make_pledge()
        PledgePayment.objects.create(pledge=pledge, amount=Decimal('1200.00'))

        reconcile(pledge)
        pledge.save()
        first = (pledge.amount_paid, pledge.remaining_amount, pledge.percentage_paid, pledge.status, pledge.overdue)

        reconcile(pledge)
        second = (pledge.amount_paid, pledge.remaining_amount, pledge.percentage_paid, pledge.status, pledge.overdue)

        assert first == second
        assert pledge.remaining_amount == Decimal('-200.00')

    def test_sets_overdue_from_today(self, make_pledge):
        pledge = make_pledge(promised_end_date=timezone.localdate() - timedelta(days=1))
        PledgePayment.objects.create(pledge=pledge, amount=Decimal('950.00'))

        reconcile(pledge)

        assert pledge.overdue is True

    def test_does_not_save(self, make_pledge):
        pledge = make_pledge()
        PledgePayment.objects.create(pledge=pledge, amount=Decimal('100.00'))

        reconcile(pledge)
        pledge.refresh_from_db()

        assert pledge.amount_paid == Decimal('0.00')
