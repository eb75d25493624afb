from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth.hashers import make_password
from rest_framework.test import APIClient

from pledges.authentication import issue_tokens
from pledges.models import (
    StaffAccount,
    Pledge,
    ROLE_SUPER_ADMIN,
    ROLE_ADMIN,
    ROLE_FOLLOW_UP,
    CONTRIBUTION_ONE_TIME,
)
from pledges.reconciliation import reconcile

DEFAULT_PASSWORD = 'secret-pass'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_staff(db):
    counter = {'n': 0}

    def _make(role=ROLE_FOLLOW_UP, password=DEFAULT_PASSWORD, **fields):
        counter['n'] += 1
        defaults = {
            'first_name': f'Staff{counter["n"]}',
            'middle_name': 'Tester',
            'email': f'staff{counter["n"]}@example.com',
        }
        defaults.update(fields)
        return StaffAccount.objects.create(role=role, password=make_password(password), **defaults)

    return _make


@pytest.fixture
def super_admin(make_staff):
    return make_staff(role=ROLE_SUPER_ADMIN, email='super@example.com')


@pytest.fixture
def admin_user(make_staff):
    return make_staff(role=ROLE_ADMIN, email='admin@example.com')


@pytest.fixture
def followup(make_staff):
    return make_staff(role=ROLE_FOLLOW_UP, email='followup@example.com')


@pytest.fixture
def other_followup(make_staff):
    return make_staff(role=ROLE_FOLLOW_UP, email='other.followup@example.com')


@pytest.fixture
def make_pledge(db):
    def _make(**fields):
        defaults = {
            'full_name': 'Abebe Kebede',
            'phone_number': '0911000000',
            'promised_amount': Decimal('1000.00'),
            'contribution_type': CONTRIBUTION_ONE_TIME,
            'promised_start_date': date.today() - timedelta(days=30),
            'promised_end_date': date.today() + timedelta(days=30),
            'paper_form_image': 'forms/abebe.jpg',
        }
        defaults.update(fields)
        pledge = Pledge(**defaults)
        reconcile(pledge)
        pledge.save()
        return pledge

    return _make


@pytest.fixture
def auth_client():
    """Return a factory that builds an APIClient carrying a bearer token for ``account``."""
    def _client(account):
        client = APIClient()
        _, access = issue_tokens(account)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        return client

    return _client


@pytest.fixture
def super_admin_client(auth_client, super_admin):
    return auth_client(super_admin)


@pytest.fixture
def admin_client(auth_client, admin_user):
    return auth_client(admin_user)


@pytest.fixture
def followup_client(auth_client, followup):
    return auth_client(followup)
