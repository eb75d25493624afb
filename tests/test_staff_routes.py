import re

import pytest
from django.contrib.auth.hashers import check_password
from django.core import mail

from pledges.models import StaffAccount, ROLE_ADMIN, ROLE_FOLLOW_UP, STATUS_ACTIVE, STATUS_INACTIVE

NEW_STAFF = {'first_name': 'Hana', 'middle_name': 'Girma', 'email': 'Hana.Girma@Example.com'}


def emailed_password(message):
    return re.search(r"Temporary Password: (\S+)", message.body).group(1)


@pytest.mark.django_db
class TestCreateStaff:
    """POST /admin/addAdmin and /admin/addFollowUp"""

    def test_super_admin_adds_admin(self, super_admin_client):
        response = super_admin_client.post('/admin/addAdmin', NEW_STAFF, format='json')

        assert response.status_code == 201
        assert response.data['role'] == ROLE_ADMIN
        assert response.data['email'] == 'hana.girma@example.com'
        assert 'password' not in response.data

        account = StaffAccount.objects.get(email='hana.girma@example.com')
        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ['hana.girma@example.com']
        assert check_password(emailed_password(mail.outbox[0]), account.password)

    def test_admin_adds_followup(self, admin_client):
        response = admin_client.post('/admin/addFollowUp', NEW_STAFF, format='json')

        assert response.status_code == 201
        assert response.data['role'] == ROLE_FOLLOW_UP
        assert response.data['status'] == STATUS_ACTIVE

    def test_duplicate_email_is_conflict(self, super_admin_client, followup):
        response = super_admin_client.post(
            '/admin/addFollowUp',
            {'first_name': 'Dup', 'middle_name': 'Licate', 'email': 'FOLLOWUP@example.com'},
            format='json',
        )

        assert response.status_code == 409
        assert len(mail.outbox) == 0

    def test_missing_fields(self, super_admin_client):
        response = super_admin_client.post('/admin/addFollowUp', {'email': 'x@example.com'}, format='json')

        assert response.status_code == 400
        assert 'first_name' in response.data
        assert 'middle_name' in response.data

    def test_followup_cannot_add_staff(self, followup_client):
        response = followup_client.post('/admin/addFollowUp', NEW_STAFF, format='json')
        assert response.status_code == 403

    def test_email_failure_rolls_back_account(self, super_admin_client, monkeypatch):
        def broken_send(*args, **kwargs):
            raise ConnectionError("smtp down")

        monkeypatch.setattr('pledges.views.send_account_credentials', broken_send)

        response = super_admin_client.post('/admin/addFollowUp', NEW_STAFF, format='json')

        assert response.status_code == 500
        assert response.data == {'detail': 'Internal server error.'}
        assert not StaffAccount.objects.filter(email='hana.girma@example.com').exists()


@pytest.mark.django_db
class TestStaffListing:
    """GET /admin/staff"""

    def test_filters_by_role(self, admin_client, admin_user, followup, other_followup):
        response = admin_client.get('/admin/staff', {'role': ROLE_FOLLOW_UP})

        assert response.status_code == 200
        assert {row['id'] for row in response.data} == {followup.pk, other_followup.pk}

    def test_detail(self, admin_client, followup):
        response = admin_client.get(f'/admin/staff/{followup.pk}')

        assert response.status_code == 200
        assert response.data['email'] == 'followup@example.com'
        assert response.data['assigned_pledges'] == []

    def test_detail_not_found(self, admin_client):
        assert admin_client.get('/admin/staff/999999').status_code == 404


@pytest.mark.django_db
class TestToggleStatus:
    """PUT /admin/toggleStatus/<id>"""

    def test_admin_toggles_followup(self, admin_client, followup):
        response = admin_client.put(f'/admin/toggleStatus/{followup.pk}')

        assert response.status_code == 200
        assert response.data['status'] == STATUS_INACTIVE

        response = admin_client.put(f'/admin/toggleStatus/{followup.pk}')
        assert response.data['status'] == STATUS_ACTIVE

    def test_admin_cannot_toggle_admin(self, admin_client, make_staff):
        other_admin = make_staff(role=ROLE_ADMIN)

        response = admin_client.put(f'/admin/toggleStatus/{other_admin.pk}')

        assert response.status_code == 403

    def test_super_admin_toggles_admin(self, super_admin_client, admin_user):
        response = super_admin_client.put(f'/admin/toggleStatus/{admin_user.pk}')

        assert response.status_code == 200
        admin_user.refresh_from_db()
        assert admin_user.status == STATUS_INACTIVE

    def test_cannot_toggle_self(self, super_admin_client, super_admin):
        response = super_admin_client.put(f'/admin/toggleStatus/{super_admin.pk}')
        assert response.status_code == 403
