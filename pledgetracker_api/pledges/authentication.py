from rest_framework.permissions import BasePermission
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import RefreshToken

from .models import ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_FOLLOW_UP


class AuthlessUser:
    is_authenticated = True


class HasRole(BasePermission):
    role = None

    def has_permission(self, request, view):
        return bool(request.auth and request.auth.get("role") == self.role)


class IsSuperAdmin(HasRole):
    role = ROLE_SUPER_ADMIN


class IsAdmin(HasRole):
    role = ROLE_ADMIN


class IsFollowUp(HasRole):
    role = ROLE_FOLLOW_UP


class StaffJWTAuthentication(JWTAuthentication):
    def get_user(self, validated_token):
        return AuthlessUser()


def issue_tokens(account):
    payload = {
        'id': account.pk,
        'email': account.email,
        'role': account.role,
    }

    refresh = RefreshToken()
    for k, v in payload.items():
        refresh[k] = v

    access = refresh.access_token
    for k, v in payload.items():
        access[k] = v

    return refresh, access
