import logging
from django.contrib.auth.hashers import check_password, make_password
from django.db import transaction
from django.utils.timezone import now
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenRefreshView

from . import assignment, reports
from .authentication import IsSuperAdmin, IsAdmin, IsFollowUp, issue_tokens
from .exceptions import Conflict
from .models import (
    StaffAccount,
    Pledge,
    PledgePayment,
    PledgeRemark,
    normalize_email,
    ROLE_ADMIN,
    ROLE_FOLLOW_UP,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
    CONTRIBUTION_MONTHLY,
)
from .notifications import generate_temp_password, send_account_credentials
from .pdf_report import generate_monthly_report_pdf
from .reconciliation import reconcile, monthly_schedule
from .serializers import (
    StaffTokenRefreshSerializer,
    StaffLoginSerializer,
    ChangePasswordSerializer,
    StaffRegisterSerializer,
    StaffAccountSerializer,
    PledgeSerializer,
    PledgeCreateSerializer,
    PledgeFilterSerializer,
    AdminPledgeUpdateSerializer,
    FollowUpPledgeUpdateSerializer,
    ArchivePledgeSerializer,
    AssignPledgeSerializer,
    AssignMultiplePledgesSerializer,
    UnassignPledgeSerializer,
)

logger = logging.getLogger(__name__)


def token_account_id(request):
    return request.auth.get("id") if request.auth else None


def get_pledge_or_404(pledge_id):
    try:
        return Pledge.objects.prefetch_related("payment_history", "remarks").get(pk=pledge_id)
    except Pledge.DoesNotExist:
        raise NotFound("Pledge not found.")


def check_followup_access(request, pledge):
    if request.auth.get("role") == ROLE_FOLLOW_UP and pledge.assigned_followup_id != token_account_id(request):
        raise PermissionDenied("This pledge is not assigned to you.")


# Staff Refresh View
class StaffTokenRefreshView(TokenRefreshView):
    serializer_class = StaffTokenRefreshSerializer


# Staff Login View
class StaffLoginView(APIView):
    def post(self, request):
        serializer = StaffLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = normalize_email(serializer.validated_data['email'])
        password = serializer.validated_data['password']

        account = StaffAccount.objects.filter(email=email).first()
        if not account:
            logger.info("Login failed for unknown email %s", email)
            return Response({'detail': 'Email not found'}, status=status.HTTP_401_UNAUTHORIZED)

        if not check_password(password, account.password):
            logger.info("Login failed for %s: wrong password", email)
            return Response({'detail': 'Invalid email or password'}, status=status.HTTP_401_UNAUTHORIZED)

        if account.status != STATUS_ACTIVE:
            return Response({'detail': 'Account is inactive'}, status=status.HTTP_403_FORBIDDEN)

        account.last_login = now()
        account.save(update_fields=['last_login'])

        refresh, access = issue_tokens(account)
        logger.info("Staff %s (%s) logged in", account.pk, account.role)

        return Response({
            'token': str(access),
            'refresh': str(refresh),
            'profile': StaffAccountSerializer(account).data,
        }, status=status.HTTP_200_OK)


# Change Password View
class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, account_id):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        old_password = serializer.validated_data['oldPassword']
        new_password = serializer.validated_data['newPassword']

        try:
            account = StaffAccount.objects.get(pk=account_id)
        except StaffAccount.DoesNotExist:
            return Response({'detail': 'Account not found.'}, status=status.HTTP_404_NOT_FOUND)

        if account.pk != token_account_id(request):
            return Response({'detail': 'You can only change your own password.'}, status=status.HTTP_403_FORBIDDEN)

        if not check_password(old_password, account.password):
            return Response({'detail': 'Old password is incorrect.'}, status=status.HTTP_403_FORBIDDEN)

        if old_password == new_password:
            return Response(
                {'detail': 'New password must be different from the old password.'},
                status=status.HTTP_400_BAD_REQUEST
            )

        account.password = make_password(new_password)
        account.save(update_fields=['password'])

        return Response({'detail': 'Password changed successfully.'}, status=status.HTTP_200_OK)


class CreateStaffAccountView(APIView):
    role = None

    def post(self, request):
        serializer = StaffRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = normalize_email(serializer.validated_data['email'])

        # Check if email is already used
        if StaffAccount.objects.filter(email=email).exists():
            raise Conflict('This email is already registered.')

        temp_password = generate_temp_password()

        # Account is rolled back if the credentials email cannot be sent
        with transaction.atomic():
            account = StaffAccount.objects.create(
                first_name=serializer.validated_data['first_name'],
                middle_name=serializer.validated_data['middle_name'],
                email=email,
                password=make_password(temp_password),
                role=self.role,
            )
            send_account_credentials(account, temp_password)

        logger.info("Staff account %s (%s) created by %s", account.pk, self.role, token_account_id(request))
        return Response(StaffAccountSerializer(account).data, status=status.HTTP_201_CREATED)


# Add Admin View
class AddAdminView(CreateStaffAccountView):
    permission_classes = [IsAuthenticated, IsSuperAdmin]
    role = ROLE_ADMIN


# Add Follow-up View
class AddFollowUpView(CreateStaffAccountView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]
    role = ROLE_FOLLOW_UP


# Staff List View
class StaffListView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request):
        filters = {}
        role = request.query_params.get("role")
        account_status = request.query_params.get("status")
        if role:
            filters["role"] = role
        if account_status:
            filters["status"] = account_status

        accounts = StaffAccount.objects.filter(**filters).prefetch_related("assigned_pledges").order_by("id")
        return Response(StaffAccountSerializer(accounts, many=True).data)


# Staff Detail View
class StaffDetailView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request, account_id):
        try:
            account = StaffAccount.objects.get(pk=account_id)
        except StaffAccount.DoesNotExist:
            return Response({"detail": "Account not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(StaffAccountSerializer(account).data)


# Toggle Staff Status View
class ToggleStaffStatusView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def put(self, request, account_id):
        try:
            account = StaffAccount.objects.get(pk=account_id)
        except StaffAccount.DoesNotExist:
            return Response({"detail": "Account not found."}, status=status.HTTP_404_NOT_FOUND)

        if account.pk == token_account_id(request):
            return Response({"detail": "You cannot change your own status."}, status=status.HTTP_403_FORBIDDEN)

        if request.auth.get("role") == ROLE_ADMIN and account.role != ROLE_FOLLOW_UP:
            return Response(
                {"detail": "Admins can only change the status of follow-up accounts."},
                status=status.HTTP_403_FORBIDDEN
            )

        account.status = STATUS_INACTIVE if account.status == STATUS_ACTIVE else STATUS_ACTIVE
        account.save(update_fields=["status"])
        logger.info("Staff %s status set to %s", account.pk, account.status)

        return Response(StaffAccountSerializer(account).data)


# Add Pledge View
class AddPledgeView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def post(self, request):
        serializer = PledgeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        pledge = Pledge(**data)
        if data["contribution_type"] == CONTRIBUTION_MONTHLY:
            schedule = monthly_schedule(
                data["promised_amount"], data["promised_start_date"], data["promised_end_date"]
            )
            pledge.monthly_installment_amount = schedule.monthly_installment_amount
            pledge.next_due_date = schedule.next_due_date

        reconcile(pledge)
        pledge.save()
        logger.info("Pledge %s created for %s by %s", pledge.pk, pledge.promised_amount, token_account_id(request))

        return Response(PledgeSerializer(pledge).data, status=status.HTTP_201_CREATED)


# Pledge List View
class PledgeListView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request):
        serializer = PledgeFilterSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        if params.get("overdue"):
            pledges = reports.overdue_pledges()
        else:
            pledges = Pledge.objects.filter(archived=params.get("archived", False))

        for field in ("status", "contribution_type", "assigned_followup"):
            value = params.get(field)
            if value:
                pledges = pledges.filter(**{field: value})

        pledges = pledges.prefetch_related("payment_history", "remarks")
        return Response(PledgeSerializer(pledges, many=True).data)


# Pledge Detail View
class PledgeDetailView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin | IsFollowUp]

    def get(self, request, pledge_id):
        pledge = get_pledge_or_404(pledge_id)
        check_followup_access(request, pledge)
        return Response(PledgeSerializer(pledge).data)


# Update Pledge View
class UpdatePledgeView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin | IsFollowUp]

    def put(self, request, pledge_id):
        pledge = get_pledge_or_404(pledge_id)
        check_followup_access(request, pledge)

        if request.auth.get("role") == ROLE_FOLLOW_UP:
            serializer = FollowUpPledgeUpdateSerializer(data=request.data)
        else:
            serializer = AdminPledgeUpdateSerializer(pledge, data=request.data)
        serializer.is_valid(raise_exception=True)

        changes = dict(serializer.validated_data)
        payment = changes.pop("payment", None)
        remark = changes.pop("remark", None)
        staff_id = token_account_id(request)

        with transaction.atomic():
            for field, value in changes.items():
                setattr(pledge, field, value)

            if payment:
                PledgePayment.objects.create(
                    pledge=pledge,
                    amount=payment["amount"],
                    method=payment.get("method") or "unknown",
                    date=payment.get("date") or now(),
                    recorded_by_id=staff_id,
                )
                logger.info("Payment of %s recorded on pledge %s by %s", payment["amount"], pledge.pk, staff_id)

            if remark:
                PledgeRemark.objects.create(pledge=pledge, author_id=staff_id, comment=remark["comment"])

            reconcile(pledge)
            pledge.save()

        pledge = get_pledge_or_404(pledge.pk)
        return Response(PledgeSerializer(pledge).data, status=status.HTTP_200_OK)


# Archive Pledge View
class ArchivePledgeView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def put(self, request, pledge_id):
        serializer = ArchivePledgeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pledge = get_pledge_or_404(pledge_id)
        pledge.archived = serializer.validated_data["archived"]
        pledge.save(update_fields=["archived", "updated_at"])

        return Response(PledgeSerializer(pledge).data)


# Assign Pledge To Follow-up View
class AssignPledgeView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def post(self, request):
        serializer = AssignPledgeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        account, pledge = assignment.assign_one(
            serializer.validated_data["followUpId"],
            serializer.validated_data["pledgeId"],
        )
        return Response({
            "detail": "Pledge assigned successfully.",
            "followUpId": account.pk,
            "pledgeId": pledge.pk,
        }, status=status.HTTP_200_OK)


# Assign Multiple Pledges To Follow-up View
class AssignMultiplePledgesView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def post(self, request):
        serializer = AssignMultiplePledgesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assigned, skipped, reasons = assignment.assign_many(
            serializer.validated_data["followUpId"],
            serializer.validated_data["pledgeIds"],
        )
        return Response({
            "detail": f"{len(assigned)} pledge(s) assigned, {len(skipped)} skipped.",
            "assignedPledges": assigned,
            "skippedPledges": skipped,
            "skipReasons": reasons,
        }, status=status.HTTP_200_OK)


# Unassign Pledge View
class UnassignPledgeView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def post(self, request):
        serializer = UnassignPledgeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pledge = assignment.unassign(serializer.validated_data["pledgeId"])
        return Response({"detail": "Pledge unassigned.", "pledgeId": pledge.pk}, status=status.HTTP_200_OK)


# Follow-up Pledges View
class MyPledgesView(APIView):
    permission_classes = [IsAuthenticated, IsFollowUp]

    def get(self, request):
        pledges = Pledge.objects.filter(
            assigned_followup_id=token_account_id(request),
            archived=False,
        ).prefetch_related("payment_history", "remarks")
        return Response(PledgeSerializer(pledges, many=True).data)


# Total Collection Stats View
class TotalCollectionStatsView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request):
        return Response(reports.total_collection_stats())


# Monthly Collection Report View
class MonthlyCollectionReportView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request, year, month):
        report = reports.monthly_collection_report(year, month)

        # PDF download
        if request.query_params.get('download') == 'pdf':
            payments = reports.monthly_payments(year, month)
            return generate_monthly_report_pdf(report, payments)

        return Response(report)


# Follow-up Performance View
class FollowUpPerformanceView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request, account_id):
        return Response(reports.followup_performance(account_id))


# Overdue Pledges View
class OverduePledgesView(APIView):
    permission_classes = [IsAuthenticated, IsSuperAdmin | IsAdmin]

    def get(self, request):
        pledges = reports.overdue_pledges().prefetch_related("payment_history", "remarks")
        return Response({
            "count": pledges.count(),
            "pledges": PledgeSerializer(pledges, many=True).data,
        })
