from decimal import Decimal
from django.utils import timezone
from rest_framework import serializers
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer

from .models import (
    StaffAccount,
    Pledge,
    PledgePayment,
    PledgeRemark,
    CONTRIBUTION_TYPE_CHOICES,
    PLEDGE_STATUS_CHOICES,
    CONTRIBUTION_MATERIAL,
    CONTRIBUTION_OTHER,
)
from .reconciliation import is_overdue


class StaffTokenRefreshSerializer(TokenRefreshSerializer):
    def validate(self, attrs):
        refresh_token = attrs.get("refresh")
        if not refresh_token:
            raise ValidationError({"refresh": "Refresh token is required."})

        try:
            refresh = RefreshToken(refresh_token)
            access = refresh.access_token
            for claim in ("id", "email", "role"):
                access[claim] = refresh.get(claim)
            return {"refresh": str(refresh), "access": str(access)}
        except TokenError:
            raise ValidationError({"refresh": "Invalid refresh token."})


class StaffLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class ChangePasswordSerializer(serializers.Serializer):
    oldPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(write_only=True, min_length=6, max_length=128)


class StaffRegisterSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=50)
    middle_name = serializers.CharField(max_length=50)
    email = serializers.EmailField()


class StaffAccountSerializer(serializers.ModelSerializer):
    assigned_pledges = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = StaffAccount
        fields = [
            'id', 'first_name', 'middle_name', 'email', 'role', 'status',
            'created_date', 'last_login', 'assigned_pledges',
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = PledgePayment
        fields = ['id', 'amount', 'method', 'date', 'recorded_by']
        read_only_fields = ['id', 'recorded_by']


class PaymentInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)


class RemarkSerializer(serializers.ModelSerializer):
    class Meta:
        model = PledgeRemark
        fields = ['id', 'author', 'comment', 'date']
        read_only_fields = fields


class RemarkInputSerializer(serializers.Serializer):
    comment = serializers.CharField()


class PledgeSerializer(serializers.ModelSerializer):
    payment_history = PaymentSerializer(many=True, read_only=True)
    remarks = RemarkSerializer(many=True, read_only=True)
    overdue = serializers.SerializerMethodField()

    class Meta:
        model = Pledge
        fields = [
            'id', 'full_name', 'phone_number', 'alt_phone_number', 'email',
            'promised_amount', 'contribution_type', 'material_type',
            'material_quantity', 'other_description',
            'promised_start_date', 'promised_end_date', 'paper_form_image',
            'status', 'amount_paid', 'remaining_amount', 'percentage_paid',
            'assigned_followup', 'payment_history', 'remarks',
            'monthly_installment_amount', 'next_due_date',
            'overdue', 'archived', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_overdue(self, obj):
        # Recomputed on read so a pledge crosses its end date without a write
        return is_overdue(obj.promised_end_date, obj.remaining_amount, timezone.localdate())


def check_contribution_details(contribution_type, material_type, other_description):
    if contribution_type == CONTRIBUTION_MATERIAL and not material_type:
        raise ValidationError({"material_type": "Material type is required for material pledges."})
    if contribution_type == CONTRIBUTION_OTHER and not other_description:
        raise ValidationError({"other_description": "Description is required for other pledges."})


class PledgeCreateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=150)
    phone_number = serializers.CharField(max_length=20)
    alt_phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    promised_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    contribution_type = serializers.ChoiceField(choices=CONTRIBUTION_TYPE_CHOICES)
    material_type = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    material_quantity = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    other_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    promised_start_date = serializers.DateField()
    promised_end_date = serializers.DateField()
    paper_form_image = serializers.CharField(max_length=255)

    def validate(self, attrs):
        check_contribution_details(
            attrs["contribution_type"], attrs.get("material_type"), attrs.get("other_description")
        )
        return attrs


class PledgeUpdateSerializer(serializers.Serializer):
    """Partial update of a pledge; subclasses pick which fields a role may edit."""

    payment = PaymentInputSerializer(required=False)
    remark = RemarkInputSerializer(required=False)


class FollowUpPledgeUpdateSerializer(PledgeUpdateSerializer):
    phone_number = serializers.CharField(max_length=20, required=False)
    alt_phone_number = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)


class AdminPledgeUpdateSerializer(FollowUpPledgeUpdateSerializer):
    full_name = serializers.CharField(max_length=150, required=False)
    promised_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"), required=False)
    contribution_type = serializers.ChoiceField(choices=CONTRIBUTION_TYPE_CHOICES, required=False)
    material_type = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    material_quantity = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    other_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    promised_start_date = serializers.DateField(required=False)
    promised_end_date = serializers.DateField(required=False)
    paper_form_image = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        # Unchanged fields come from the stored pledge
        def merged(field):
            return attrs[field] if field in attrs else getattr(self.instance, field, None)

        check_contribution_details(
            merged("contribution_type"), merged("material_type"), merged("other_description")
        )
        return attrs


class PledgeFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PLEDGE_STATUS_CHOICES, required=False, allow_blank=True)
    contribution_type = serializers.ChoiceField(choices=CONTRIBUTION_TYPE_CHOICES, required=False, allow_blank=True)
    assigned_followup = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    archived = serializers.BooleanField(required=False)
    overdue = serializers.BooleanField(required=False)


class ArchivePledgeSerializer(serializers.Serializer):
    archived = serializers.BooleanField()


class AssignPledgeSerializer(serializers.Serializer):
    followUpId = serializers.IntegerField()
    pledgeId = serializers.IntegerField()


class AssignMultiplePledgesSerializer(serializers.Serializer):
    followUpId = serializers.IntegerField()
    pledgeIds = serializers.ListField(child=serializers.CharField(), allow_empty=False)


class UnassignPledgeSerializer(serializers.Serializer):
    pledgeId = serializers.IntegerField()
