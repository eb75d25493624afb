from django.contrib import admin
from django.contrib.auth.hashers import make_password
from .models import StaffAccount, Pledge
from .notifications import generate_temp_password, send_account_credentials

@admin.register(StaffAccount)
class StaffAccountAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'role', 'status', 'last_login')
    list_filter = ('role', 'status')
    fields = ('first_name', 'middle_name', 'email', 'password', 'role', 'status')

    def save_model(self, request, obj, form, change):
        if not change or 'password' in form.changed_data:
            if not obj.password:
                temp_password = generate_temp_password()
            else:
                temp_password = form.cleaned_data['password']
            obj.password = make_password(temp_password)

            super().save_model(request, obj, form, change)

            if not change:
                send_account_credentials(obj, temp_password)
        else:
            super().save_model(request, obj, form, change)


@admin.register(Pledge)
class PledgeAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'contribution_type', 'promised_amount', 'amount_paid', 'status', 'assigned_followup', 'archived')
    list_filter = ('status', 'contribution_type', 'archived')
    search_fields = ('full_name', 'phone_number', 'email')
    readonly_fields = ('status', 'amount_paid', 'remaining_amount', 'percentage_paid', 'overdue',
                       'monthly_installment_amount', 'next_due_date', 'assigned_followup')
