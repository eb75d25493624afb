from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='StaffAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=50)),
                ('middle_name', models.CharField(max_length=50)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('password', models.CharField(max_length=128)),
                ('role', models.CharField(choices=[('superAdmin', 'Super Admin'), ('admin', 'Admin'), ('followUp', 'Follow Up')], default='followUp', max_length=20)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=10)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('last_login', models.DateTimeField(blank=True, null=True)),
            ],
        ),
        migrations.CreateModel(
            name='Pledge',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=150)),
                ('phone_number', models.CharField(max_length=20)),
                ('alt_phone_number', models.CharField(blank=True, max_length=20, null=True)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('promised_amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('contribution_type', models.CharField(choices=[('oneTime', 'One Time'), ('monthly', 'Monthly'), ('material', 'Material'), ('other', 'Other')], max_length=10)),
                ('material_type', models.CharField(blank=True, max_length=100, null=True)),
                ('material_quantity', models.PositiveIntegerField(blank=True, null=True)),
                ('other_description', models.TextField(blank=True, null=True)),
                ('promised_start_date', models.DateField()),
                ('promised_end_date', models.DateField()),
                ('paper_form_image', models.CharField(max_length=255)),
                ('status', models.CharField(choices=[('notPaid', 'Not Paid'), ('partial', 'Partial'), ('paid', 'Paid')], default='notPaid', max_length=10)),
                ('amount_paid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('remaining_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('percentage_paid', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=7)),
                ('monthly_installment_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('next_due_date', models.DateField(blank=True, null=True)),
                ('overdue', models.BooleanField(default=False)),
                ('archived', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_followup', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='followup_pledges', to='pledges.staffaccount')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddField(
            model_name='staffaccount',
            name='assigned_pledges',
            field=models.ManyToManyField(blank=True, related_name='assigned_staff', to='pledges.pledge'),
        ),
        migrations.CreateModel(
            name='PledgePayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('method', models.CharField(default='unknown', max_length=50)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('pledge', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payment_history', to='pledges.pledge')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to='pledges.staffaccount')),
            ],
            options={
                'ordering': ['date', 'id'],
            },
        ),
        migrations.CreateModel(
            name='PledgeRemark',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('comment', models.TextField()),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('author', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='remarks', to='pledges.staffaccount')),
                ('pledge', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='remarks', to='pledges.pledge')),
            ],
            options={
                'ordering': ['date', 'id'],
            },
        ),
    ]
