# Initial schema for cooperatives, schedule templates, fleet, trips and tickets

import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Cooperative',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=150)),
                ('ruc', models.CharField(max_length=20, unique=True)),
                ('contact_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('contact_phone', models.CharField(blank=True, max_length=20, null=True)),
                ('config', models.JSONField(blank=True, default=dict)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('super_admin', 'Super Admin'), ('admin', 'Cooperative Admin'), ('clerk', 'Ticket Clerk'), ('driver', 'Driver'), ('assistant', 'Assistant'), ('client', 'Client')], default='client', max_length=20)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=10)),
                ('id_number', models.CharField(blank=True, max_length=20, null=True)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('cooperative', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='members', to='coopbus_main_app.cooperative')),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [models.Index(fields=['cooperative', 'role', 'status'], name='profile_coop_role_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Route',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(blank=True, max_length=150)),
                ('origin', models.CharField(max_length=100)),
                ('destination', models.CharField(max_length=100)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('estimated_duration', models.PositiveIntegerField(help_text='Minutes from origin to destination')),
                ('distance', models.DecimalField(decimal_places=2, default=0, max_digits=8)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cooperative', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='routes', to='coopbus_main_app.cooperative')),
            ],
            options={
                'indexes': [models.Index(fields=['cooperative', 'origin', 'destination'], name='route_coop_od_idx')],
            },
        ),
        migrations.CreateModel(
            name='RouteStop',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('order', models.PositiveIntegerField()),
                ('price_from_origin', models.DecimalField(decimal_places=2, max_digits=10)),
                ('route', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stops', to='coopbus_main_app.route')),
            ],
            options={
                'ordering': ['order'],
                'unique_together': {('route', 'order')},
            },
        ),
        migrations.CreateModel(
            name='BusGroup',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cooperative', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bus_groups', to='coopbus_main_app.cooperative')),
            ],
            options={
                'unique_together': {('cooperative', 'name')},
            },
        ),
        migrations.CreateModel(
            name='Bus',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('internal_number', models.PositiveIntegerField()),
                ('plate', models.CharField(max_length=10, unique=True)),
                ('brand', models.CharField(blank=True, max_length=50)),
                ('model', models.CharField(blank=True, max_length=50)),
                ('total_seats', models.PositiveIntegerField()),
                ('seat_layout', models.JSONField(blank=True, default=dict)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('MAINTENANCE', 'Maintenance'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=15)),
                ('has_ac', models.BooleanField(default=False)),
                ('has_wifi', models.BooleanField(default=False)),
                ('has_bathroom', models.BooleanField(default=False)),
                ('cooperative', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='buses', to='coopbus_main_app.cooperative')),
                ('group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='buses', to='coopbus_main_app.busgroup')),
            ],
            options={
                'unique_together': {('cooperative', 'internal_number')},
                'indexes': [models.Index(fields=['group', 'status'], name='bus_group_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Frequency',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('departure_time', models.CharField(max_length=5, validators=[django.core.validators.RegexValidator('^([0-1][0-9]|2[0-3]):[0-5][0-9]$', 'Invalid time format (HH:MM)')])),
                ('operating_days', models.JSONField(default=list)),
                ('permit_number', models.CharField(blank=True, max_length=50, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('bus_group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='frequencies', to='coopbus_main_app.busgroup')),
                ('cooperative', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='frequencies', to='coopbus_main_app.cooperative')),
                ('route', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='frequencies', to='coopbus_main_app.route')),
            ],
            options={
                'ordering': ['departure_time'],
                'indexes': [
                    models.Index(fields=['bus_group', 'is_active'], name='freq_group_active_idx'),
                    models.Index(fields=['cooperative', 'is_active'], name='freq_coop_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Trip',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateField(db_index=True)),
                ('departure_time', models.CharField(max_length=5)),
                ('status', models.CharField(choices=[('SCHEDULED', 'Scheduled'), ('IN_PROGRESS', 'In Progress'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], db_index=True, default='SCHEDULED', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assistant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assisted_trips', to=settings.AUTH_USER_MODEL)),
                ('bus', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='trips', to='coopbus_main_app.bus')),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='driven_trips', to=settings.AUTH_USER_MODEL)),
                ('frequency', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='trips', to='coopbus_main_app.frequency')),
            ],
            options={
                'ordering': ['date', 'departure_time'],
                'indexes': [
                    models.Index(fields=['bus', 'date', 'departure_time'], name='trip_bus_date_time_idx'),
                    models.Index(fields=['driver', 'date'], name='trip_driver_date_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status', 'CANCELLED'), _negated=True), fields=('frequency', 'date', 'bus'), name='unique_active_trip_slot'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Ticket',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('passenger_name', models.CharField(blank=True, max_length=150)),
                ('passenger_id_number', models.CharField(blank=True, max_length=20)),
                ('passenger_phone', models.CharField(blank=True, max_length=20, null=True)),
                ('passenger_email', models.EmailField(blank=True, max_length=254, null=True)),
                ('seat_number', models.PositiveIntegerField()),
                ('seat_type', models.CharField(choices=[('NORMAL', 'Normal'), ('VIP', 'VIP'), ('PREMIUM', 'Premium')], default='NORMAL', max_length=10)),
                ('boarding_stop', models.CharField(max_length=100)),
                ('dropoff_stop', models.CharField(max_length=100)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('seat_premium', models.DecimalField(decimal_places=2, default=0, max_digits=10)),
                ('total_price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('status', models.CharField(choices=[('RESERVED', 'Reserved'), ('PENDING_PAYMENT', 'Pending Payment'), ('PAID', 'Paid'), ('USED', 'Used'), ('CANCELLED', 'Cancelled')], default='RESERVED', max_length=20)),
                ('payment_method', models.CharField(choices=[('CASH', 'Cash'), ('PAYPAL', 'PayPal'), ('BANK_TRANSFER', 'Bank Transfer')], default='CASH', max_length=20)),
                ('payment_status', models.CharField(choices=[('PENDING', 'Pending'), ('APPROVED', 'Approved'), ('REJECTED', 'Rejected')], default='PENDING', max_length=10)),
                ('qr_code', models.CharField(max_length=64, unique=True)),
                ('is_used', models.BooleanField(default=False)),
                ('used_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('trip', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='tickets', to='coopbus_main_app.trip')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tickets', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['seat_number'],
                'indexes': [models.Index(fields=['trip', 'status'], name='ticket_trip_status_idx')],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['RESERVED', 'PAID', 'USED'])), fields=('trip', 'seat_number'), name='unique_held_seat'),
                ],
            },
        ),
    ]
