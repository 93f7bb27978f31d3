from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Job',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reference', models.CharField(db_index=True, max_length=32)),
                ('sequence', models.PositiveIntegerField(unique=True)),
                ('phase', models.CharField(choices=[('DRAFT', 'Draft'), ('INTAKE', 'Intake'), ('MARKET', 'Market'), ('QUOTES', 'Quotes'), ('AWARDED', 'Awarded'), ('SHIPMENT', 'Shipment'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled')], default='DRAFT', max_length=16)),
                ('modality', models.CharField(choices=[('SEA', 'Sea'), ('AIR', 'Air'), ('COURIER', 'Courier'), ('ROAD', 'Road')], default='SEA', max_length=16)),
                ('intake_data', models.JSONField(blank=True, default=dict)),
                ('completeness_score', models.PositiveSmallIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['phase', '-updated_at'], name='jobs_job_phase_6b1f0c_idx')],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('user_name', models.CharField(blank=True, default='', max_length=150)),
                ('action', models.CharField(max_length=32)),
                ('entity_type', models.CharField(max_length=32)),
                ('entity_id', models.CharField(max_length=64)),
                ('changes', models.TextField(blank=True, default='')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-timestamp'],
                'indexes': [models.Index(fields=['entity_type', 'entity_id'], name='jobs_auditl_entity__3c9d2e_idx')],
            },
        ),
        migrations.CreateModel(
            name='VendorBid',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('vendor_name', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('transit_time_days', models.PositiveIntegerField(blank=True, null=True)),
                ('validity_date', models.DateField(blank=True, null=True)),
                ('free_time_days', models.PositiveIntegerField(default=14)),
                ('received_via', models.CharField(choices=[('PORTAL', 'Portal'), ('EMAIL', 'Email'), ('WHATSAPP', 'WhatsApp'), ('PHONE', 'Phone'), ('MANUAL', 'Manual')], default='MANUAL', max_length=10)),
                ('received_at', models.DateTimeField(auto_now_add=True)),
                ('is_awarded', models.BooleanField(default=False)),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='vendor_bids', to='jobs.job')),
            ],
            options={
                'ordering': ['amount'],
            },
        ),
        migrations.CreateModel(
            name='QuoteVersion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('version_no', models.PositiveIntegerField()),
                ('buy_price', models.DecimalField(decimal_places=2, max_digits=14)),
                ('sell_price', models.DecimalField(decimal_places=2, max_digits=14)),
                ('margin_pct', models.DecimalField(decimal_places=2, max_digits=7)),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('valid_until', models.DateField(blank=True, null=True)),
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('PENDING_APPROVAL', 'Pending approval'), ('SENT', 'Sent'), ('ACCEPTED', 'Accepted'), ('REJECTED', 'Rejected')], default='DRAFT', max_length=20)),
                ('buy_source', models.CharField(blank=True, default='', max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('job', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quote_versions', to='jobs.job')),
            ],
            options={
                'ordering': ['-version_no'],
                'unique_together': {('job', 'version_no')},
            },
        ),
    ]
