from django.conf import settings
from django.db import models

from cargo.dataclasses import IntakeData
from cargo.types import JobPhase, Modality


class Job(models.Model):
    PHASE_CHOICES = [(p.value, p.value.title()) for p in JobPhase]
    MODALITY_CHOICES = [(m.value, m.value.title()) for m in Modality]

    reference = models.CharField(max_length=32, db_index=True)
    sequence = models.PositiveIntegerField(unique=True)
    phase = models.CharField(max_length=16, choices=PHASE_CHOICES, default=JobPhase.DRAFT.value)
    modality = models.CharField(max_length=16, choices=MODALITY_CHOICES, default=Modality.SEA.value)
    intake_data = models.JSONField(default=dict, blank=True)
    completeness_score = models.PositiveSmallIntegerField(default=0)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['phase', '-updated_at'], name='jobs_job_phase_6b1f0c_idx'),
        ]

    def __str__(self):
        return self.reference

    @property
    def intake(self) -> IntakeData:
        data = dict(self.intake_data or {})
        if not data.get("modality"):
            data["modality"] = self.modality
        return IntakeData.from_dict(data)

    def set_intake(self, intake: IntakeData) -> None:
        # Intake is replaced wholesale on every edit
        self.intake_data = intake.to_dict()
        if intake.modality:
            self.modality = intake.modality.value


class QuoteVersion(models.Model):
    STATUS_CHOICES = [
        ('DRAFT', 'Draft'),
        ('PENDING_APPROVAL', 'Pending approval'),
        ('SENT', 'Sent'),
        ('ACCEPTED', 'Accepted'),
        ('REJECTED', 'Rejected'),
    ]

    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='quote_versions')
    version_no = models.PositiveIntegerField()
    buy_price = models.DecimalField(max_digits=14, decimal_places=2)
    sell_price = models.DecimalField(max_digits=14, decimal_places=2)
    margin_pct = models.DecimalField(max_digits=7, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    valid_until = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    buy_source = models.CharField(max_length=255, blank=True, default='')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = [('job', 'version_no')]
        ordering = ['-version_no']

    def __str__(self):
        return f"{self.job_id} v{self.version_no}"


class VendorBid(models.Model):
    RECEIVED_VIA_CHOICES = [
        ('PORTAL', 'Portal'),
        ('EMAIL', 'Email'),
        ('WHATSAPP', 'WhatsApp'),
        ('PHONE', 'Phone'),
        ('MANUAL', 'Manual'),
    ]

    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='vendor_bids')
    vendor = models.ForeignKey('crm.Vendor', null=True, blank=True, on_delete=models.SET_NULL, related_name='bids')
    vendor_name = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    currency = models.CharField(max_length=3, default='USD')
    transit_time_days = models.PositiveIntegerField(null=True, blank=True)
    validity_date = models.DateField(null=True, blank=True)
    free_time_days = models.PositiveIntegerField(default=14)
    received_via = models.CharField(max_length=10, choices=RECEIVED_VIA_CHOICES, default='MANUAL')
    received_at = models.DateTimeField(auto_now_add=True)
    is_awarded = models.BooleanField(default=False)

    class Meta:
        ordering = ['amount']

    def __str__(self):
        return f"{self.vendor_name} {self.amount} {self.currency}"


class AuditLog(models.Model):
    timestamp = models.DateTimeField(auto_now_add=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    user_name = models.CharField(max_length=150, blank=True, default='')
    action = models.CharField(max_length=32)
    entity_type = models.CharField(max_length=32)
    entity_id = models.CharField(max_length=64)
    changes = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='jobs_auditl_entity__3c9d2e_idx'),
        ]

    def __str__(self):
        return f"{self.action} {self.entity_type}:{self.entity_id}"
