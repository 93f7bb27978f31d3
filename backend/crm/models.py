from django.db import models

from cargo.types import Modality


class Customer(models.Model):
    TIER_CHOICES = [
        ('REGULAR', 'Regular'),
        ('VIP', 'VIP'),
    ]

    # Shipper/consignee ids on a job's intake refer to this code
    code = models.CharField(max_length=32, unique=True)
    company_name = models.CharField(max_length=255)
    tier = models.CharField(max_length=10, choices=TIER_CHOICES, default='REGULAR')
    contact_name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=64, blank=True, default='')
    address = models.TextField(blank=True, default='')
    notes = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['company_name']

    def __str__(self):
        return f"{self.code} {self.company_name}"


class Vendor(models.Model):
    TIER_CHOICES = [
        ('STANDARD', 'Standard'),
        ('PREMIUM', 'Premium'),
    ]

    name = models.CharField(max_length=255, unique=True)
    tier = models.CharField(max_length=10, choices=TIER_CHOICES, default='STANDARD')
    # Modality values the vendor quotes for, e.g. ["AIR", "SEA"]
    capabilities = models.JSONField(default=list, blank=True)
    # Lanes as "ORIGIN-DESTINATION" strings, e.g. "DXB-LHR"
    lanes = models.JSONField(default=list, blank=True)
    api_ready = models.BooleanField(default=False)
    contract_expiry = models.DateField(null=True, blank=True)
    contact_name = models.CharField(max_length=255, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    phone = models.CharField(max_length=64, blank=True, default='')

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def serves(self, modality=None, origin: str = "", destination: str = "") -> bool:
        """True when the vendor covers the modality and, if it lists lanes, the lane."""
        if modality and self.capabilities:
            mode = modality.value if isinstance(modality, Modality) else str(modality).upper()
            if mode not in [str(c).upper() for c in self.capabilities]:
                return False
        if origin and destination and self.lanes:
            lane = f"{origin}-{destination}".upper()
            return lane in [str(l).upper() for l in self.lanes]
        return True
