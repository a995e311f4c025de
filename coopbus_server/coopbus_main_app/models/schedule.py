"""Recurring schedule template (Frequency)"""
import uuid

from django.db import models
from django.core.validators import RegexValidator

from ..utils.schedule_utils import DEPARTURE_TIME_REGEX


class Frequency(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cooperative = models.ForeignKey('Cooperative', on_delete=models.PROTECT, related_name='frequencies')
    route = models.ForeignKey('Route', on_delete=models.PROTECT, related_name='frequencies')
    bus_group = models.ForeignKey('BusGroup', on_delete=models.SET_NULL, null=True, blank=True, related_name='frequencies')
    departure_time = models.CharField(
        max_length=5,
        validators=[RegexValidator(DEPARTURE_TIME_REGEX, 'Invalid time format (HH:MM)')]
    )
    operating_days = models.JSONField(default=list)
    permit_number = models.CharField(max_length=50, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['departure_time']
        indexes = [
            models.Index(fields=['bus_group', 'is_active'], name='freq_group_active_idx'),
            models.Index(fields=['cooperative', 'is_active'], name='freq_coop_active_idx'),
        ]

    def __str__(self):
        return f"{self.route} @ {self.departure_time}"
