"""Trip-related models"""
import uuid

from django.db import models
from django.db.models import Q
from django.contrib.auth.models import User

from ..utils.constants import TripStatus
from ..utils.schedule_utils import departure_datetime, arrival_datetime


class Trip(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    frequency = models.ForeignKey('Frequency', on_delete=models.PROTECT, related_name='trips')
    bus = models.ForeignKey('Bus', on_delete=models.PROTECT, related_name='trips')
    date = models.DateField(db_index=True)
    departure_time = models.CharField(max_length=5)
    driver = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='driven_trips')
    assistant = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='assisted_trips')
    status = models.CharField(max_length=20, choices=TripStatus.CHOICES, default=TripStatus.SCHEDULED, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date', 'departure_time']
        constraints = [
            models.UniqueConstraint(
                fields=['frequency', 'date', 'bus'],
                condition=~Q(status='CANCELLED'),
                name='unique_active_trip_slot',
            ),
        ]
        indexes = [
            models.Index(fields=['bus', 'date', 'departure_time'], name='trip_bus_date_time_idx'),
            models.Index(fields=['driver', 'date'], name='trip_driver_date_idx'),
        ]

    def __str__(self):
        return f"{self.frequency.route} ({self.date} {self.departure_time})"

    @property
    def departure_at(self):
        return departure_datetime(self.date, self.departure_time)

    @property
    def arrival_at(self):
        return arrival_datetime(self.date, self.departure_time, self.frequency.route.estimated_duration)
