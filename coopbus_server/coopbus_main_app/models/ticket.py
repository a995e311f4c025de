"""Ticket (seat inventory) models"""
import uuid

from django.db import models
from django.db.models import Q
from django.contrib.auth.models import User

from ..utils.constants import TicketStatus, SeatType, PaymentMethod, PaymentStatus


class Ticket(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    trip = models.ForeignKey('Trip', on_delete=models.PROTECT, related_name='tickets')
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='tickets')
    passenger_name = models.CharField(max_length=150, blank=True)
    passenger_id_number = models.CharField(max_length=20, blank=True)
    passenger_phone = models.CharField(max_length=20, null=True, blank=True)
    passenger_email = models.EmailField(null=True, blank=True)
    seat_number = models.PositiveIntegerField()
    seat_type = models.CharField(max_length=10, choices=SeatType.CHOICES, default=SeatType.NORMAL)
    boarding_stop = models.CharField(max_length=100)
    dropoff_stop = models.CharField(max_length=100)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    seat_premium = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=TicketStatus.CHOICES, default=TicketStatus.RESERVED)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.CHOICES, default=PaymentMethod.CASH)
    payment_status = models.CharField(max_length=10, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)
    qr_code = models.CharField(max_length=64, unique=True)
    is_used = models.BooleanField(default=False)
    used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['seat_number']
        constraints = [
            models.UniqueConstraint(
                fields=['trip', 'seat_number'],
                condition=Q(status__in=['RESERVED', 'PAID', 'USED']),
                name='unique_held_seat',
            ),
        ]
        indexes = [
            models.Index(fields=['trip', 'status'], name='ticket_trip_status_idx'),
        ]

    def __str__(self):
        return f"{self.trip} - Seat {self.seat_number} ({self.status})"
