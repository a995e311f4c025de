"""Fleet-related models (BusGroup, Bus)"""
import uuid

from django.db import models

from ..utils.constants import BusStatus, SeatType


class BusGroup(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cooperative = models.ForeignKey('Cooperative', on_delete=models.PROTECT, related_name='bus_groups')
    name = models.CharField(max_length=100)
    description = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['cooperative', 'name']

    def __str__(self):
        return self.name

    def active_buses(self):
        """Pool used by the generator: ACTIVE members ordered by internal number"""
        return list(self.buses.filter(status=BusStatus.ACTIVE).order_by('internal_number'))


class Bus(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cooperative = models.ForeignKey('Cooperative', on_delete=models.PROTECT, related_name='buses')
    group = models.ForeignKey(BusGroup, on_delete=models.SET_NULL, null=True, blank=True, related_name='buses')
    internal_number = models.PositiveIntegerField()
    plate = models.CharField(max_length=10, unique=True)
    brand = models.CharField(max_length=50, blank=True)
    model = models.CharField(max_length=50, blank=True)
    total_seats = models.PositiveIntegerField()
    seat_layout = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=15, choices=BusStatus.CHOICES, default=BusStatus.ACTIVE)
    has_ac = models.BooleanField(default=False)
    has_wifi = models.BooleanField(default=False)
    has_bathroom = models.BooleanField(default=False)

    class Meta:
        unique_together = ['cooperative', 'internal_number']
        indexes = [
            models.Index(fields=['group', 'status'], name='bus_group_status_idx'),
        ]

    def __str__(self):
        return f"#{self.internal_number} - {self.plate}"

    def layout_seats(self):
        """Seats drawn in the layout, or 1..total_seats as NORMAL when none are drawn"""
        seats = (self.seat_layout or {}).get('seats')
        if seats:
            return seats
        return [{'number': number, 'type': SeatType.NORMAL} for number in range(1, self.total_seats + 1)]

    def get_seat(self, seat_number):
        for seat in self.layout_seats():
            if seat.get('number') == seat_number:
                return seat
        return None
