"""Route models (schedule template store)"""
import uuid

from django.db import models
from django.core.exceptions import ValidationError


class Route(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cooperative = models.ForeignKey('Cooperative', on_delete=models.PROTECT, related_name='routes')
    name = models.CharField(max_length=150, blank=True)
    origin = models.CharField(max_length=100)
    destination = models.CharField(max_length=100)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    estimated_duration = models.PositiveIntegerField(help_text='Minutes from origin to destination')
    distance = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['cooperative', 'origin', 'destination'], name='route_coop_od_idx'),
        ]

    def __str__(self):
        return f"{self.origin} → {self.destination}"

    def ordered_stops(self):
        return list(self.stops.order_by('order'))

    def clean(self):
        stops = [] if self._state.adding else self.ordered_stops()
        orders = [stop.order for stop in stops]
        if any(later <= earlier for earlier, later in zip(orders, orders[1:])):
            raise ValidationError("Stop orders must be strictly increasing")
        prices = [stop.price_from_origin for stop in stops] + [self.base_price]
        if any(later <= earlier for earlier, later in zip(prices, prices[1:])):
            raise ValidationError("Stop fares must increase along the route and stay below the base price")


class RouteStop(models.Model):
    route = models.ForeignKey(Route, on_delete=models.CASCADE, related_name='stops')
    name = models.CharField(max_length=100)
    order = models.PositiveIntegerField()
    price_from_origin = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ['order']
        unique_together = ['route', 'order']

    def __str__(self):
        return f"{self.route} - Stop {self.order}: {self.name}"

    def clean(self):
        if not self.route_id or self.price_from_origin is None or self.order is None:
            return
        if self.price_from_origin <= 0:
            raise ValidationError("Stop fare must be positive")
        if self.price_from_origin >= self.route.base_price:
            raise ValidationError("Stop fare must be below the route's base price")

        siblings = self.route.stops.exclude(pk=self.pk)
        if siblings.filter(order=self.order).exists():
            raise ValidationError("Another stop already uses this order")
        if siblings.filter(order__lt=self.order, price_from_origin__gte=self.price_from_origin).exists():
            raise ValidationError("Stop fare must be higher than every earlier stop")
        if siblings.filter(order__gt=self.order, price_from_origin__lte=self.price_from_origin).exists():
            raise ValidationError("Stop fare must be lower than every later stop")
