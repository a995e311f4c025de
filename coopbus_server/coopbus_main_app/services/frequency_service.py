"""Frequency service - schedule template lifecycle and slot conflict validation"""
import logging

from django.db import transaction

from ..models import Frequency, Route, BusGroup
from ..utils.constants import Weekday
from ..utils.schedule_utils import is_valid_departure_time
from .exceptions import ConflictError, ValidationError, NotFoundError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ['route', 'bus_group', 'departure_time', 'operating_days', 'permit_number', 'is_active']


class FrequencyService:
    """Service for frequency operations"""

    def validate_frequency(self, bus_group_id, departure_time, operating_days, exclude_id=None):
        """
        Reject a frequency whose departure collides with another active one

        Only frequencies sharing the bus group are compared, and only on the
        exact HH:MM departure string. Route duration is not considered.

        Raises:
            ValidationError: malformed time or weekday names
            ConflictError: same time on at least one shared operating day
        """
        self._validate_shape(departure_time, operating_days)

        if not bus_group_id:
            return

        others = Frequency.objects.filter(
            bus_group_id=bus_group_id,
            is_active=True,
            departure_time=departure_time,
        )
        if exclude_id:
            others = others.exclude(id=exclude_id)

        requested = set(operating_days)
        for other in others:
            shared = requested & set(other.operating_days or [])
            if shared:
                days = [day for day in Weekday.ORDERED if day in shared]
                logger.warning(
                    f'[FREQUENCY] Conflict with {other.id} in group {bus_group_id}: {", ".join(days)} at {departure_time}'
                )
                raise ConflictError(
                    f"Frequency conflict: group already departs at {departure_time} on {', '.join(days)}",
                    days=days,
                    time=departure_time,
                )

    def _validate_shape(self, departure_time, operating_days):
        if not is_valid_departure_time(departure_time):
            raise ValidationError('Invalid time format (HH:MM)')
        if not operating_days:
            raise ValidationError('At least one operating day is required')
        unknown = [day for day in operating_days if day not in Weekday.ORDERED]
        if unknown:
            raise ValidationError(f"Unknown operating days: {', '.join(map(str, unknown))}")

    @transaction.atomic
    def create_frequency(self, cooperative, route_id, departure_time, operating_days,
                         bus_group_id=None, permit_number=None):
        route = self._get_route(cooperative, route_id)
        bus_group = self._get_group(cooperative, bus_group_id) if bus_group_id else None

        self.validate_frequency(bus_group_id, departure_time, operating_days)

        frequency = Frequency.objects.create(
            cooperative=cooperative,
            route=route,
            bus_group=bus_group,
            departure_time=departure_time,
            operating_days=self._ordered_days(operating_days),
            permit_number=permit_number,
        )
        logger.info(f'[FREQUENCY] Created {frequency.id} ({route} @ {departure_time})')
        return frequency

    @transaction.atomic
    def update_frequency(self, frequency_id, cooperative=None, **changes):
        """Apply changes after validating the merged result"""
        frequency = self._get_frequency(frequency_id, cooperative)

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields not editable: {', '.join(sorted(unknown))}")

        if 'route' in changes:
            changes['route'] = self._get_route(frequency.cooperative, changes['route'])
        if 'bus_group' in changes and changes['bus_group'] is not None:
            changes['bus_group'] = self._get_group(frequency.cooperative, changes['bus_group'])

        bus_group = changes.get('bus_group', frequency.bus_group)
        departure_time = changes.get('departure_time', frequency.departure_time)
        operating_days = changes.get('operating_days', frequency.operating_days)
        is_active = changes.get('is_active', frequency.is_active)

        # Inactive frequencies never block, so only validate what will be active
        if is_active:
            self.validate_frequency(
                bus_group.id if bus_group else None,
                departure_time,
                operating_days,
                exclude_id=frequency.id,
            )
        else:
            self._validate_shape(departure_time, operating_days)

        if 'operating_days' in changes:
            changes['operating_days'] = self._ordered_days(changes['operating_days'])

        for field, value in changes.items():
            setattr(frequency, field, value)
        frequency.save()

        logger.info(f'[FREQUENCY] Updated {frequency.id}: {", ".join(sorted(changes))}')
        return frequency

    @transaction.atomic
    def deactivate_frequency(self, frequency_id, cooperative=None):
        """Soft delete; trips keep referencing the row"""
        frequency = self._get_frequency(frequency_id, cooperative)
        frequency.is_active = False
        frequency.save(update_fields=['is_active', 'updated_at'])
        logger.info(f'[FREQUENCY] Deactivated {frequency.id}')
        return frequency

    def _ordered_days(self, days):
        return [day for day in Weekday.ORDERED if day in set(days)]

    def _get_frequency(self, frequency_id, cooperative):
        queryset = Frequency.objects.select_for_update()
        if cooperative is not None:
            queryset = queryset.filter(cooperative=cooperative)
        try:
            return queryset.get(id=frequency_id)
        except Frequency.DoesNotExist:
            raise NotFoundError('Frequency not found')

    def _get_route(self, cooperative, route_id):
        try:
            return Route.objects.get(id=route_id, cooperative=cooperative)
        except Route.DoesNotExist:
            raise NotFoundError('Route not found')

    def _get_group(self, cooperative, bus_group_id):
        try:
            return BusGroup.objects.get(id=bus_group_id, cooperative=cooperative)
        except BusGroup.DoesNotExist:
            raise NotFoundError('Bus group not found')
