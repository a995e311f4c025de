"""Route sheet service - printable per-date, per-bus trip listing for a bus group"""
from collections import OrderedDict

from django.db.models import Count, Q

from ..models import BusGroup, Trip
from ..utils.constants import TicketStatus, TripStatus
from .exceptions import ValidationError, NotFoundError, UnauthorizedScopeError


class RouteSheetService:

    def get_route_sheet(self, bus_group_id, start_date, end_date=None, cooperative=None):
        end_date = end_date or start_date
        if start_date > end_date:
            raise ValidationError('Start date must be on or before end date')

        try:
            group = BusGroup.objects.get(id=bus_group_id)
        except BusGroup.DoesNotExist:
            raise NotFoundError('Bus group not found')
        if cooperative is not None and group.cooperative_id != cooperative.id:
            raise UnauthorizedScopeError('No access to this bus group')

        sheet = {'group_id': str(group.id), 'group_name': group.name, 'dates': []}
        buses = list(group.buses.order_by('internal_number'))
        if not buses:
            return sheet

        trips = Trip.objects.filter(
            bus__in=buses,
            date__gte=start_date,
            date__lte=end_date,
        ).exclude(
            status=TripStatus.CANCELLED
        ).select_related(
            'frequency__route', 'driver', 'assistant'
        ).annotate(
            passengers_count=Count('tickets', filter=Q(tickets__status__in=TicketStatus.ON_BOARD_COUNTED))
        ).order_by('date', 'departure_time')

        # date -> bus_id -> [trip entries]
        grouped = OrderedDict()
        for trip in trips:
            grouped.setdefault(trip.date, {}).setdefault(trip.bus_id, []).append(self._trip_entry(trip))

        bus_order = {bus.id: bus for bus in buses}
        for day, per_bus in grouped.items():
            sheet['dates'].append({
                'date': day.isoformat(),
                'buses': [
                    {
                        'bus': {
                            'id': str(bus.id),
                            'internal_number': bus.internal_number,
                            'plate': bus.plate,
                        },
                        'trips': per_bus[bus.id],
                    }
                    for bus in bus_order.values() if bus.id in per_bus
                ],
            })
        return sheet

    def _trip_entry(self, trip):
        route = trip.frequency.route
        return {
            'id': str(trip.id),
            'departure_time': trip.departure_time,
            'status': trip.status,
            'route': {
                'id': str(route.id),
                'name': route.name,
                'origin': route.origin,
                'destination': route.destination,
                'estimated_duration': route.estimated_duration,
            },
            'passengers_count': trip.passengers_count,
            'driver': self._person(trip.driver),
            'assistant': self._person(trip.assistant),
        }

    def _person(self, user):
        if user is None:
            return None
        return {'id': user.id, 'name': user.get_full_name() or user.username}
