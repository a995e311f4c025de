"""Fixture builders shared by the test modules"""
from decimal import Decimal

from django.contrib.auth.models import User

from ..models import Cooperative, Profile, Route, RouteStop, BusGroup, Bus, Frequency
from ..utils.constants import UserRole, Weekday

_counter = {'value': 0}


def _next():
    _counter['value'] += 1
    return _counter['value']


def make_cooperative(name='Coop Andina'):
    n = _next()
    return Cooperative.objects.create(name=f'{name} {n}', ruc=f'1790{n:09d}')


def make_user(cooperative, role, first_name='', last_name=''):
    n = _next()
    user = User.objects.create_user(f'{role}{n}', first_name=first_name, last_name=last_name)
    Profile.objects.create(user=user, cooperative=cooperative, role=role)
    return user


def make_route(cooperative, origin='A', destination='D', base_price='5.00', duration=180, stops=None):
    route = Route.objects.create(
        cooperative=cooperative,
        name=f'{origin} - {destination}',
        origin=origin,
        destination=destination,
        base_price=Decimal(base_price),
        estimated_duration=duration,
    )
    for order, (name, price) in enumerate(stops or [], start=1):
        RouteStop.objects.create(route=route, name=name, order=order, price_from_origin=Decimal(price))
    return route


def make_group(cooperative, name='Group 1'):
    return BusGroup.objects.create(cooperative=cooperative, name=name)


def make_bus(cooperative, group=None, internal_number=None, seats=None):
    n = _next()
    seats = seats or [
        {'number': 1, 'type': 'NORMAL'},
        {'number': 2, 'type': 'NORMAL'},
        {'number': 3, 'type': 'VIP'},
        {'number': 4, 'type': 'PREMIUM'},
    ]
    return Bus.objects.create(
        cooperative=cooperative,
        group=group,
        internal_number=internal_number or n,
        plate=f'PBA-{n:04d}',
        total_seats=len(seats),
        seat_layout={'rows': 2, 'columns': 2, 'seats': seats},
    )


def make_frequency(cooperative, route, group, departure_time='08:00', days=None):
    return Frequency.objects.create(
        cooperative=cooperative,
        route=route,
        bus_group=group,
        departure_time=departure_time,
        operating_days=days or list(Weekday.ORDERED),
    )


def make_driver(cooperative, first_name='Driver', last_name=''):
    return make_user(cooperative, UserRole.DRIVER, first_name=first_name, last_name=last_name)
