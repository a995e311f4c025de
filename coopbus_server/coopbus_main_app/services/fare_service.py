"""Fare service - segment fares with seat-class premium"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from ..utils.constants import SeatType, BusinessRules
from .exceptions import ValidationError


@dataclass(frozen=True)
class FareQuote:
    base_price: Decimal
    seat_premium: Decimal
    total_price: Decimal

    def to_dict(self):
        return {
            'base_price': str(self.base_price),
            'seat_premium': str(self.seat_premium),
            'total_price': str(self.total_price),
        }


def quantize(amount):
    return Decimal(amount).quantize(BusinessRules.CURRENCY_PRECISION, rounding=ROUND_HALF_UP)


def stop_positions(route):
    """
    Map each stop name on the route to (position, price from origin)

    Origin sits at position 0 with price 0 and destination after the last
    intermediate stop at the route's base price.
    """
    positions = {route.origin: (0, Decimal('0'))}
    for index, stop in enumerate(route.ordered_stops(), start=1):
        positions.setdefault(stop.name, (index, stop.price_from_origin))
    positions.setdefault(route.destination, (len(positions), route.base_price))
    return positions


def compute_fare(route, boarding_stop, dropoff_stop, seat_type=SeatType.NORMAL):
    """
    Fare between two stops of a route

    Raises:
        ValidationError: unknown stop or seat type, dropoff not after boarding,
            or a segment whose fare is not positive
    """
    if seat_type not in SeatType.PREMIUM_RATES:
        raise ValidationError(f'Invalid seat type "{seat_type}"')

    positions = stop_positions(route)
    if boarding_stop not in positions:
        raise ValidationError(f'Boarding stop "{boarding_stop}" is not on this route')
    if dropoff_stop not in positions:
        raise ValidationError(f'Dropoff stop "{dropoff_stop}" is not on this route')

    boarding_index, boarding_price = positions[boarding_stop]
    dropoff_index, dropoff_price = positions[dropoff_stop]
    if dropoff_index <= boarding_index:
        raise ValidationError('Dropoff stop must come after boarding stop')

    base = quantize(dropoff_price - boarding_price)
    if base <= 0:
        raise ValidationError(f'Route fares do not increase between {boarding_stop} and {dropoff_stop}')
    premium = quantize(base * SeatType.PREMIUM_RATES[seat_type])
    return FareQuote(base_price=base, seat_premium=premium, total_price=quantize(base + premium))
