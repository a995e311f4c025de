"""Seat service - exclusive seat booking, payment, boarding and manifests"""
import logging
import secrets

from django.db import IntegrityError, transaction
from django.utils import timezone

from ..models import Trip, Ticket
from ..signals import seat_sold, seat_released
from ..utils.constants import TicketStatus, TripStatus, SeatType, PaymentMethod, PaymentStatus, BusinessRules
from .exceptions import ValidationError, SeatUnavailableError, NotFoundError, UnauthorizedScopeError
from .fare_service import compute_fare
from .seat_hold_service import SeatHoldService

logger = logging.getLogger(__name__)

PASSENGER_FIELDS = ['passenger_name', 'passenger_id_number', 'passenger_phone', 'passenger_email']


class SeatService:
    """Service for seat inventory operations"""

    def __init__(self, hold_service=None):
        self.holds = hold_service or SeatHoldService()

    def reserve_seat(self, trip_id, seat_number, boarding_stop=None, dropoff_stop=None,
                     user=None, passenger=None, cooperative=None):
        """
        Reserve a seat without payment

        Returns:
            Ticket in RESERVED status

        Raises:
            SeatUnavailableError: seat already held by another ticket
        """
        return self._book(
            trip_id, seat_number, boarding_stop, dropoff_stop, user, passenger, cooperative,
            status=TicketStatus.RESERVED,
            payment_method=PaymentMethod.CASH,
            payment_status=PaymentStatus.PENDING,
        )

    def sell_ticket(self, trip_id, seat_number, payment_method=PaymentMethod.CASH, boarding_stop=None,
                    dropoff_stop=None, user=None, passenger=None, cooperative=None):
        """Sell a seat; cash is settled on the spot, other methods wait for confirmation"""
        if payment_method not in dict(PaymentMethod.CHOICES):
            raise ValidationError(f'Invalid payment method "{payment_method}"')

        if payment_method == PaymentMethod.CASH:
            status, payment_status = TicketStatus.PAID, PaymentStatus.APPROVED
        else:
            status, payment_status = TicketStatus.PENDING_PAYMENT, PaymentStatus.PENDING

        return self._book(
            trip_id, seat_number, boarding_stop, dropoff_stop, user, passenger, cooperative,
            status=status,
            payment_method=payment_method,
            payment_status=payment_status,
        )

    @transaction.atomic
    def _book(self, trip_id, seat_number, boarding_stop, dropoff_stop, user, passenger, cooperative,
              status, payment_method, payment_status):
        trip = self._lock_trip(trip_id, cooperative)
        if trip.status in (TripStatus.CANCELLED, TripStatus.COMPLETED):
            raise ValidationError(f'Cannot sell seats on a {trip.status.lower()} trip')

        seat_type = self.seat_type(trip.bus, seat_number)
        route = trip.frequency.route
        boarding_stop = boarding_stop or route.origin
        dropoff_stop = dropoff_stop or route.destination
        fare = compute_fare(route, boarding_stop, dropoff_stop, seat_type)

        self._ensure_seat_free(trip, seat_number)

        passenger = passenger or {}
        try:
            with transaction.atomic():
                ticket = Ticket.objects.create(
                    trip=trip,
                    user=user,
                    seat_number=seat_number,
                    seat_type=seat_type,
                    boarding_stop=boarding_stop,
                    dropoff_stop=dropoff_stop,
                    base_price=fare.base_price,
                    seat_premium=fare.seat_premium,
                    total_price=fare.total_price,
                    status=status,
                    payment_method=payment_method,
                    payment_status=payment_status,
                    qr_code=secrets.token_hex(BusinessRules.QR_TOKEN_BYTES),
                    **{field: passenger.get(field) or '' for field in PASSENGER_FIELDS},
                )
        except IntegrityError:
            logger.warning(f'[SEATS] Seat {seat_number} on trip {trip.id} taken concurrently')
            raise SeatUnavailableError(seat_number)

        logger.info(
            f'[SEATS] Ticket {ticket.id}: seat {seat_number} on trip {trip.id} '
            f'{boarding_stop} -> {dropoff_stop} {fare.total_price} ({status})'
        )
        transaction.on_commit(lambda: self._announce_sold(trip.id, seat_number))
        return ticket

    def _announce_sold(self, trip_id, seat_number):
        self.holds.clear_hold(trip_id, seat_number)
        seat_sold.send(sender=self.__class__, trip_id=trip_id, seat_number=seat_number)

    def hold_seat(self, trip_id, seat_number, holder, cooperative=None):
        """
        Place an advisory hold on a seat that exists on the bus and is not sold

        Raises:
            NotFoundError: unknown trip
            ValidationError: seat not on the bus layout
            SeatUnavailableError: seat already held by a ticket
            ResourceUnavailableError: seat held by another customer
        """
        trip = self._get_trip(trip_id, cooperative)
        self.seat_type(trip.bus, seat_number)
        self._ensure_seat_free(trip, seat_number)
        return self.holds.hold_seat(trip.id, seat_number, holder)

    def seat_type(self, bus, seat_number):
        """Type of a seat on the bus layout; unknown numbers are rejected"""
        seat = bus.get_seat(seat_number)
        if seat is None:
            raise ValidationError(f'Invalid seat {seat_number}')
        return seat.get('type') or SeatType.NORMAL

    @transaction.atomic
    def confirm_payment(self, ticket_id, cooperative=None):
        """Settle a RESERVED or PENDING_PAYMENT ticket"""
        ticket = self._lock_ticket(ticket_id, cooperative)
        self._check_transition(ticket, TicketStatus.PAID)

        # PENDING_PAYMENT does not hold the seat, someone else may have taken it
        if ticket.status == TicketStatus.PENDING_PAYMENT:
            trip = self._lock_trip(ticket.trip_id, cooperative)
            self._ensure_seat_free(trip, ticket.seat_number, exclude_ticket_id=ticket.id)

        ticket.status = TicketStatus.PAID
        ticket.payment_status = PaymentStatus.APPROVED
        try:
            with transaction.atomic():
                ticket.save(update_fields=['status', 'payment_status'])
        except IntegrityError:
            raise SeatUnavailableError(ticket.seat_number)

        logger.info(f'[SEATS] Payment confirmed for ticket {ticket.id}')
        return ticket

    @transaction.atomic
    def validate_boarding(self, qr_code, trip_id=None, cooperative=None):
        """Check a passenger in by QR token and mark the ticket USED"""
        if not qr_code:
            raise ValidationError('QR code is required')

        try:
            ticket = Ticket.objects.select_for_update().select_related(
                'trip__frequency__route', 'trip__bus'
            ).get(qr_code=qr_code)
        except Ticket.DoesNotExist:
            raise NotFoundError('Invalid ticket')

        if cooperative is not None and ticket.trip.frequency.cooperative_id != cooperative.id:
            raise UnauthorizedScopeError('No access to this ticket')
        if trip_id and str(ticket.trip_id) != str(trip_id):
            raise ValidationError('This ticket does not belong to this trip')
        if ticket.is_used:
            raise ValidationError('This ticket has already been used')
        if ticket.status != TicketStatus.PAID:
            raise ValidationError(f'Ticket not valid. Status: {ticket.status}')
        if ticket.trip.date != timezone.localdate():
            raise ValidationError('This ticket is not for today')

        ticket.status = TicketStatus.USED
        ticket.is_used = True
        ticket.used_at = timezone.now()
        ticket.save(update_fields=['status', 'is_used', 'used_at'])

        logger.info(f'[SEATS] Boarded ticket {ticket.id} seat {ticket.seat_number} on trip {ticket.trip_id}')
        return ticket

    @transaction.atomic
    def cancel_ticket(self, ticket_id, user=None, cooperative=None):
        """Release a seat; clients may only cancel their own tickets"""
        ticket = self._lock_ticket(ticket_id, cooperative)
        if user is not None and ticket.user_id != user.id:
            raise UnauthorizedScopeError('You cannot cancel this ticket')
        self._check_transition(ticket, TicketStatus.CANCELLED)
        if ticket.trip.date < timezone.localdate():
            raise ValidationError('Cannot cancel a ticket for a past trip')

        ticket.status = TicketStatus.CANCELLED
        ticket.cancelled_at = timezone.now()
        ticket.save(update_fields=['status', 'cancelled_at'])

        logger.info(f'[SEATS] Cancelled ticket {ticket.id}, seat {ticket.seat_number} released')
        trip_id, seat_number = ticket.trip_id, ticket.seat_number
        transaction.on_commit(
            lambda: seat_released.send(sender=self.__class__, trip_id=trip_id, seat_number=seat_number)
        )
        return ticket

    def get_seat_map(self, trip_id, cooperative=None):
        trip = self._get_trip(trip_id, cooperative)
        layout = trip.bus.seat_layout or {}
        occupied = set(
            trip.tickets.filter(status__in=TicketStatus.SEAT_HOLDING).values_list('seat_number', flat=True)
        )
        held = self.holds.get_holds(trip.id)

        seats = []
        for seat in trip.bus.layout_seats():
            number = seat.get('number')
            seats.append({
                **seat,
                'status': 'OCCUPIED' if number in occupied else 'AVAILABLE',
                'held_until': held[number]['expires_at'] if number in held and number not in occupied else None,
            })

        return {
            'trip_id': str(trip.id),
            'rows': layout.get('rows'),
            'columns': layout.get('columns'),
            'seats': seats,
            'occupied_seats': sorted(occupied),
        }

    def get_passenger_manifest(self, trip_id, boarding_stop=None, cooperative=None):
        trip = self._get_trip(trip_id, cooperative)
        tickets = trip.tickets.filter(status__in=TicketStatus.MANIFEST)
        if boarding_stop:
            tickets = tickets.filter(boarding_stop=boarding_stop)
        tickets = list(tickets.order_by('seat_number'))

        route = trip.frequency.route
        bus = trip.bus
        return {
            'trip': {
                'id': str(trip.id),
                'route': f'{route.origin} - {route.destination}',
                'date': trip.date.isoformat(),
                'departure_time': trip.departure_time,
                'bus': f'{bus.brand} {bus.model} - {bus.plate}'.strip(),
                'cooperative': trip.frequency.cooperative.name,
            },
            'passengers': [
                {
                    'seat_number': ticket.seat_number,
                    'name': ticket.passenger_name,
                    'id_number': ticket.passenger_id_number,
                    'phone': ticket.passenger_phone,
                    'boarding_stop': ticket.boarding_stop,
                    'dropoff_stop': ticket.dropoff_stop,
                    'status': ticket.status,
                    'is_used': ticket.is_used,
                }
                for ticket in tickets
            ],
            'summary': {
                'total_tickets': len(tickets),
                'total_used': sum(1 for ticket in tickets if ticket.is_used),
                'total_pending': sum(1 for ticket in tickets if not ticket.is_used),
            },
        }

    def _ensure_seat_free(self, trip, seat_number, exclude_ticket_id=None):
        taken = Ticket.objects.filter(trip=trip, seat_number=seat_number, status__in=TicketStatus.SEAT_HOLDING)
        if exclude_ticket_id:
            taken = taken.exclude(id=exclude_ticket_id)
        if taken.exists():
            logger.info(f'[SEATS] Seat {seat_number} on trip {trip.id} unavailable')
            raise SeatUnavailableError(seat_number)

    def _check_transition(self, ticket, status):
        if status not in TicketStatus.TRANSITIONS[ticket.status]:
            raise ValidationError(f'Cannot change ticket status from {ticket.status} to {status}')

    def _lock_trip(self, trip_id, cooperative):
        try:
            trip = Trip.objects.select_for_update().select_related('frequency__route', 'bus').get(id=trip_id)
        except Trip.DoesNotExist:
            raise NotFoundError('Trip not found')
        self._check_scope(trip, cooperative)
        return trip

    def _get_trip(self, trip_id, cooperative):
        try:
            trip = Trip.objects.select_related('frequency__route', 'frequency__cooperative', 'bus').get(id=trip_id)
        except Trip.DoesNotExist:
            raise NotFoundError('Trip not found')
        self._check_scope(trip, cooperative)
        return trip

    def _lock_ticket(self, ticket_id, cooperative):
        try:
            ticket = Ticket.objects.select_for_update().select_related('trip__frequency').get(id=ticket_id)
        except Ticket.DoesNotExist:
            raise NotFoundError('Ticket not found')
        self._check_scope(ticket.trip, cooperative)
        return ticket

    def _check_scope(self, trip, cooperative):
        if cooperative is not None and trip.frequency.cooperative_id != cooperative.id:
            raise UnauthorizedScopeError('No access to this trip')
