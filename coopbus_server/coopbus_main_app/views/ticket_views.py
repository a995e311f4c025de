"""Ticket and seat views"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..models import Ticket, Trip
from ..permissions import IsCooperativeStaff, IsBoardingStaff
from ..serializers import (
    TicketSerializer, SeatRequestSerializer, SeatBookingSerializer, FareQuoteQuerySerializer, BoardingSerializer,
)
from ..services import SeatService, SeatHoldService, ServiceError, NotFoundError, compute_fare
from ..utils.constants import UserRole, SeatType
from ..utils.tenant_utils import get_profile
from .base import CooperativeScopedMixin, service_error_response, UUID_LOOKUP_REGEX


class TicketViewSet(CooperativeScopedMixin, viewsets.ReadOnlyModelViewSet):
    """Seat reservation, sale, payment, boarding and cancellation"""
    serializer_class = TicketSerializer
    authentication_classes = [JWTAuthentication]
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_permissions(self):
        if self.action in ['sell', 'confirm_payment']:
            return [IsAuthenticated(), IsCooperativeStaff()]
        if self.action in ['validate_boarding']:
            return [IsAuthenticated(), IsBoardingStaff()]
        return [IsAuthenticated()]

    def is_client(self):
        profile = get_profile(self.request.user)
        return profile is None or profile.role == UserRole.CLIENT

    def client_scope(self):
        """Customers book across cooperatives; staff stay inside their own"""
        return None if self.is_client() else self.get_cooperative()

    def get_queryset(self):
        queryset = Ticket.objects.select_related('trip')
        if self.is_client():
            return queryset.filter(user=self.request.user)
        queryset = self.scope_queryset(queryset, 'trip__frequency__cooperative')
        trip_id = self.request.query_params.get('trip')
        if trip_id:
            queryset = queryset.filter(trip_id=trip_id)
        return queryset

    @action(detail=False, methods=['post'])
    def reserve(self, request):
        serializer = SeatBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            ticket = SeatService().reserve_seat(
                data['trip'],
                data['seat_number'],
                boarding_stop=data.get('boarding_stop') or None,
                dropoff_stop=data.get('dropoff_stop') or None,
                user=request.user,
                passenger=serializer.passenger(),
                cooperative=self.client_scope(),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TicketSerializer(ticket).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def sell(self, request):
        serializer = SeatBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            ticket = SeatService().sell_ticket(
                data['trip'],
                data['seat_number'],
                payment_method=data['payment_method'],
                boarding_stop=data.get('boarding_stop') or None,
                dropoff_stop=data.get('dropoff_stop') or None,
                user=request.user,
                passenger=serializer.passenger(),
                cooperative=self.get_cooperative(),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TicketSerializer(ticket).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'])
    def hold(self, request):
        """Advisory hold broadcast to other viewers of the seat map"""
        serializer = SeatRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            expires_at = SeatService().hold_seat(
                data['trip'], data['seat_number'], holder=request.user.id, cooperative=self.client_scope()
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response({'trip': data['trip'], 'seat_number': data['seat_number'], 'held_until': expires_at})

    @action(detail=False, methods=['post'], url_path='release-hold')
    def release_hold(self, request):
        serializer = SeatRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        released = SeatHoldService().release_seat(data['trip'], data['seat_number'], holder=request.user.id)
        return Response({'released': released})

    @action(detail=False, methods=['get'], url_path='fare-quote')
    def fare_quote(self, request):
        serializer = FareQuoteQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            trip = Trip.objects.select_related('frequency__route', 'bus').get(id=data['trip'])
        except Trip.DoesNotExist:
            return service_error_response(NotFoundError('Trip not found'))

        route = trip.frequency.route
        seat_type = data.get('seat_type') or SeatType.NORMAL

        try:
            if data.get('seat_number'):
                seat_type = SeatService().seat_type(trip.bus, data['seat_number'])
            quote = compute_fare(
                route,
                data.get('boarding_stop') or route.origin,
                data.get('dropoff_stop') or route.destination,
                seat_type,
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response({**quote.to_dict(), 'seat_type': seat_type})

    @action(detail=False, methods=['post'], url_path='validate-boarding')
    def validate_boarding(self, request):
        serializer = BoardingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            ticket = SeatService().validate_boarding(
                data['qr_code'], trip_id=data.get('trip'), cooperative=self.get_cooperative()
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response({'message': 'Ticket validated', 'ticket': TicketSerializer(ticket).data})

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        try:
            ticket = SeatService().cancel_ticket(
                pk,
                user=request.user if self.is_client() else None,
                cooperative=self.client_scope(),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TicketSerializer(ticket).data)

    @action(detail=True, methods=['post'], url_path='confirm-payment')
    def confirm_payment(self, request, pk=None):
        try:
            ticket = SeatService().confirm_payment(pk, cooperative=self.get_cooperative())
        except ServiceError as e:
            return service_error_response(e)

        return Response(TicketSerializer(ticket).data)
