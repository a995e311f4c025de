"""Trip-related views"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..models import Trip
from ..permissions import IsCooperativeAdmin, IsCooperativeStaff, IsBoardingStaff
from ..serializers import (
    TripSerializer, TripCreateSerializer, TripUpdateSerializer, TripStatusSerializer,
    PersonnelSerializer, RouteSheetQuerySerializer, TripSearchQuerySerializer, AvailableDatesQuerySerializer,
)
from ..services import TripAssignmentService, RouteSheetService, SeatService, TripSearchService, ServiceError
from .base import CooperativeScopedMixin, service_error_response, UUID_LOOKUP_REGEX


class TripViewSet(CooperativeScopedMixin, viewsets.ReadOnlyModelViewSet):
    """Trip instances: manual creation, personnel, status and operational sheets"""
    serializer_class = TripSerializer
    authentication_classes = [JWTAuthentication]
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_permissions(self):
        if self.action in ['seats', 'search', 'available_dates']:
            return [IsAuthenticated()]
        if self.action in ['list', 'retrieve', 'manifest']:
            return [IsAuthenticated(), IsBoardingStaff()]
        if self.action in ['route_sheet']:
            return [IsAuthenticated(), IsCooperativeStaff()]
        return [IsAuthenticated(), IsCooperativeAdmin()]

    def get_queryset(self):
        queryset = Trip.objects.select_related('frequency__route', 'bus', 'driver', 'assistant')
        queryset = self.scope_queryset(queryset, 'frequency__cooperative')

        params = self.request.query_params
        if params.get('date'):
            queryset = queryset.filter(date=params['date'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('group'):
            queryset = queryset.filter(bus__group_id=params['group'])
        if params.get('frequency'):
            queryset = queryset.filter(frequency_id=params['frequency'])
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = TripCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            trip = TripAssignmentService().create_trip(
                frequency_id=data['frequency'],
                bus_id=data['bus'],
                date=data['date'],
                departure_time=data.get('departure_time'),
                driver_id=data.get('driver'),
                assistant_id=data.get('assistant'),
                cooperative=self.get_cooperative(),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TripSerializer(trip).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = TripUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            trip = TripAssignmentService().update_trip(
                pk,
                cooperative=self.get_cooperative(),
                bus_id=data.get('bus'),
                date=data.get('date'),
                departure_time=data.get('departure_time'),
                driver_id=data.get('driver'),
                assistant_id=data.get('assistant'),
                status=data.get('status'),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TripSerializer(trip).data)

    @action(detail=True, methods=['post'], url_path='status')
    def change_status(self, request, pk=None):
        serializer = TripStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            trip = TripAssignmentService().update_status(
                pk, serializer.validated_data['status'], cooperative=self.get_cooperative()
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TripSerializer(trip).data)

    @action(detail=True, methods=['post'])
    def personnel(self, request, pk=None):
        serializer = PersonnelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            trip = TripAssignmentService().assign_personnel(
                pk,
                driver_id=data.get('driver'),
                assistant_id=data.get('assistant'),
                cooperative=self.get_cooperative(),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(TripSerializer(trip).data)

    @action(detail=True, methods=['get'])
    def seats(self, request, pk=None):
        """Seat map, open to any signed-in customer"""
        try:
            seat_map = SeatService().get_seat_map(pk)
        except ServiceError as e:
            return service_error_response(e)
        return Response(seat_map)

    @action(detail=True, methods=['get'])
    def manifest(self, request, pk=None):
        try:
            manifest = SeatService().get_passenger_manifest(
                pk,
                boarding_stop=request.query_params.get('stop'),
                cooperative=self.get_cooperative(),
            )
        except ServiceError as e:
            return service_error_response(e)
        return Response(manifest)

    @action(detail=False, methods=['get'], url_path='route-sheet')
    def route_sheet(self, request):
        serializer = RouteSheetQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            sheet = RouteSheetService().get_route_sheet(
                data['group_id'],
                data['start_date'],
                data['end_date'],
                cooperative=self.get_cooperative(),
            )
        except ServiceError as e:
            return service_error_response(e)
        return Response(sheet)

    @action(detail=False, methods=['get'])
    def search(self, request):
        """Bookable trips between two places on a day, open to customers"""
        serializer = TripSearchQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            trips = TripSearchService().search_trips(
                data['origin'],
                data['destination'],
                data['date'],
                cooperative_id=data.get('cooperative'),
                amenities=serializer.amenities(),
            )
        except ServiceError as e:
            return service_error_response(e)
        return Response(trips)

    @action(detail=False, methods=['get'], url_path='available-dates')
    def available_dates(self, request):
        serializer = AvailableDatesQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        try:
            dates = TripSearchService().available_dates(
                serializer.validated_data['origin'], serializer.validated_data['destination']
            )
        except ServiceError as e:
            return service_error_response(e)
        return Response({'dates': dates})
