"""Frequency (schedule template) views"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..models import Frequency
from ..permissions import IsCooperativeAdmin, IsCooperativeStaff
from ..serializers import FrequencySerializer, FrequencyWriteSerializer, GenerateTripsSerializer
from ..services import FrequencyService, TripGenerationService, ServiceError
from .base import CooperativeScopedMixin, service_error_response, UUID_LOOKUP_REGEX


class FrequencyViewSet(CooperativeScopedMixin, viewsets.ReadOnlyModelViewSet):
    """Recurring departures of a cooperative plus batch trip generation"""
    serializer_class = FrequencySerializer
    authentication_classes = [JWTAuthentication]
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated(), IsCooperativeStaff()]
        return [IsAuthenticated(), IsCooperativeAdmin()]

    def get_queryset(self):
        queryset = Frequency.objects.select_related('route', 'bus_group').prefetch_related('route__stops')
        queryset = self.scope_queryset(queryset, 'cooperative')

        is_active = self.request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')
        group_id = self.request.query_params.get('group')
        if group_id:
            queryset = queryset.filter(bus_group_id=group_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = FrequencyWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            cooperative = self.get_cooperative()
            if cooperative is None:
                return Response({'error': 'Platform admins must create frequencies through a cooperative account'},
                                status=status.HTTP_400_BAD_REQUEST)
            frequency = FrequencyService().create_frequency(
                cooperative=cooperative,
                route_id=data['route'],
                departure_time=data['departure_time'],
                operating_days=data['operating_days'],
                bus_group_id=data.get('bus_group'),
                permit_number=data.get('permit_number'),
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(FrequencySerializer(frequency).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = FrequencyWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            frequency = FrequencyService().update_frequency(
                pk, cooperative=self.get_cooperative(), **serializer.validated_data
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(FrequencySerializer(frequency).data)

    def destroy(self, request, pk=None):
        """Soft delete"""
        try:
            FrequencyService().deactivate_frequency(pk, cooperative=self.get_cooperative())
        except ServiceError as e:
            return service_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'], url_path='generate-trips')
    def generate_trips(self, request):
        serializer = GenerateTripsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            report = TripGenerationService().generate_trips(
                data['start_date'],
                data['end_date'],
                frequency_ids=data['frequency_ids'] or None,
                cooperative=self.get_cooperative(),
            )
        except ServiceError as e:
            return service_error_response(e)

        payload = report.to_dict()
        payload['summary'] = {'created': len(report.created), 'skipped': len(report.skipped)}
        return Response(payload, status=status.HTTP_201_CREATED if report.created else status.HTTP_200_OK)
