"""Frequency and route serializers"""
from rest_framework import serializers
from ..models import Frequency, Route, RouteStop
from ..utils.constants import Weekday
from ..utils.schedule_utils import DEPARTURE_TIME_REGEX


class RouteStopSerializer(serializers.ModelSerializer):
    class Meta:
        model = RouteStop
        fields = ['name', 'order', 'price_from_origin']


class RouteSerializer(serializers.ModelSerializer):
    stops = RouteStopSerializer(many=True, read_only=True)

    class Meta:
        model = Route
        fields = ['id', 'name', 'origin', 'destination', 'base_price', 'estimated_duration', 'distance', 'stops']


class FrequencySerializer(serializers.ModelSerializer):
    route = RouteSerializer(read_only=True)
    bus_group_name = serializers.CharField(source='bus_group.name', read_only=True, default=None)

    class Meta:
        model = Frequency
        fields = ['id', 'route', 'bus_group', 'bus_group_name', 'departure_time', 'operating_days',
                  'permit_number', 'is_active', 'created_at', 'updated_at']


class FrequencyWriteSerializer(serializers.Serializer):
    """Input for create (all required) and partial update"""
    route = serializers.UUIDField()
    bus_group = serializers.UUIDField(required=False, allow_null=True)
    departure_time = serializers.RegexField(DEPARTURE_TIME_REGEX, error_messages={'invalid': 'Invalid time format (HH:MM)'})
    operating_days = serializers.ListField(child=serializers.ChoiceField(choices=Weekday.ORDERED), allow_empty=False)
    permit_number = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=50)
    is_active = serializers.BooleanField(required=False)


class GenerateTripsSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    frequency_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)

    def validate(self, data):
        if data['start_date'] > data['end_date']:
            raise serializers.ValidationError('start_date must be on or before end_date')
        return data
