"""Trip-related serializers"""
from rest_framework import serializers
from ..models import Trip, Bus
from ..utils.constants import TripStatus
from ..utils.schedule_utils import DEPARTURE_TIME_REGEX
from ..services.trip_search_service import AMENITY_FIELDS


class BusSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Bus
        fields = ['id', 'internal_number', 'plate', 'total_seats']


class TripSerializer(serializers.ModelSerializer):
    bus = BusSummarySerializer(read_only=True)
    route = serializers.SerializerMethodField()
    driver = serializers.SerializerMethodField()
    assistant = serializers.SerializerMethodField()

    class Meta:
        model = Trip
        fields = ['id', 'frequency', 'route', 'bus', 'date', 'departure_time', 'driver', 'assistant',
                  'status', 'created_at', 'updated_at']

    def get_route(self, obj):
        route = obj.frequency.route
        return {'id': str(route.id), 'origin': route.origin, 'destination': route.destination,
                'estimated_duration': route.estimated_duration}

    def get_driver(self, obj):
        return self._person(obj.driver)

    def get_assistant(self, obj):
        return self._person(obj.assistant)

    def _person(self, user):
        if user is None:
            return None
        return {'id': user.id, 'name': user.get_full_name() or user.username}


class TripCreateSerializer(serializers.Serializer):
    frequency = serializers.UUIDField()
    bus = serializers.UUIDField()
    date = serializers.DateField()
    departure_time = serializers.RegexField(DEPARTURE_TIME_REGEX, required=False)
    driver = serializers.IntegerField(required=False, allow_null=True)
    assistant = serializers.IntegerField(required=False, allow_null=True)


class TripUpdateSerializer(serializers.Serializer):
    bus = serializers.UUIDField(required=False)
    date = serializers.DateField(required=False)
    departure_time = serializers.RegexField(DEPARTURE_TIME_REGEX, required=False)
    driver = serializers.IntegerField(required=False, allow_null=True)
    assistant = serializers.IntegerField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=TripStatus.CHOICES, required=False)


class TripStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TripStatus.CHOICES)


class PersonnelSerializer(serializers.Serializer):
    driver = serializers.IntegerField(required=False, allow_null=True)
    assistant = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, data):
        if not data.get('driver') and not data.get('assistant'):
            raise serializers.ValidationError('driver or assistant is required')
        return data


class RouteSheetQuerySerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    date = serializers.DateField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, data):
        if data.get('date'):
            data['start_date'] = data['end_date'] = data['date']
        elif not (data.get('start_date') and data.get('end_date')):
            raise serializers.ValidationError('group_id and date, or start_date and end_date, are required')
        if data['start_date'] > data['end_date']:
            raise serializers.ValidationError('start_date must be on or before end_date')
        return data


class TripSearchQuerySerializer(serializers.Serializer):
    origin = serializers.CharField(max_length=100)
    destination = serializers.CharField(max_length=100)
    date = serializers.DateField()
    cooperative = serializers.UUIDField(required=False)
    has_ac = serializers.BooleanField(required=False, default=False)
    has_wifi = serializers.BooleanField(required=False, default=False)
    has_bathroom = serializers.BooleanField(required=False, default=False)

    def amenities(self):
        return [field for field in AMENITY_FIELDS if self.validated_data.get(field)]


class AvailableDatesQuerySerializer(serializers.Serializer):
    origin = serializers.CharField(max_length=100)
    destination = serializers.CharField(max_length=100)
