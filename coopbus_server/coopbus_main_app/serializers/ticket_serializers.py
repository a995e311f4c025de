"""Ticket and seat serializers"""
from rest_framework import serializers
from ..models import Ticket
from ..utils.constants import PaymentMethod


class TicketSerializer(serializers.ModelSerializer):
    class Meta:
        model = Ticket
        fields = ['id', 'trip', 'seat_number', 'seat_type', 'passenger_name', 'passenger_id_number',
                  'passenger_phone', 'passenger_email', 'boarding_stop', 'dropoff_stop', 'base_price',
                  'seat_premium', 'total_price', 'status', 'payment_method', 'payment_status', 'qr_code',
                  'is_used', 'used_at', 'created_at', 'cancelled_at']
        read_only_fields = fields


class SeatRequestSerializer(serializers.Serializer):
    trip = serializers.UUIDField()
    seat_number = serializers.IntegerField(min_value=1)


class SeatBookingSerializer(SeatRequestSerializer):
    boarding_stop = serializers.CharField(required=False, allow_blank=True, max_length=100)
    dropoff_stop = serializers.CharField(required=False, allow_blank=True, max_length=100)
    passenger_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    passenger_id_number = serializers.CharField(required=False, allow_blank=True, max_length=20)
    passenger_phone = serializers.CharField(required=False, allow_blank=True, max_length=20)
    passenger_email = serializers.EmailField(required=False, allow_blank=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, default=PaymentMethod.CASH)

    def passenger(self):
        return {
            field: self.validated_data.get(field)
            for field in ['passenger_name', 'passenger_id_number', 'passenger_phone', 'passenger_email']
        }


class FareQuoteQuerySerializer(serializers.Serializer):
    trip = serializers.UUIDField()
    boarding_stop = serializers.CharField(required=False)
    dropoff_stop = serializers.CharField(required=False)
    seat_type = serializers.CharField(required=False)
    seat_number = serializers.IntegerField(required=False, min_value=1)


class BoardingSerializer(serializers.Serializer):
    qr_code = serializers.CharField(max_length=64)
    trip = serializers.UUIDField(required=False)
