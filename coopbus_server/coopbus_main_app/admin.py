from django.contrib import admin
from .models import Cooperative, Profile, Route, RouteStop, Frequency, BusGroup, Bus, Trip, Ticket

# Customize admin site
admin.site.site_header = "CoopBus Administration"
admin.site.site_title = "CoopBus Admin"
admin.site.index_title = "Cooperative scheduling and ticketing"


@admin.register(Cooperative)
class CooperativeAdmin(admin.ModelAdmin):
    list_display = ['name', 'ruc', 'contact_email', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'ruc']


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'cooperative', 'role', 'status']
    list_filter = ['role', 'status', 'cooperative']
    search_fields = ['user__username', 'user__first_name', 'user__last_name', 'id_number']


class RouteStopInline(admin.TabularInline):
    model = RouteStop
    extra = 1


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = ['name', 'origin', 'destination', 'base_price', 'estimated_duration', 'cooperative', 'is_active']
    list_filter = ['cooperative', 'is_active']
    search_fields = ['name', 'origin', 'destination']
    inlines = [RouteStopInline]


@admin.register(Frequency)
class FrequencyAdmin(admin.ModelAdmin):
    list_display = ['route', 'departure_time', 'bus_group', 'operating_days', 'permit_number', 'is_active']
    list_filter = ['cooperative', 'bus_group', 'is_active']
    search_fields = ['route__origin', 'route__destination', 'permit_number']


@admin.register(BusGroup)
class BusGroupAdmin(admin.ModelAdmin):
    list_display = ['name', 'cooperative', 'is_active', 'created_at']
    list_filter = ['cooperative', 'is_active']


@admin.register(Bus)
class BusAdmin(admin.ModelAdmin):
    list_display = ['internal_number', 'plate', 'group', 'cooperative', 'total_seats', 'status']
    list_filter = ['cooperative', 'group', 'status']
    search_fields = ['plate']
    ordering = ['cooperative', 'internal_number']


@admin.register(Trip)
class TripAdmin(admin.ModelAdmin):
    list_display = ['id', 'frequency', 'bus', 'date', 'departure_time', 'driver', 'status']
    list_filter = ['status', 'date', 'frequency__cooperative']
    date_hierarchy = 'date'
    ordering = ['-date', 'departure_time']
    list_per_page = 50
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ['id', 'trip', 'seat_number', 'passenger_name', 'total_price', 'status', 'payment_status']
    list_filter = ['status', 'payment_method', 'payment_status']
    search_fields = ['passenger_name', 'passenger_id_number', 'qr_code']
    readonly_fields = ['qr_code', 'created_at', 'used_at', 'cancelled_at']
    list_per_page = 50
