"""Centralized constants and business rules"""
from decimal import Decimal


class UserRole:
    SUPER_ADMIN = 'super_admin'
    ADMIN = 'admin'
    CLERK = 'clerk'
    DRIVER = 'driver'
    ASSISTANT = 'assistant'
    CLIENT = 'client'

    CHOICES = [
        (SUPER_ADMIN, 'Super Admin'),
        (ADMIN, 'Cooperative Admin'),
        (CLERK, 'Ticket Clerk'),
        (DRIVER, 'Driver'),
        (ASSISTANT, 'Assistant'),
        (CLIENT, 'Client'),
    ]


class AccountStatus:
    ACTIVE = 'active'
    INACTIVE = 'inactive'

    CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    ]


class BusStatus:
    ACTIVE = 'ACTIVE'
    MAINTENANCE = 'MAINTENANCE'
    INACTIVE = 'INACTIVE'

    CHOICES = [
        (ACTIVE, 'Active'),
        (MAINTENANCE, 'Maintenance'),
        (INACTIVE, 'Inactive'),
    ]


class SeatType:
    NORMAL = 'NORMAL'
    VIP = 'VIP'
    PREMIUM = 'PREMIUM'

    CHOICES = [
        (NORMAL, 'Normal'),
        (VIP, 'VIP'),
        (PREMIUM, 'Premium'),
    ]

    # Surcharge over the segment base fare
    PREMIUM_RATES = {
        NORMAL: Decimal('0.00'),
        VIP: Decimal('0.30'),
        PREMIUM: Decimal('0.50'),
    }


class Weekday:
    MONDAY = 'MONDAY'
    TUESDAY = 'TUESDAY'
    WEDNESDAY = 'WEDNESDAY'
    THURSDAY = 'THURSDAY'
    FRIDAY = 'FRIDAY'
    SATURDAY = 'SATURDAY'
    SUNDAY = 'SUNDAY'

    # Index matches date.weekday()
    ORDERED = [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY]

    CHOICES = [(day, day.capitalize()) for day in ORDERED]


class TripStatus:
    SCHEDULED = 'SCHEDULED'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    CHOICES = [
        (SCHEDULED, 'Scheduled'),
        (IN_PROGRESS, 'In Progress'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    TRANSITIONS = {
        SCHEDULED: {IN_PROGRESS, CANCELLED},
        IN_PROGRESS: {COMPLETED, CANCELLED},
        COMPLETED: set(),
        CANCELLED: set(),
    }


class TicketStatus:
    RESERVED = 'RESERVED'
    PENDING_PAYMENT = 'PENDING_PAYMENT'
    PAID = 'PAID'
    USED = 'USED'
    CANCELLED = 'CANCELLED'

    CHOICES = [
        (RESERVED, 'Reserved'),
        (PENDING_PAYMENT, 'Pending Payment'),
        (PAID, 'Paid'),
        (USED, 'Used'),
        (CANCELLED, 'Cancelled'),
    ]

    # Statuses that hold a seat exclusively
    SEAT_HOLDING = [RESERVED, PAID, USED]

    # Statuses counted as passengers on route sheets
    ON_BOARD_COUNTED = [PAID, RESERVED]

    MANIFEST = [PAID, USED]

    TRANSITIONS = {
        RESERVED: {PAID, CANCELLED},
        PENDING_PAYMENT: {PAID, CANCELLED},
        PAID: {USED, CANCELLED},
        USED: set(),
        CANCELLED: set(),
    }


class PaymentMethod:
    CASH = 'CASH'
    PAYPAL = 'PAYPAL'
    BANK_TRANSFER = 'BANK_TRANSFER'

    CHOICES = [
        (CASH, 'Cash'),
        (PAYPAL, 'PayPal'),
        (BANK_TRANSFER, 'Bank Transfer'),
    ]


class PaymentStatus:
    PENDING = 'PENDING'
    APPROVED = 'APPROVED'
    REJECTED = 'REJECTED'

    CHOICES = [
        (PENDING, 'Pending'),
        (APPROVED, 'Approved'),
        (REJECTED, 'Rejected'),
    ]


class SkipReason:
    GROUP_EXHAUSTED = 'group exhausted'
    NO_BUSES = 'no buses in group'
    DUPLICATE = 'duplicate'


class BusinessRules:
    """Business rules and limits"""
    DEFAULT_TURNAROUND_MINUTES = 30
    DEFAULT_SEAT_HOLD_SECONDS = 300
    RECENT_TRIPS_LOOKBACK = 5
    SEARCH_WINDOW_DAYS = 30
    CURRENCY_PRECISION = Decimal('0.01')
    QR_TOKEN_BYTES = 32
