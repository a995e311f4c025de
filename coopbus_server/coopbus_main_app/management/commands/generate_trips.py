"""Management command to expand active frequencies into trips over a date range"""
from datetime import datetime

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from coopbus_main_app.models import Cooperative
from coopbus_main_app.services import TripGenerationService, ServiceError


def parse_date(value):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise CommandError(f'Invalid date "{value}", expected YYYY-MM-DD')


class Command(BaseCommand):
    help = 'Generate trips from active frequencies for an inclusive date range'

    def add_arguments(self, parser):
        parser.add_argument('--start', required=True, help='First day (YYYY-MM-DD)')
        parser.add_argument('--end', required=True, help='Last day (YYYY-MM-DD)')
        parser.add_argument('--frequency', action='append', dest='frequencies', default=[],
                            help='Frequency ID to include (repeatable, default: all active)')
        parser.add_argument('--cooperative', help='Restrict to one cooperative ID')
        parser.add_argument('--turnaround', type=int, help='Turnaround minutes (default: settings)')

    def handle(self, *args, **options):
        start_date = parse_date(options['start'])
        end_date = parse_date(options['end'])

        cooperative = None
        if options['cooperative']:
            try:
                cooperative = Cooperative.objects.get(id=options['cooperative'])
            except (Cooperative.DoesNotExist, ValidationError):
                raise CommandError(f"Cooperative {options['cooperative']} not found")

        service = TripGenerationService(turnaround_minutes=options['turnaround'])
        try:
            report = service.generate_trips(
                start_date, end_date,
                frequency_ids=options['frequencies'] or None,
                cooperative=cooperative,
            )
        except ServiceError as e:
            raise CommandError(e.reason)

        for item in report.created:
            trip = item.trip
            notes = []
            if item.assignment.continuity:
                notes.append('continuity')
            if item.assignment.via_fallback:
                notes.append('fallback')
            if item.assignment.turnaround_violated:
                notes.append('turnaround violated')
            suffix = f" [{', '.join(notes)}]" if notes else ''
            self.stdout.write(
                f'+ {trip.date} {trip.departure_time} {trip.frequency.route} '
                f'bus #{item.assignment.bus.internal_number} driver={trip.driver_id or "-"}{suffix}'
            )

        for item in report.skipped:
            self.stdout.write(f'- {item.date or "*"} frequency {item.frequency_id}: {item.reason}')

        self.stdout.write(self.style.SUCCESS(
            f'Completed: {len(report.created)} trips created, {len(report.skipped)} slots skipped'
        ))
