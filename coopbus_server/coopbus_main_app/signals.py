from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Advisory seat events; kwargs: trip_id, seat_number, plus holder/expires_at for holds
seat_held = Signal()
seat_sold = Signal()
seat_released = Signal()


@receiver(seat_held)
def log_seat_held(sender, trip_id, seat_number, holder=None, expires_at=None, **kwargs):
    logger.info(f'[SIGNAL] Seat {seat_number} on trip {trip_id} held by {holder} until {expires_at}')


@receiver(seat_sold)
def log_seat_sold(sender, trip_id, seat_number, **kwargs):
    logger.info(f'[SIGNAL] Seat {seat_number} on trip {trip_id} sold')


@receiver(seat_released)
def log_seat_released(sender, trip_id, seat_number, **kwargs):
    logger.info(f'[SIGNAL] Seat {seat_number} on trip {trip_id} released')
