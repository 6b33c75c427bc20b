import threading
import weakref
from contextlib import contextmanager
from datetime import datetime, timedelta
from flask import current_app
from spacebook.models import Reservation
from spacebook.models.reservation import STATUS_CANCELED
from spacebook.utils.dates import utcnow


def has_time_overlap(start_a, end_a, start_b, end_b) -> bool:
    """
    Half-open interval overlap: [start_a, end_a) and [start_b, end_b).
    Touching boundaries (10:00-11:00 and 11:00-12:00) do not overlap.
    """
    return end_a > start_b and start_a < end_b


class SpaceLockRegistry:
    """
    One mutex per space id, held across availability check and insert so two
    requests for the same space cannot both pass the check before either commits.
    Entries live only while some caller holds a reference to the lock, so ids
    that are never booked again (or never existed) do not pile up.
    Only covers a single process; the row lock taken in ReservationService.create
    covers the rest on databases that support SELECT ... FOR UPDATE.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = weakref.WeakValueDictionary()

    def lock_for(self, space_id):
        with self._guard:
            lock = self._locks.get(space_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[space_id] = lock
            return lock

    def __len__(self):
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, space_id):
        lock = self.lock_for(space_id)
        with lock:
            yield


space_locks = SpaceLockRegistry()


class AvailabilityService:

    @staticmethod
    def _blocking_query(space_id, start_time, end_time, exclude_reservation_id=None):
        # (ExistingEnd > Start) and (ExistingStart < End)
        query = Reservation.query.filter(
            Reservation.space_id == space_id,
            Reservation.status != STATUS_CANCELED,
            Reservation.end_time > start_time,
            Reservation.start_time < end_time
        )
        if exclude_reservation_id is not None:
            query = query.filter(Reservation.id != exclude_reservation_id)
        return query

    @staticmethod
    def is_available(space_id, start_time: datetime, end_time: datetime, exclude_reservation_id=None) -> bool:
        """
        Check if the space is free during [start_time, end_time).
        Ordering of start/end is the caller's job. Pass exclude_reservation_id to
        re-check a reservation's own interval without it conflicting with itself.
        """
        count = AvailabilityService._blocking_query(
            space_id, start_time, end_time, exclude_reservation_id
        ).count()
        return count == 0

    @staticmethod
    def find_conflicts(space_id, start_time, end_time, exclude_reservation_id=None):
        return AvailabilityService._blocking_query(
            space_id, start_time, end_time, exclude_reservation_id
        ).order_by(Reservation.start_time).all()

    @staticmethod
    def free_slots(space_id, day):
        """
        Return the free [start, end) gaps of a space on a given date, inside the
        configured day window. Gaps before now are dropped for today.
        """
        window_start = datetime.combine(day, datetime.min.time()).replace(
            hour=current_app.config['DAY_WINDOW_START'])
        window_end = datetime.combine(day, datetime.min.time()).replace(
            hour=current_app.config['DAY_WINDOW_END'])

        reservations = AvailabilityService._blocking_query(
            space_id, window_start, window_end
        ).order_by(Reservation.start_time).all()

        cursor = window_start
        now = utcnow()
        if now > cursor:
            cursor = now
            # Round up to next 15 min for cleanliness
            minute = cursor.minute
            if minute % 15 != 0 or cursor.second or cursor.microsecond:
                cursor = cursor.replace(second=0, microsecond=0) + timedelta(minutes=15 - (minute % 15))
        if cursor >= window_end:
            return []

        free = []
        for r in reservations:
            if r.start_time > cursor:
                free.append({
                    "start": cursor.isoformat(),
                    "end": min(r.start_time, window_end).isoformat()
                })
            cursor = max(cursor, r.end_time)

        # Final gap
        if cursor < window_end:
            free.append({
                "start": cursor.isoformat(),
                "end": window_end.isoformat()
            })
        return free
