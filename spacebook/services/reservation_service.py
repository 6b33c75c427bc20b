from collections import namedtuple
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from flask import current_app
from spacebook.models import Space, Reservation
from spacebook.models.user import ROLE_ADMIN
from spacebook.models.reservation import (
    STATUSES, STATUS_MAX_LENGTH, STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_CANCELED
)
from spacebook.extensions import db
from spacebook.errors import NotFoundError, InvalidInputError, ForbiddenError, ConflictError
from spacebook.services.availability_service import AvailabilityService, space_locks
from spacebook.utils.dates import utcnow

# pending -> approved | rejected | canceled, approved -> canceled.
# rejected and canceled are terminal.
ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_APPROVED, STATUS_REJECTED, STATUS_CANCELED},
    STATUS_APPROVED: {STATUS_CANCELED},
    STATUS_REJECTED: set(),
    STATUS_CANCELED: set(),
}

# Fields fixed at creation. Rescheduling means cancel and create a new reservation.
IMMUTABLE_FIELDS = ('start_time', 'end_time', 'space_id')

CENT = Decimal('0.01')


class Requester(namedtuple('Requester', ['user_id', 'roles'])):
    """Identity and role set of whoever is calling into the lifecycle."""
    __slots__ = ()

    @classmethod
    def from_user(cls, user):
        return cls(user.id, frozenset(user.roles or []))

    @property
    def is_admin(self):
        return ROLE_ADMIN in self.roles

    def owns(self, reservation):
        return reservation.user_id == self.user_id


def compute_total_price(price, start_time: datetime, end_time: datetime) -> Decimal:
    """price per hour times duration in (fractional) hours, rounded to cents."""
    seconds = Decimal(int((end_time - start_time).total_seconds()))
    hours = seconds / Decimal(3600)
    return (Decimal(str(price)) * hours).quantize(CENT, rounding=ROUND_HALF_UP)


class ReservationService:

    @staticmethod
    def _strict():
        return current_app.config.get('STRICT_STATUS_TRANSITIONS', True)

    @staticmethod
    def _get_or_404(reservation_id):
        reservation = db.session.get(Reservation, reservation_id)
        if not reservation:
            raise NotFoundError("Reservation not found.")
        return reservation

    @staticmethod
    def _check_can_modify(reservation, requester):
        if not (requester.is_admin or requester.owns(reservation)):
            raise ForbiddenError("You are not allowed to modify this reservation.")

    @staticmethod
    def validate_transition(current, requested):
        if requested not in STATUSES:
            raise InvalidInputError(f"Unknown status '{requested}'.", allowed=list(STATUSES))
        if requested != current and requested not in ALLOWED_TRANSITIONS.get(current, set()):
            raise InvalidInputError(f"Cannot change status from '{current}' to '{requested}'.")

    @staticmethod
    def create(requester, space_id, start_time, end_time, attendees, notes=None):
        """
        Main entry point to book a space.

        Checks run in a fixed order and each failure raises its own error before
        anything is written. The whole check + insert runs under the space's lock
        (and a row lock on the space where the database supports it).
        """
        with space_locks.hold(space_id):
            try:
                # 1. Space exists
                space = db.session.get(Space, space_id, with_for_update=True)
                if not space:
                    raise NotFoundError("Space not found.")

                # 2. Space is bookable
                if not space.is_active:
                    raise InvalidInputError("Space is not available for reservations.")

                # 3. Interval
                if start_time >= end_time:
                    raise InvalidInputError("Start time must be before end time.")

                # 4. Future only
                if start_time <= utcnow():
                    raise InvalidInputError("Reservation must start in the future.")

                # 5. Capacity
                if attendees < 1:
                    raise InvalidInputError("At least one attendee is required.", capacity=space.capacity)
                if attendees > space.capacity:
                    raise InvalidInputError(
                        "Number of attendees exceeds the space capacity.",
                        capacity=space.capacity
                    )

                # 6. Availability
                if not AvailabilityService.is_available(space.id, start_time, end_time):
                    conflicts = AvailabilityService.find_conflicts(space.id, start_time, end_time)
                    current_app.logger.warning(
                        "Reservation conflict on space %s for %s - %s, blocked by %s",
                        space.id, start_time, end_time, [r.id for r in conflicts])
                    raise ConflictError("Space is already booked for this interval.")

                reservation = Reservation(
                    user_id=requester.user_id,
                    space_id=space.id,
                    start_time=start_time,
                    end_time=end_time,
                    attendees=attendees,
                    status=STATUS_PENDING,
                    total_price=compute_total_price(space.price, start_time, end_time),
                    notes=notes,
                    created_at=utcnow()
                )
                db.session.add(reservation)
                db.session.commit()
            except Exception:
                # Release the row lock, nothing was written
                db.session.rollback()
                raise

        current_app.logger.info(
            "Reservation %s created for user %s on space %s", reservation.id, requester.user_id, space_id)
        return reservation

    @staticmethod
    def update(reservation_id, requester, patch):
        """
        Admins may change status; the owner may change notes while pending.
        Times and space are fixed once created.
        """
        reservation = ReservationService._get_or_404(reservation_id)
        ReservationService._check_can_modify(reservation, requester)

        fixed = [f for f in IMMUTABLE_FIELDS if f in patch]
        if fixed:
            raise InvalidInputError(
                "Reservation times and space cannot be changed; cancel and create a new reservation.",
                fields=fixed
            )

        changed = False
        if requester.is_admin and 'status' in patch:
            new_status = patch['status']
            if not isinstance(new_status, str) or not new_status or len(new_status) > STATUS_MAX_LENGTH:
                raise InvalidInputError(
                    f"Status must be a non-empty string of at most {STATUS_MAX_LENGTH} characters.")
            if ReservationService._strict():
                ReservationService.validate_transition(reservation.status, new_status)
            if new_status != reservation.status:
                old_status = reservation.status
                reservation.status = new_status
                reservation.updated_at = utcnow()
                changed = True
                current_app.logger.info(
                    "Reservation %s status %s -> %s by user %s",
                    reservation.id, old_status, new_status, requester.user_id)

        if requester.owns(reservation) and reservation.status == STATUS_PENDING and 'notes' in patch:
            reservation.notes = patch['notes']
            reservation.updated_at = utcnow()
            changed = True

        if changed:
            db.session.commit()
        return reservation

    @staticmethod
    def cancel(reservation_id, requester):
        reservation = ReservationService._get_or_404(reservation_id)
        ReservationService._check_can_modify(reservation, requester)

        if reservation.start_time <= utcnow():
            raise InvalidInputError("Past reservations cannot be canceled.")

        if ReservationService._strict() and STATUS_CANCELED not in ALLOWED_TRANSITIONS.get(reservation.status, set()):
            raise InvalidInputError(f"A reservation that is '{reservation.status}' cannot be canceled.")

        reservation.status = STATUS_CANCELED
        reservation.updated_at = utcnow()
        db.session.commit()
        current_app.logger.info("Reservation %s canceled by user %s", reservation.id, requester.user_id)
        return reservation

    @staticmethod
    def get_for(reservation_id, requester):
        reservation = ReservationService._get_or_404(reservation_id)
        if not (requester.is_admin or requester.owns(reservation)):
            raise ForbiddenError("You are not allowed to view this reservation.")
        return reservation

    @staticmethod
    def list_for(requester):
        """Admins see every reservation, users only their own. Newest start first."""
        query = Reservation.query
        if not requester.is_admin:
            query = query.filter(Reservation.user_id == requester.user_id)
        return query.order_by(Reservation.start_time.desc()).all()

    @staticmethod
    def upcoming_for(user_id):
        """Get future, non-canceled reservations for a user."""
        return Reservation.query.filter(
            Reservation.user_id == user_id,
            Reservation.start_time > utcnow(),
            Reservation.status != STATUS_CANCELED
        ).order_by(Reservation.start_time).all()

    @staticmethod
    def list_for_space(space_id):
        return Reservation.query.filter(
            Reservation.space_id == space_id
        ).order_by(Reservation.start_time.desc()).all()

    @staticmethod
    def calendar(requester, range_start, range_end):
        """Non-canceled reservations overlapping [range_start, range_end), admins only."""
        if not requester.is_admin:
            raise ForbiddenError("Only administrators can view the full calendar.")
        if range_start >= range_end:
            raise InvalidInputError("Start date must be before end date.")
        return Reservation.query.filter(
            Reservation.status != STATUS_CANCELED,
            Reservation.end_time > range_start,
            Reservation.start_time < range_end
        ).order_by(Reservation.start_time).all()
