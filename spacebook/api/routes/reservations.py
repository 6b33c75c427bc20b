from flask import Blueprint, request, jsonify
from spacebook.errors import InvalidInputError
from spacebook.services.reservation_service import ReservationService, Requester
from spacebook.utils.dates import parse_datetime
from spacebook.utils.decorators import token_required, admin_required
from spacebook.utils.http import json_object

reservations_bp = Blueprint('reservations', __name__)

REQUIRED_FIELDS = ('space_id', 'start_time', 'end_time', 'attendees')


def _parse_interval(start_value, end_value):
    try:
        return parse_datetime(start_value), parse_datetime(end_value)
    except ValueError:
        raise InvalidInputError("Dates must be ISO-8601 formatted.")


@reservations_bp.route('', methods=['GET'])
@token_required
def list_reservations(current_user):
    reservations = ReservationService.list_for(Requester.from_user(current_user))
    return jsonify([r.to_dict() for r in reservations])


@reservations_bp.route('/upcoming', methods=['GET'])
@token_required
def upcoming_reservations(current_user):
    reservations = ReservationService.upcoming_for(current_user.id)
    return jsonify([r.to_dict() for r in reservations])


@reservations_bp.route('/calendar', methods=['GET'])
@token_required
@admin_required
def calendar(current_user):
    start_date = request.args.get('start_date')
    end_date = request.args.get('end_date')
    if not start_date or not end_date:
        raise InvalidInputError("start_date and end_date are required.")
    start, end = _parse_interval(start_date, end_date)
    reservations = ReservationService.calendar(Requester.from_user(current_user), start, end)
    return jsonify([r.to_dict() for r in reservations])


@reservations_bp.route('/<int:reservation_id>', methods=['GET'])
@token_required
def get_reservation(current_user, reservation_id):
    reservation = ReservationService.get_for(reservation_id, Requester.from_user(current_user))
    return jsonify(reservation.to_dict())


@reservations_bp.route('', methods=['POST'])
@token_required
def create_reservation(current_user):
    data = json_object()
    missing = [f for f in REQUIRED_FIELDS if data.get(f) is None]
    if missing:
        raise InvalidInputError("Missing required fields.", fields=missing)

    start, end = _parse_interval(data['start_time'], data['end_time'])
    attendees = data['attendees']
    for key in ('space_id', 'attendees'):
        if not isinstance(data[key], int) or isinstance(data[key], bool):
            raise InvalidInputError(f"{key} must be an integer.")

    reservation = ReservationService.create(
        requester=Requester.from_user(current_user),
        space_id=data['space_id'],
        start_time=start,
        end_time=end,
        attendees=attendees,
        notes=data.get('notes')
    )
    return jsonify(reservation.to_dict()), 201


@reservations_bp.route('/<int:reservation_id>', methods=['PUT'])
@token_required
def update_reservation(current_user, reservation_id):
    data = json_object()
    reservation = ReservationService.update(reservation_id, Requester.from_user(current_user), data)
    return jsonify(reservation.to_dict()), 200


@reservations_bp.route('/<int:reservation_id>/cancel', methods=['PUT'])
@token_required
def cancel_reservation(current_user, reservation_id):
    reservation = ReservationService.cancel(reservation_id, Requester.from_user(current_user))
    return jsonify({
        'message': 'Reservation canceled successfully',
        'reservation': reservation.to_dict()
    }), 200
