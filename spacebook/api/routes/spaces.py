from flask import Blueprint, request, jsonify
from spacebook.errors import InvalidInputError
from spacebook.services.availability_service import AvailabilityService
from spacebook.services.reservation_service import ReservationService, Requester
from spacebook.services.space_service import SpaceService
from spacebook.utils.dates import parse_datetime, parse_date, utcnow
from spacebook.utils.decorators import token_required, admin_required
from spacebook.utils.http import json_object

spaces_bp = Blueprint('spaces', __name__)


@spaces_bp.route('', methods=['GET'])
@token_required
def list_spaces(current_user):
    spaces = SpaceService.list_spaces(Requester.from_user(current_user))
    return jsonify([s.to_dict() for s in spaces])


@spaces_bp.route('/<int:space_id>', methods=['GET'])
@token_required
def get_space(current_user, space_id):
    space = SpaceService.get_space(space_id, Requester.from_user(current_user))
    return jsonify(space.to_dict())


@spaces_bp.route('', methods=['POST'])
@token_required
@admin_required
def create_space(current_user):
    data = json_object()
    space = SpaceService.create_space(data)
    return jsonify(space.to_dict()), 201


@spaces_bp.route('/<int:space_id>', methods=['PUT'])
@token_required
@admin_required
def update_space(current_user, space_id):
    data = json_object()
    space = SpaceService.update_space(space_id, data)
    return jsonify(space.to_dict()), 200


@spaces_bp.route('/<int:space_id>', methods=['DELETE'])
@token_required
@admin_required
def delete_space(current_user, space_id):
    deleted, message = SpaceService.delete_space(space_id)
    return jsonify({'message': message, 'deleted': deleted}), 200


@spaces_bp.route('/<int:space_id>/availability', methods=['POST'])
@token_required
def check_availability(current_user, space_id):
    space = SpaceService.get_or_404(space_id)
    data = json_object()
    if not data.get('start_time') or not data.get('end_time'):
        raise InvalidInputError("start_time and end_time are required.")
    try:
        start = parse_datetime(data['start_time'])
        end = parse_datetime(data['end_time'])
    except ValueError:
        raise InvalidInputError("Dates must be ISO-8601 formatted.")
    if start >= end:
        raise InvalidInputError("Start time must be before end time.")

    exclude_id = data.get('exclude_reservation_id')
    available = AvailabilityService.is_available(space.id, start, end, exclude_reservation_id=exclude_id)
    conflicts = [] if available else AvailabilityService.find_conflicts(
        space.id, start, end, exclude_reservation_id=exclude_id)
    return jsonify({
        'is_available': available,
        'conflicting_reservation_ids': [r.id for r in conflicts],
        'space_id': space.id,
        'start_time': start.isoformat(),
        'end_time': end.isoformat()
    })


@spaces_bp.route('/<int:space_id>/slots', methods=['GET'])
@token_required
def free_slots(current_user, space_id):
    space = SpaceService.get_space(space_id, Requester.from_user(current_user))
    date_str = request.args.get('date')
    try:
        day = parse_date(date_str) if date_str else utcnow().date()
    except ValueError:
        raise InvalidInputError("date must be formatted as YYYY-MM-DD.")
    return jsonify({
        'space_id': space.id,
        'date': day.isoformat(),
        'slots': AvailabilityService.free_slots(space.id, day)
    })


@spaces_bp.route('/<int:space_id>/reservations', methods=['GET'])
@token_required
@admin_required
def space_reservations(current_user, space_id):
    space = SpaceService.get_or_404(space_id)
    reservations = ReservationService.list_for_space(space.id)
    return jsonify([r.to_dict() for r in reservations])
