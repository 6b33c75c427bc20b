from decimal import Decimal, InvalidOperation
from flask import current_app
from spacebook.models import Space
from spacebook.extensions import db
from spacebook.errors import NotFoundError, InvalidInputError, ForbiddenError

EDITABLE_FIELDS = ('name', 'description', 'price', 'capacity', 'location', 'amenities', 'image_url', 'is_active')


class SpaceService:

    @staticmethod
    def _clean(data, partial=False):
        """Validate incoming space fields; returns only the fields that were given."""
        cleaned = {}
        if not partial:
            missing = [f for f in ('name', 'price', 'capacity') if data.get(f) is None]
            if missing:
                raise InvalidInputError("Missing required fields.", fields=missing)

        if 'name' in data:
            name = (data.get('name') or '').strip()
            if not name:
                raise InvalidInputError("Space name cannot be empty.")
            cleaned['name'] = name

        if 'description' in data:
            cleaned['description'] = data.get('description') or ''

        if 'price' in data:
            try:
                price = Decimal(str(data['price']))
            except (InvalidOperation, TypeError):
                raise InvalidInputError("Price must be a number.")
            if not price.is_finite():
                raise InvalidInputError("Price must be a number.")
            if price < 0:
                raise InvalidInputError("Price cannot be negative.")
            cleaned['price'] = price

        if 'capacity' in data:
            capacity = data['capacity']
            if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
                raise InvalidInputError("Capacity must be a positive integer.")
            cleaned['capacity'] = capacity

        if 'amenities' in data:
            amenities = data['amenities'] or []
            if not isinstance(amenities, list) or not all(isinstance(a, str) for a in amenities):
                raise InvalidInputError("Amenities must be a list of strings.")
            cleaned['amenities'] = amenities

        for key in ('location', 'image_url'):
            if key in data:
                cleaned[key] = data[key]

        if 'is_active' in data:
            cleaned['is_active'] = bool(data['is_active'])

        return cleaned

    @staticmethod
    def find_active_spaces():
        return Space.query.filter(Space.is_active.is_(True)).order_by(Space.name).all()

    @staticmethod
    def list_spaces(requester):
        """Admins see the whole inventory, everyone else only active spaces."""
        if requester.is_admin:
            return Space.query.order_by(Space.name).all()
        return SpaceService.find_active_spaces()

    @staticmethod
    def get_or_404(space_id):
        space = db.session.get(Space, space_id)
        if not space:
            raise NotFoundError("Space not found.")
        return space

    @staticmethod
    def get_space(space_id, requester):
        space = SpaceService.get_or_404(space_id)
        if not space.is_active and not requester.is_admin:
            raise ForbiddenError("Space is not available.")
        return space

    @staticmethod
    def create_space(data):
        fields = SpaceService._clean(data)
        fields.setdefault('is_active', True)
        fields.setdefault('amenities', [])
        fields.setdefault('description', '')
        space = Space(**fields)
        db.session.add(space)
        db.session.commit()
        current_app.logger.info("Space %s created (%s)", space.id, space.name)
        return space

    @staticmethod
    def update_space(space_id, data):
        space = SpaceService.get_or_404(space_id)
        fields = SpaceService._clean({k: v for k, v in data.items() if k in EDITABLE_FIELDS}, partial=True)
        for key, value in fields.items():
            setattr(space, key, value)
        db.session.commit()
        return space

    @staticmethod
    def delete_space(space_id):
        """
        Remove a space. A space with any reservation history (whatever the status)
        is disabled instead of deleted.
        Returns (deleted, message).
        """
        space = SpaceService.get_or_404(space_id)

        if space.reservations.count() > 0:
            space.is_active = False
            db.session.commit()
            current_app.logger.info("Space %s has reservations, disabled instead of deleted", space.id)
            return False, "Space disabled because it has associated reservations."

        db.session.delete(space)
        db.session.commit()
        current_app.logger.info("Space %s deleted", space_id)
        return True, "Space deleted successfully."
