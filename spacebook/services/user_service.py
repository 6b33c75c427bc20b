from flask import current_app
from spacebook.models import User
from spacebook.models.user import ROLE_USER
from spacebook.extensions import db
from spacebook.errors import InvalidInputError, ConflictError
from spacebook.services.auth_service import AuthService

REQUIRED_FIELDS = ('email', 'password', 'first_name', 'last_name')


class UserService:

    @staticmethod
    def register(data, roles=None):
        missing = [f for f in REQUIRED_FIELDS if not data.get(f)]
        if missing:
            raise InvalidInputError("Missing required fields.", fields=missing)

        # Emails are matched case-sensitively, as stored
        if User.query.filter_by(email=data['email']).first():
            raise ConflictError("User already exists.")

        user = User(
            email=data['email'],
            first_name=data['first_name'],
            last_name=data['last_name'],
            password_hash=AuthService.hash(data['password']),
            roles=list(roles or [ROLE_USER])
        )
        db.session.add(user)
        db.session.commit()
        current_app.logger.info("User %s registered", user.id)
        return user

    @staticmethod
    def authenticate(email, password):
        user = User.query.filter_by(email=email).first()
        if not user or not AuthService.verify(password, user.password_hash):
            return None
        return user

    @staticmethod
    def update_profile(user, data):
        """
        Update names and, when the current password checks out, the password.
        Returns True when something changed.
        """
        updated = False
        for key in ('first_name', 'last_name'):
            value = data.get(key)
            if value and value != getattr(user, key):
                setattr(user, key, value)
                updated = True

        new_password = (data.get('new_password') or '').strip()
        if new_password:
            current_password = (data.get('current_password') or '').strip()
            if not current_password:
                raise InvalidInputError("Current password is required to change the password.")
            if not AuthService.verify(current_password, user.password_hash):
                raise InvalidInputError("Current password is incorrect.")
            user.password_hash = AuthService.hash(new_password)
            updated = True

        if updated:
            db.session.commit()
        return updated
