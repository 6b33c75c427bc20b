from datetime import datetime, timedelta, timezone
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash
import jwt


class AuthService:
    """Password hashing and token issuing. Kept outside the booking core."""

    @staticmethod
    def hash(plaintext):
        return generate_password_hash(plaintext, method='pbkdf2:sha256')

    @staticmethod
    def verify(plaintext, password_hash):
        if not plaintext or not password_hash:
            return False
        return check_password_hash(password_hash, plaintext)

    @staticmethod
    def issue_token(user):
        hours = current_app.config.get('JWT_EXPIRATION_HOURS', 24)
        return jwt.encode({
            'user_id': user.id,
            'roles': list(user.roles or []),
            'exp': datetime.now(timezone.utc) + timedelta(hours=hours)
        }, current_app.config['SECRET_KEY'], algorithm="HS256")

    @staticmethod
    def decode_token(token):
        """Raises jwt.InvalidTokenError on bad signature, expiry or garbage."""
        return jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=["HS256"])
