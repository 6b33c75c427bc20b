from functools import wraps
from flask import request, jsonify, current_app
import jwt
from spacebook.extensions import db
from spacebook.models.user import User
from spacebook.services.auth_service import AuthService

def token_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None
        if 'Authorization' in request.headers:
            # Bearer <token>
            auth_header = request.headers['Authorization']
            if auth_header.startswith("Bearer "):
                token = auth_header.split(" ", 1)[1]

        if not token:
            return jsonify({'message': 'Token is missing!'}), 401

        try:
            data = AuthService.decode_token(token)
        except jwt.InvalidTokenError as e:
            current_app.logger.info("Rejected token: %s", e)
            return jsonify({'message': 'Token is invalid!', 'error': str(e)}), 401

        current_user = db.session.get(User, data.get('user_id'))
        if not current_user:
            return jsonify({'message': 'Token is invalid!', 'error': 'User not found'}), 401

        return f(current_user, *args, **kwargs)

    return decorated

def admin_required(f):
    # Stack under token_required: @token_required then @admin_required,
    # which passes current_user as the first positional argument.
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user = args[0]
        if not current_user.is_admin:
            return jsonify({'message': 'Admin privilege required'}), 403
        return f(*args, **kwargs)
    return decorated
